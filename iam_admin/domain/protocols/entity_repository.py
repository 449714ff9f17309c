"""Write repository protocol for scoped entities.

Port (interface) for hexagonal architecture. The write store holds one
snapshot row per entity and appends the entity's pending events to the
transactional outbox in the same transaction as the snapshot write.

Implementations:
    - SQLAlchemy repositories: iam_admin/infrastructure/persistence/repositories/
    - InMemoryWriteStore views: iam_admin/infrastructure/memory/write_store.py
"""

from collections.abc import Sequence
from typing import Protocol, TypeVar

from iam_admin.core.errors import BusinessRuleViolation, ConcurrencyConflict
from iam_admin.core.result import Result
from iam_admin.domain.entities.scoped_entity import ScopedEntity
from iam_admin.domain.events.base_event import DomainEvent
from iam_admin.domain.value_objects import Criteria, Page, PageRequest

E = TypeVar("E", bound=ScopedEntity)


class EntityRepository(Protocol[E]):
    """Entity repository protocol (port).

    This is a Protocol (not ABC) for structural typing. Implementations
    don't need to inherit from this.

    Genuine faults (timeouts, lost connections) are raised as
    ``InfrastructureFault``; expected outcomes are return values.

    Methods:
        save: Upsert snapshot with compare-and-swap and outbox append
        find_by_id: Retrieve a non-deleted entity by id
        find_by_unique_key: Retrieve a non-deleted entity by natural key
        find_by_criteria: Page through entities matching criteria
        count: Count entities matching criteria
        delete: Hard-delete a row (dependent cleanup only)
    """

    async def save(
        self,
        entity: E,
        *,
        expected_version: int,
        events: Sequence[DomainEvent],
    ) -> Result[None, ConcurrencyConflict | BusinessRuleViolation]:
        """Persist ``entity`` and append ``events`` to the outbox atomically.

        Args:
            entity: Snapshot to store (its ``version`` is the new version).
            expected_version: Version the stored row must currently have;
                0 means the row must not exist yet.
            events: Pending events, in version order.

        Returns:
            Success(None) on commit.
            Failure(ConcurrencyConflict) if the stored version differs.
            Failure(BusinessRuleViolation) if a natural-key unique index
                rejected the write (a concurrent duplicate create).
        """
        ...

    async def find_by_id(self, entity_id: str) -> E | None:
        """Find a non-deleted entity by id.

        Returns:
            Entity if found and not DELETED, None otherwise.
        """
        ...

    async def find_by_unique_key(
        self, key: str, value: str, tenant_id: str | None
    ) -> E | None:
        """Find a non-deleted entity by natural key.

        Args:
            key: One of the entity's natural keys (e.g. "code").
            value: Value to match (case-insensitive for email and domain).
            tenant_id: Tenant to search in; None searches platform-wide.
        """
        ...

    async def find_by_criteria(
        self, criteria: Criteria, page: PageRequest
    ) -> Page[E]:
        """Return one page of entities matching ``criteria``."""
        ...

    async def count(self, criteria: Criteria) -> int:
        """Count entities matching ``criteria``."""
        ...

    async def delete(self, entity_id: str) -> bool:
        """Hard-delete a row.

        Returns:
            True if a row was removed, False if none existed.
        """
        ...
