"""Shared command pipeline.

Every command handler runs the same ordered contract:

1. Shape validation (pure)
2. Business-rule validation (write repository reads)
3. Construct or mutate the aggregate in memory
4. Persist snapshot + outbox records with compare-and-swap on version
5. Hand the events to the dispatcher
6. Clear the aggregate's event buffer

Steps 1-3 live in the concrete handlers; ``_commit`` runs steps 4-6.
A failed step 4 returns its Failure and publishes nothing. A failed step 5 is
logged as a warning only: the events are already durable in the outbox.

Architecture:
    - Application layer imports only core and domain
    - Repositories, dispatcher and logger are injected via protocols
    - ``InfrastructureFault`` raised by adapters becomes
      ``Failure(InfrastructureError)`` at the ``handle`` boundary
"""

from typing import Any, Generic, TypeVar

from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import (
    BusinessRuleViolation,
    ConcurrencyConflict,
    DomainError,
    InfrastructureFault,
    NotFoundError,
)
from iam_admin.core.result import Failure, Result, Success
from iam_admin.domain.aggregates import (
    Aggregate,
    clear_events,
    mark_deleted,
    mark_persisted,
)
from iam_admin.domain.entities.scoped_entity import ScopedEntity
from iam_admin.domain.errors import Rule, duplicate_key_violation
from iam_admin.domain.protocols import (
    EntityRepository,
    EventDispatcherProtocol,
    LoggerProtocol,
)
from iam_admin.domain.value_objects import Criteria

C = TypeVar("C")
R = TypeVar("R")
E = TypeVar("E", bound=ScopedEntity)


class CommandHandler(Generic[C, R]):
    """Base class for command handlers.

    Subclasses implement ``_execute``; callers use ``handle``.
    """

    def __init__(
        self,
        *,
        dispatcher: EventDispatcherProtocol,
        logger: LoggerProtocol,
    ) -> None:
        """Initialize handler with dependencies.

        Args:
            dispatcher: Post-commit event dispatcher (step 5).
            logger: Structured logger; bound with the handler name.
        """
        self._dispatcher = dispatcher
        self._logger = logger.bind(handler=type(self).__name__)

    async def handle(self, cmd: C) -> Result[R, DomainError]:
        """Run the command.

        Returns:
            Success with the handler's value, or Failure with a DomainError.
            Never raises for store faults or unexpected errors.
        """
        try:
            return await self._execute(cmd)
        except InfrastructureFault as fault:
            self._logger.error(
                "command_infrastructure_fault",
                error=fault,
                command=type(cmd).__name__,
                operation=fault.error.operation,
                retryable=fault.retryable,
            )
            return Failure(error=fault.error)
        except Exception as e:
            self._logger.error(
                "command_unexpected_error",
                error=e,
                command=type(cmd).__name__,
            )
            return Failure(
                error=DomainError(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="An unexpected error occurred",
                )
            )

    async def _execute(self, cmd: C) -> Result[R, DomainError]:
        raise NotImplementedError

    async def _load(
        self,
        repository: EntityRepository[E],
        resource_type: str,
        entity_id: str,
        expected_version: int | None = None,
    ) -> Result[Aggregate[E], NotFoundError | ConcurrencyConflict]:
        """Load a non-deleted entity and check the caller's expected version."""
        entity = await repository.find_by_id(entity_id)
        if entity is None:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.RESOURCE_NOT_FOUND,
                    message=f"{resource_type} not found",
                    resource_type=resource_type,
                    resource_id=entity_id,
                )
            )
        if expected_version is not None and expected_version != entity.version:
            return Failure(
                error=ConcurrencyConflict(
                    code=ErrorCode.CONCURRENCY_CONFLICT,
                    message=f"{resource_type} was modified by another request",
                    resource_type=resource_type,
                    resource_id=entity_id,
                    expected_version=expected_version,
                    actual_version=entity.version,
                )
            )
        return Success(value=Aggregate.load(entity))

    async def _ensure_unique_keys(
        self,
        repository: EntityRepository[Any],
        values: dict[str, str | None],
        *,
        tenant_id: str | None,
        resource_type: str,
        exclude_id: str | None = None,
    ) -> Result[None, BusinessRuleViolation]:
        """Reject natural-key values already used by another entity.

        Args:
            repository: Repository of the entity kind.
            values: Natural key name to proposed value; None values are skipped.
            tenant_id: Tenant to search in; None means platform-wide.
            resource_type: Kind name for messages.
            exclude_id: Entity being updated (its own values do not clash).
        """
        for key, value in values.items():
            if value is None:
                continue
            existing = await repository.find_by_unique_key(key, value, tenant_id)
            if existing is not None and existing.id != exclude_id:
                return Failure(error=duplicate_key_violation(resource_type, key, value))
        return Success(value=None)

    async def _require_reference(
        self,
        repository: EntityRepository[E],
        reference_id: str,
        *,
        field: str,
        resource_type: str,
        tenant_id: str | None = None,
        organization_id: str | None = None,
    ) -> Result[E, BusinessRuleViolation]:
        """Load a referenced entity and check it sits in the expected scope."""
        entity = await repository.find_by_id(reference_id)
        if entity is None:
            return Failure(
                error=BusinessRuleViolation(
                    code=ErrorCode.REFERENCE_NOT_FOUND,
                    message=f"Referenced {resource_type} does not exist",
                    rule=Rule.REFERENCE_EXISTS,
                    field=field,
                    details={"id": reference_id},
                )
            )
        if (tenant_id is not None and entity.tenant_id != tenant_id) or (
            organization_id is not None and entity.organization_id != organization_id
        ):
            return Failure(
                error=BusinessRuleViolation(
                    code=ErrorCode.REFERENCE_SCOPE_MISMATCH,
                    message=f"Referenced {resource_type} belongs to another scope",
                    rule=Rule.REFERENCE_IN_SCOPE,
                    field=field,
                    details={"id": reference_id},
                )
            )
        return Success(value=entity)

    async def _reject_if_children(
        self,
        repository: EntityRepository[Any],
        criteria: Criteria,
        *,
        resource_type: str,
        child_type: str,
    ) -> Result[None, BusinessRuleViolation]:
        """Fail when any non-deleted entity matches ``criteria``."""
        children = await repository.count(criteria)
        if children:
            return Failure(
                error=BusinessRuleViolation(
                    code=ErrorCode.HAS_CHILDREN,
                    message=f"{resource_type} still has {children} {child_type}(s)",
                    rule=Rule.NO_CHILDREN,
                    details={"children": str(children)},
                )
            )
        return Success(value=None)

    async def _soft_delete(
        self,
        repository: EntityRepository[E],
        aggregate: Aggregate[E],
        actor: str,
    ) -> Result[None, DomainError]:
        """Mark DELETED and commit."""
        deleted = mark_deleted(aggregate, actor=actor)
        if isinstance(deleted, Failure):
            return deleted
        committed = await self._commit(aggregate, repository)
        if isinstance(committed, Failure):
            return committed
        self._logger.info(
            "entity_deleted",
            aggregate_type=aggregate.aggregate_type.value,
            aggregate_id=aggregate.id,
            tenant_id=aggregate.entity.tenant_id,
            actor=actor,
        )
        return Success(value=None)

    async def _commit(
        self, aggregate: Aggregate[E], repository: EntityRepository[E]
    ) -> Result[None, ConcurrencyConflict | BusinessRuleViolation]:
        """Persist, publish and clear (pipeline steps 4-6).

        An aggregate without pending events is a no-op: nothing is written.
        """
        if not aggregate.has_pending_events:
            return Success(value=None)

        events = list(aggregate.pending_events)

        # Step 4: Snapshot + outbox, one transaction, CAS on version
        saved = await repository.save(
            aggregate.entity,
            expected_version=aggregate.persisted_version,
            events=events,
        )
        if isinstance(saved, Failure):
            self._logger.warning(
                "aggregate_persist_rejected",
                aggregate_id=aggregate.id,
                aggregate_type=aggregate.aggregate_type.value,
                error_code=saved.error.code.value,
            )
            return saved

        # Step 5: Dispatch; the outbox already holds the events
        try:
            await self._dispatcher.publish(events)
        except Exception as e:
            self._logger.warning(
                "event_dispatch_deferred",
                aggregate_id=aggregate.id,
                event_count=len(events),
                error_type=type(e).__name__,
                error_message=str(e),
            )

        # Step 6: Clear buffer
        clear_events(aggregate)
        mark_persisted(aggregate)
        return Success(value=None)
