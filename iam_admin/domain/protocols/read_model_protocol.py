"""Read model ports.

``ReadModelStore`` is the projector's write access to documents;
``ReadModelRepository`` is the query surface. Both are served by the same
backend (MongoDB or in-memory) but only the projector writes.
"""

from typing import Protocol

from iam_admin.domain.enums import AggregateType
from iam_admin.domain.value_objects import Criteria, Page, PageRequest, ReadModelDocument


class ReadModelStore(Protocol):
    """Projector-side document access."""

    async def get(
        self, aggregate_type: AggregateType, aggregate_id: str
    ) -> ReadModelDocument | None:
        """Return the document, tombstoned or not, or None."""
        ...

    async def upsert(self, document: ReadModelDocument, *, expected_version: int) -> bool:
        """Write ``document`` if the stored ``last_applied_version`` equals
        ``expected_version`` (0 means the document must not exist).

        Returns:
            True if written, False if another writer got there first.
        """
        ...


class ReadModelRepository(Protocol):
    """Query-side access. Tombstoned documents are never returned."""

    async def get(
        self, aggregate_type: AggregateType, aggregate_id: str
    ) -> ReadModelDocument | None:
        ...

    async def find_by_natural_key(
        self,
        aggregate_type: AggregateType,
        field: str,
        value: str,
        tenant_id: str | None,
    ) -> ReadModelDocument | None:
        ...

    async def list(
        self, aggregate_type: AggregateType, criteria: Criteria, page: PageRequest
    ) -> Page[ReadModelDocument]:
        """Return one page, sorted by ``page.sort_by``."""
        ...

    async def count(self, aggregate_type: AggregateType, criteria: Criteria) -> int:
        ...
