"""In-memory read model.

``InMemoryReadModelStore`` is the projector-side port (tombstones visible,
compare-and-swap upserts); ``InMemoryReadModelRepository`` is the query
view over the same documents (tombstones hidden).
"""

import asyncio

from iam_admin.domain.enums import AggregateType
from iam_admin.domain.errors import normalize_key
from iam_admin.domain.value_objects import Criteria, Page, PageRequest, ReadModelDocument
from iam_admin.infrastructure.memory.filtering import matches, paginate

DOCUMENT_SORT_FIELDS = frozenset({"created_at", "updated_at"})


def _sort_value(document: ReadModelDocument, name: str) -> object:
    if name in DOCUMENT_SORT_FIELDS:
        return getattr(document, name)
    return document.data.get(name)


class InMemoryReadModelStore:
    """Documents keyed by (aggregate type, id)."""

    def __init__(self) -> None:
        self._documents: dict[AggregateType, dict[str, ReadModelDocument]] = {
            kind: {} for kind in AggregateType
        }
        self._lock = asyncio.Lock()

    def documents(self, aggregate_type: AggregateType) -> dict[str, ReadModelDocument]:
        return self._documents[aggregate_type]

    async def get(
        self, aggregate_type: AggregateType, aggregate_id: str
    ) -> ReadModelDocument | None:
        return self._documents[aggregate_type].get(aggregate_id)

    async def upsert(self, document: ReadModelDocument, *, expected_version: int) -> bool:
        async with self._lock:
            documents = self._documents[document.aggregate_type]
            current = documents.get(document.id)
            actual = current.last_applied_version if current is not None else 0
            if actual != expected_version:
                return False
            documents[document.id] = document
            return True


class InMemoryReadModelRepository:
    """Query view over an InMemoryReadModelStore."""

    def __init__(self, store: InMemoryReadModelStore) -> None:
        self._store = store

    async def get(
        self, aggregate_type: AggregateType, aggregate_id: str
    ) -> ReadModelDocument | None:
        document = await self._store.get(aggregate_type, aggregate_id)
        if document is None or document.deleted:
            return None
        return document

    async def find_by_natural_key(
        self,
        aggregate_type: AggregateType,
        field: str,
        value: str,
        tenant_id: str | None,
    ) -> ReadModelDocument | None:
        wanted = normalize_key(field, value)
        for document in self._store.documents(aggregate_type).values():
            if document.deleted:
                continue
            if tenant_id is not None and document.tenant_id != tenant_id:
                continue
            current = document.data.get(field)
            if isinstance(current, str) and normalize_key(field, current) == wanted:
                return document
        return None

    def _matching(
        self, aggregate_type: AggregateType, criteria: Criteria
    ) -> list[ReadModelDocument]:
        return [
            document
            for document in self._store.documents(aggregate_type).values()
            if matches(
                criteria,
                scope=document.scope,
                status=document.status,
                deleted=document.deleted,
                values=document.data,
            )
        ]

    async def list(
        self, aggregate_type: AggregateType, criteria: Criteria, page: PageRequest
    ) -> Page[ReadModelDocument]:
        return paginate(self._matching(aggregate_type, criteria), page, _sort_value)

    async def count(self, aggregate_type: AggregateType, criteria: Criteria) -> int:
        return len(self._matching(aggregate_type, criteria))
