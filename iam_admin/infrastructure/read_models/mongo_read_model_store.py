"""MongoDB read model adapters (Motor).

One collection per aggregate type. Documents use the shape of
``ReadModelDocument.to_dict``: ``_id`` is the aggregate id, scope fields are
top-level for filtering and business fields sit under ``data``.

Writes are compare-and-swap on ``last_applied_version``:
    - expected 0: ``insert_one``; a duplicate ``_id`` means another writer won
    - otherwise: ``replace_one`` filtered on the expected version

Every call runs under the store timeout; PyMongo errors become
``InfrastructureFault``.
"""

import re
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from iam_admin.domain.entities.scope import Scope
from iam_admin.domain.enums import AggregateType, IsolationLevel, PrivacyLevel
from iam_admin.domain.errors import CASE_INSENSITIVE_KEYS
from iam_admin.domain.value_objects import (
    SEARCH_FIELDS,
    Criteria,
    Page,
    PageRequest,
    ReadModelDocument,
)
from iam_admin.infrastructure.errors import read_store_fault
from iam_admin.infrastructure.timeouts import with_timeout

T = TypeVar("T")

COLLECTIONS: dict[AggregateType, str] = {
    AggregateType.TENANT: "tenants",
    AggregateType.ORGANIZATION: "organizations",
    AggregateType.DEPARTMENT: "departments",
    AggregateType.USER: "users",
    AggregateType.NOTIFICATION_TEMPLATE: "notification_templates",
}

TOP_LEVEL_SORT_FIELDS = frozenset({"created_at", "updated_at"})

INDEXED_FIELDS = ("tenant_id", "organization_id", "department_ids", "status", "created_at")


def build_query(criteria: Criteria) -> dict[str, Any]:
    """Translate criteria into a MongoDB filter."""
    query: dict[str, Any] = {}
    if not criteria.include_deleted:
        query["deleted"] = False
    if criteria.tenant_id is not None:
        query["tenant_id"] = criteria.tenant_id
    if criteria.organization_id is not None:
        query["organization_id"] = criteria.organization_id
    if criteria.department_ids is not None:
        query["department_ids"] = {"$in": list(criteria.department_ids)}
    if criteria.status is not None:
        query["status"] = criteria.status.value
    for name, value in criteria.field_filters.items():
        query[f"data.{name}"] = value
    if criteria.search:
        pattern = re.escape(criteria.search)
        query["$or"] = [
            {f"data.{name}": {"$regex": pattern, "$options": "i"}}
            for name in SEARCH_FIELDS
        ]
    if criteria.accessor is not None:
        query["$and"] = access_clauses(criteria.accessor)
    return query


def _levels(predicate: Callable[[int], bool]) -> dict[str, list[str]]:
    return {"$in": [level.value for level in IsolationLevel if predicate(level.rank)]}


def access_clauses(accessor: Scope) -> list[dict[str, Any]]:
    """Express ``can_access(accessor, document)`` as MongoDB filter clauses.

    Mirrors the isolation checks (tenant, level rank, organization,
    department and user dimensions down to the document's level) and then
    the privacy rule for each privacy level.
    """
    rank = accessor.isolation_level.rank
    clauses: list[dict[str, Any]] = []
    if accessor.isolation_level is not IsolationLevel.PLATFORM:
        clauses.append({"tenant_id": accessor.tenant_id})
    clauses.append({"isolation_level": _levels(lambda r: r >= rank)})

    if accessor.organization_id is not None:
        clauses.append(
            {
                "$or": [
                    {"isolation_level": _levels(lambda r: r < IsolationLevel.ORGANIZATION.rank)},
                    {"organization_id": accessor.organization_id},
                ]
            }
        )
    if accessor.department_ids:
        clauses.append(
            {
                "$or": [
                    {"isolation_level": _levels(lambda r: r < IsolationLevel.DEPARTMENT.rank)},
                    {"department_ids": {"$in": list(accessor.department_ids)}},
                ]
            }
        )
    if accessor.isolation_level is IsolationLevel.USER:
        clauses.append(
            {
                "$or": [
                    {"isolation_level": _levels(lambda r: r < IsolationLevel.USER.rank)},
                    {"owner_user_id": accessor.user_id},
                ]
            }
        )

    if accessor.department_ids:
        protected = {"department_ids": {"$in": list(accessor.department_ids)}}
    else:
        protected = {"department_ids": {"$size": 0}}
    privacy: list[dict[str, Any]] = [
        {"privacy_level": PrivacyLevel.PROTECTED.value, **protected},
    ]
    if accessor.organization_id is None:
        privacy.append({"privacy_level": PrivacyLevel.SHARED.value})
    else:
        privacy.append(
            {
                "privacy_level": PrivacyLevel.SHARED.value,
                "organization_id": {"$in": [None, accessor.organization_id]},
            }
        )
    if accessor.user_id is not None:
        privacy.append(
            {
                "privacy_level": PrivacyLevel.CONFIDENTIAL.value,
                "owner_user_id": accessor.user_id,
            }
        )
    clauses.append({"$or": privacy})
    return clauses


def sort_key(page: PageRequest) -> list[tuple[str, int]]:
    field = page.sort_by if page.sort_by in TOP_LEVEL_SORT_FIELDS else f"data.{page.sort_by}"
    direction = DESCENDING if page.descending else ASCENDING
    return [(field, direction), ("_id", direction)]


class _MongoCollections:
    """Collection lookup and guarded calls shared by both adapters."""

    def __init__(self, database: AsyncIOMotorDatabase, *, timeout: float = 5.0) -> None:
        self._database = database
        self._timeout = timeout

    def collection(self, aggregate_type: AggregateType) -> AsyncIOMotorCollection:
        return self._database[COLLECTIONS[aggregate_type]]

    async def _call(self, awaitable: Awaitable[T], operation: str) -> T:
        try:
            return await with_timeout(awaitable, self._timeout, operation)
        except PyMongoError as e:
            raise read_store_fault(operation, e) from e


class MongoReadModelStore(_MongoCollections):
    """Projector-side port: sees tombstones, writes with CAS."""

    async def ensure_indexes(self) -> None:
        """Create the filter indexes on every collection (idempotent)."""
        for aggregate_type in AggregateType:
            collection = self.collection(aggregate_type)
            for field in INDEXED_FIELDS:
                await self._call(
                    collection.create_index(field), "read_model.create_index"
                )

    async def get(
        self, aggregate_type: AggregateType, aggregate_id: str
    ) -> ReadModelDocument | None:
        raw = await self._call(
            self.collection(aggregate_type).find_one({"_id": aggregate_id}),
            f"{aggregate_type.value}.read_model.get",
        )
        return ReadModelDocument.from_dict(raw) if raw is not None else None

    async def upsert(self, document: ReadModelDocument, *, expected_version: int) -> bool:
        collection = self.collection(document.aggregate_type)
        operation = f"{document.aggregate_type.value}.read_model.upsert"
        raw = document.to_dict()

        if expected_version == 0:
            try:
                await with_timeout(collection.insert_one(raw), self._timeout, operation)
            except DuplicateKeyError:
                return False
            except PyMongoError as e:
                raise read_store_fault(operation, e) from e
            return True

        result = await self._call(
            collection.replace_one(
                {"_id": document.id, "last_applied_version": expected_version}, raw
            ),
            operation,
        )
        return result.matched_count == 1


class MongoReadModelRepository(_MongoCollections):
    """Query-side port: tombstones are never returned."""

    async def get(
        self, aggregate_type: AggregateType, aggregate_id: str
    ) -> ReadModelDocument | None:
        raw = await self._call(
            self.collection(aggregate_type).find_one({"_id": aggregate_id, "deleted": False}),
            f"{aggregate_type.value}.read_model.get",
        )
        return ReadModelDocument.from_dict(raw) if raw is not None else None

    async def find_by_natural_key(
        self,
        aggregate_type: AggregateType,
        field: str,
        value: str,
        tenant_id: str | None,
    ) -> ReadModelDocument | None:
        query: dict[str, Any] = {"deleted": False}
        if tenant_id is not None:
            query["tenant_id"] = tenant_id
        if field in CASE_INSENSITIVE_KEYS:
            query[f"data.{field}"] = {"$regex": f"^{re.escape(value)}$", "$options": "i"}
        else:
            query[f"data.{field}"] = value

        raw = await self._call(
            self.collection(aggregate_type).find_one(query),
            f"{aggregate_type.value}.read_model.find_by_natural_key",
        )
        return ReadModelDocument.from_dict(raw) if raw is not None else None

    async def list(
        self, aggregate_type: AggregateType, criteria: Criteria, page: PageRequest
    ) -> Page[ReadModelDocument]:
        collection = self.collection(aggregate_type)
        query = build_query(criteria)
        operation = f"{aggregate_type.value}.read_model.list"

        total = await self._call(collection.count_documents(query), operation)
        cursor = (
            collection.find(query)
            .sort(sort_key(page))
            .skip(page.offset)
            .limit(page.size)
        )
        raws = await self._call(cursor.to_list(length=page.size), operation)
        return Page(
            items=[ReadModelDocument.from_dict(raw) for raw in raws],
            total=total,
            page=page.page,
            size=page.size,
        )

    async def count(self, aggregate_type: AggregateType, criteria: Criteria) -> int:
        return await self._call(
            self.collection(aggregate_type).count_documents(build_query(criteria)),
            f"{aggregate_type.value}.read_model.count",
        )
