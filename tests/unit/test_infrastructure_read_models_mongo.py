"""Unit tests for the MongoDB read model adapters.

Tests cover:
- Criteria to MongoDB filter translation (scope, status, search, filters)
- Sort keys with a stable ``_id`` tiebreaker
- CAS upserts (insert for version 0, conditional replace otherwise)
- Query view excludes tombstones; case-insensitive natural keys
- PyMongo errors become InfrastructureFault

Architecture:
- Motor database/collection replaced with MagicMock/AsyncMock
- NO running MongoDB required
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import AutoReconnect, DuplicateKeyError

from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import InfrastructureFault
from iam_admin.domain.enums import (
    AggregateType,
    IsolationLevel,
    LifecycleStatus,
    PrivacyLevel,
)
from iam_admin.domain.value_objects import Criteria, PageRequest, ReadModelDocument
from iam_admin.infrastructure.read_models.mongo_read_model_store import (
    MongoReadModelRepository,
    MongoReadModelStore,
    access_clauses,
    build_query,
    sort_key,
)
from tests.utils.builders import ACTOR, FIXED_NOW, make_scope


def make_document(**overrides) -> ReadModelDocument:
    fields = {
        "id": "D1",
        "aggregate_type": AggregateType.DEPARTMENT,
        "tenant_id": "T1",
        "organization_id": "O1",
        "department_ids": ("D1",),
        "isolation_level": IsolationLevel.DEPARTMENT,
        "privacy_level": PrivacyLevel.PROTECTED,
        "status": LifecycleStatus.ACTIVE,
        "last_applied_version": 2,
        "created_at": FIXED_NOW,
        "updated_at": FIXED_NOW,
        "created_by": ACTOR,
        "updated_by": ACTOR,
        "data": {"name": "Tech", "code": "TECH"},
    }
    fields.update(overrides)
    return ReadModelDocument(**fields)


@pytest.fixture
def collection() -> MagicMock:
    collection = MagicMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock()
    collection.replace_one = AsyncMock()
    collection.count_documents = AsyncMock(return_value=0)
    collection.create_index = AsyncMock()
    return collection


@pytest.fixture
def database(collection) -> MagicMock:
    database = MagicMock()
    database.__getitem__.return_value = collection
    return database


@pytest.mark.unit
class TestBuildQuery:
    """Test criteria translation."""

    def test_accessor_adds_access_clauses(self):
        """Test an accessor contributes its access rule under $and."""
        accessor = make_scope(tenant_id="T1", user_id="U9")

        query = build_query(Criteria().narrowed_to(accessor))

        assert query["tenant_id"] == "T1"
        assert query["$and"] == access_clauses(accessor)

    def test_tenant_accessor_clauses(self):
        """Test a tenant accessor sees its tenant, never broader levels."""
        clauses = access_clauses(make_scope(tenant_id="T1", user_id="U9"))

        assert clauses == [
            {"tenant_id": "T1"},
            {"isolation_level": {"$in": ["TENANT", "ORGANIZATION", "DEPARTMENT", "USER"]}},
            {
                "$or": [
                    {"privacy_level": "PROTECTED", "department_ids": {"$size": 0}},
                    {"privacy_level": "SHARED"},
                    {"privacy_level": "CONFIDENTIAL", "owner_user_id": "U9"},
                ]
            },
        ]

    def test_department_accessor_clauses(self):
        """Test organization and department dimensions apply below their levels."""
        accessor = make_scope(
            isolation_level=IsolationLevel.DEPARTMENT,
            organization_id="O1",
            department_ids=("D1",),
        )

        clauses = access_clauses(accessor)

        assert {
            "$or": [
                {"isolation_level": {"$in": ["PLATFORM", "TENANT"]}},
                {"organization_id": "O1"},
            ]
        } in clauses
        assert {
            "$or": [
                {"isolation_level": {"$in": ["PLATFORM", "TENANT", "ORGANIZATION"]}},
                {"department_ids": {"$in": ["D1"]}},
            ]
        } in clauses
        assert clauses[-1] == {
            "$or": [
                {"privacy_level": "PROTECTED", "department_ids": {"$in": ["D1"]}},
                {"privacy_level": "SHARED", "organization_id": {"$in": [None, "O1"]}},
            ]
        }

    def test_default_criteria_hide_tombstones(self):
        """Test an empty criteria only excludes deleted documents."""
        assert build_query(Criteria()) == {"deleted": False}

    def test_include_deleted_drops_tombstone_filter(self):
        """Test include_deleted removes the deleted flag filter."""
        assert build_query(Criteria(include_deleted=True)) == {}

    def test_scope_and_status_filters(self):
        """Test scope fields are top-level and status uses its value."""
        query = build_query(
            Criteria(
                tenant_id="T1",
                organization_id="O1",
                department_ids=("D1", "D2"),
                status=LifecycleStatus.ACTIVE,
                field_filters={"department_type": "TECHNICAL"},
            )
        )

        assert query == {
            "deleted": False,
            "tenant_id": "T1",
            "organization_id": "O1",
            "department_ids": {"$in": ["D1", "D2"]},
            "status": "ACTIVE",
            "data.department_type": "TECHNICAL",
        }

    def test_search_is_escaped_case_insensitive_regex(self):
        """Test search text is regex-escaped and matched on every search field."""
        query = build_query(Criteria(search="a.b"))

        assert {"data.name": {"$regex": r"a\.b", "$options": "i"}} in query["$or"]
        assert {"data.email": {"$regex": r"a\.b", "$options": "i"}} in query["$or"]


@pytest.mark.unit
class TestSortKey:
    """Test sort keys."""

    def test_timestamp_sort_is_top_level(self):
        """Test created_at sorts on the document field."""
        assert sort_key(PageRequest()) == [("created_at", DESCENDING), ("_id", DESCENDING)]

    def test_business_field_sort_uses_data(self):
        """Test other sort fields live under data."""
        page = PageRequest(sort_by="name", descending=False)

        assert sort_key(page) == [("data.name", ASCENDING), ("_id", ASCENDING)]


@pytest.mark.unit
class TestMongoReadModelStore:
    """Test the projector-side adapter."""

    async def test_get_returns_document_including_tombstones(self, database, collection):
        """Test get() does not filter on the deleted flag."""
        stored = make_document(deleted=True)
        collection.find_one.return_value = stored.to_dict()
        store = MongoReadModelStore(database)

        document = await store.get(AggregateType.DEPARTMENT, "D1")

        assert document == stored
        collection.find_one.assert_awaited_once_with({"_id": "D1"})
        database.__getitem__.assert_called_with("departments")

    async def test_first_upsert_inserts(self, database, collection):
        """Test expected version 0 inserts the document."""
        store = MongoReadModelStore(database)
        document = make_document(last_applied_version=1)

        applied = await store.upsert(document, expected_version=0)

        assert applied is True
        collection.insert_one.assert_awaited_once_with(document.to_dict())

    async def test_duplicate_insert_loses_race(self, database, collection):
        """Test a duplicate _id on insert reports the CAS as failed."""
        collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")
        store = MongoReadModelStore(database)

        applied = await store.upsert(make_document(), expected_version=0)

        assert applied is False

    async def test_replace_filters_on_expected_version(self, database, collection):
        """Test later upserts replace only when the stored version matches."""
        # Arrange
        collection.replace_one.return_value = MagicMock(matched_count=0)
        store = MongoReadModelStore(database)
        document = make_document(last_applied_version=3)

        # Act
        applied = await store.upsert(document, expected_version=2)

        # Assert
        assert applied is False
        collection.replace_one.assert_awaited_once_with(
            {"_id": "D1", "last_applied_version": 2}, document.to_dict()
        )

    async def test_connection_error_becomes_fault(self, database, collection):
        """Test PyMongo errors are raised as retryable infrastructure faults."""
        collection.replace_one.side_effect = AutoReconnect("connection reset")
        store = MongoReadModelStore(database)

        with pytest.raises(InfrastructureFault) as exc_info:
            await store.upsert(make_document(), expected_version=1)

        assert exc_info.value.error.code is ErrorCode.STORE_UNAVAILABLE
        assert exc_info.value.error.operation == "department.read_model.upsert"
        assert exc_info.value.retryable is True

    async def test_ensure_indexes_covers_every_collection(self, database, collection):
        """Test one index per filter field on each collection."""
        store = MongoReadModelStore(database)

        await store.ensure_indexes()

        assert collection.create_index.await_count == len(AggregateType) * 5


@pytest.mark.unit
class TestMongoReadModelRepository:
    """Test the query-side adapter."""

    async def test_get_excludes_tombstones(self, database, collection):
        """Test get() filters deleted documents out."""
        repository = MongoReadModelRepository(database)

        assert await repository.get(AggregateType.DEPARTMENT, "D1") is None
        collection.find_one.assert_awaited_once_with({"_id": "D1", "deleted": False})

    async def test_natural_key_email_is_case_insensitive(self, database, collection):
        """Test email lookups use an anchored case-insensitive regex."""
        repository = MongoReadModelRepository(database)

        await repository.find_by_natural_key(
            AggregateType.USER, "email", "John.Doe@Example.com", "T1"
        )

        query = collection.find_one.await_args.args[0]
        assert query["tenant_id"] == "T1"
        assert query["data.email"] == {
            "$regex": r"^John\.Doe@Example\.com$",
            "$options": "i",
        }

    async def test_natural_key_code_is_exact(self, database, collection):
        """Test other keys match exactly; tenant lookups are platform-wide."""
        repository = MongoReadModelRepository(database)

        await repository.find_by_natural_key(AggregateType.TENANT, "code", "ACME", None)

        collection.find_one.assert_awaited_once_with({"deleted": False, "data.code": "ACME"})

    async def test_list_pages_through_cursor(self, database, collection):
        """Test list() counts, sorts, skips and limits."""
        # Arrange
        cursor = MagicMock()
        cursor.sort.return_value = cursor
        cursor.skip.return_value = cursor
        cursor.limit.return_value = cursor
        cursor.to_list = AsyncMock(return_value=[make_document().to_dict()])
        collection.find.return_value = cursor
        collection.count_documents.return_value = 21
        repository = MongoReadModelRepository(database)

        # Act
        page = await repository.list(
            AggregateType.DEPARTMENT,
            Criteria(tenant_id="T1"),
            PageRequest(page=2, size=10),
        )

        # Assert
        assert page.total == 21
        assert [d.id for d in page.items] == ["D1"]
        cursor.skip.assert_called_once_with(10)
        cursor.limit.assert_called_once_with(10)
        collection.find.assert_called_once_with({"deleted": False, "tenant_id": "T1"})
