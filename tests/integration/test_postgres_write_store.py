"""Integration tests for the SQLAlchemy write store against PostgreSQL.

Tests cover:
- Snapshot insert plus outbox rows in one transaction
- Compare-and-swap update and stale-version conflict
- Partial unique indexes (duplicate code, reuse after soft delete)
- Outbox fetch order and acknowledgement

Architecture:
- Requires TEST_DATABASE_URL (postgresql+asyncpg://...); skipped otherwise
- Tables are created fresh for each test and dropped afterwards
"""

import os
from datetime import UTC, datetime

import pytest

from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import ConcurrencyConflict
from iam_admin.core.result import Failure, Success
from iam_admin.domain.aggregates import mark_deleted, update_info
from iam_admin.domain.protocols import OutboxStatus
from iam_admin.infrastructure.persistence import Database
from iam_admin.infrastructure.persistence.repositories import (
    DepartmentRepository,
    SQLAlchemyOutbox,
)
from tests.utils.builders import ACTOR, new_department, persisted

DATABASE_URL = os.environ.get("TEST_DATABASE_URL")

pytestmark = [
    pytest.mark.integration,
    pytest.mark.postgres,
    pytest.mark.skipif(not DATABASE_URL, reason="TEST_DATABASE_URL not set"),
]


@pytest.fixture
async def database():
    db = Database(DATABASE_URL, pool_size=2)
    await db.drop_all()
    await db.create_all()
    yield db
    await db.drop_all()
    await db.close()


async def save_new(repository, aggregate):
    return await repository.save(
        aggregate.entity, expected_version=0, events=aggregate.pending_events
    )


class TestDepartmentRepository:
    """Department snapshots in PostgreSQL."""

    async def test_save_and_find(self, database):
        """Test a saved department reads back equal, with its outbox row."""
        repository = DepartmentRepository(database)
        outbox = SQLAlchemyOutbox(database)
        aggregate = new_department()

        result = await save_new(repository, aggregate)

        assert isinstance(result, Success)
        assert await repository.find_by_id(aggregate.id) == aggregate.entity
        pending = await outbox.fetch_pending(10)
        assert [r.event_type for r in pending] == ["department.created"]
        assert pending[0].payload["aggregateId"] == aggregate.id

    async def test_stale_update_conflicts(self, database):
        """Test an update with an outdated version reports the stored one."""
        repository = DepartmentRepository(database)
        aggregate = new_department()
        await save_new(repository, aggregate)
        persisted(aggregate)
        update_info(aggregate, {"name": "Technology"}, actor=ACTOR)
        await repository.save(
            aggregate.entity, expected_version=1, events=aggregate.pending_events
        )

        result = await repository.save(aggregate.entity, expected_version=1, events=[])

        assert isinstance(result, Failure)
        assert isinstance(result.error, ConcurrencyConflict)
        assert result.error.actual_version == 2

    async def test_duplicate_code_until_deleted(self, database):
        """Test the code index ignores soft-deleted rows."""
        repository = DepartmentRepository(database)
        first = new_department()
        await save_new(repository, first)

        clash = await save_new(repository, new_department(name="Other"))
        persisted(first)
        mark_deleted(first, actor=ACTOR)
        await repository.save(first.entity, expected_version=1, events=first.pending_events)
        reuse = await save_new(repository, new_department(name="Other"))

        assert isinstance(clash, Failure)
        assert clash.error.code is ErrorCode.DUPLICATE_CODE
        assert isinstance(reuse, Success)


class TestOutbox:
    """Outbox acknowledgement in PostgreSQL."""

    async def test_dispatched_records_leave_pending(self, database):
        """Test mark_dispatched and mark_dead update status counts."""
        repository = DepartmentRepository(database)
        outbox = SQLAlchemyOutbox(database)
        for code in ("A", "B"):
            await save_new(repository, new_department(code=code, name=f"Dept {code}"))
        first, second = await outbox.fetch_pending(10)

        await outbox.mark_dispatched([first.sequence], datetime.now(UTC))
        await outbox.mark_dead(second.sequence, attempts=3, error="gave up")

        counts = await outbox.count_by_status()
        assert counts[OutboxStatus.DISPATCHED] == 1
        assert counts[OutboxStatus.DEAD] == 1
        assert await outbox.fetch_pending(10) == []
