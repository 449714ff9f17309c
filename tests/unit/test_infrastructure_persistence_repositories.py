"""Unit tests for the SQLAlchemy write repositories.

Tests cover:
- Entity <-> row mapping (scope columns, business columns)
- Insert for new aggregates, conditional update for existing ones
- Outbox rows added in the same session as the snapshot
- Stale version reported as ConcurrencyConflict with the stored version
- Unique index violations mapped to duplicate-key rule violations
- Driver errors raised as InfrastructureFault

Architecture:
- Database.get_session replaced by an async context manager yielding a
  mocked AsyncSession
- NO database required (see tests/integration for PostgreSQL)
"""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import ConcurrencyConflict, InfrastructureFault
from iam_admin.core.result import Failure, Success
from iam_admin.domain.aggregates import update_info
from iam_admin.infrastructure.persistence.models.department import DepartmentModel
from iam_admin.infrastructure.persistence.models.outbox_event import OutboxEventModel
from iam_admin.infrastructure.persistence.repositories import (
    DepartmentRepository,
    SQLAlchemyOutbox,
)
from iam_admin.infrastructure.persistence.repositories.entity_repository import (
    scope_columns,
)
from iam_admin.infrastructure.persistence.repositories.outbox_repository import (
    outbox_row,
)
from tests.utils.builders import ACTOR, new_department, persisted


def make_session() -> MagicMock:
    session = MagicMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    session.flush = AsyncMock()
    session.execute = AsyncMock()
    session.scalar = AsyncMock()
    return session


def make_database(session: MagicMock) -> MagicMock:
    database = MagicMock()

    @asynccontextmanager
    async def get_session():
        yield session

    database.get_session = get_session
    return database


def unique_violation(index: str) -> IntegrityError:
    return IntegrityError(
        "INSERT INTO departments ...",
        {},
        Exception(f'duplicate key value violates unique constraint "{index}"'),
    )


@pytest.mark.unit
class TestMapping:
    """Test row mapping."""

    def test_scope_columns(self):
        """Test scope, lifecycle and audit columns come from the entity."""
        department = new_department().entity

        columns = scope_columns(department)

        assert columns["tenant_id"] == "T1"
        assert columns["organization_id"] == "O1"
        assert columns["department_ids"] == [department.id]
        assert columns["isolation_level"] == "DEPARTMENT"
        assert columns["status"] == "INITIALIZING"
        assert columns["version"] == 1

    def test_row_maps_back_to_equal_entity(self):
        """Test a department read back from its row equals the original."""
        repository = DepartmentRepository(make_database(make_session()))
        department = new_department(description="Builds things").entity

        model = DepartmentModel(**repository._row_values(department))

        assert repository._to_domain(model) == department

    def test_outbox_row_holds_wire_payload(self):
        """Test outbox rows are pending and carry the encoded event."""
        event = new_department().pending_events[0]

        row = outbox_row(event)

        assert isinstance(row, OutboxEventModel)
        assert row.status == "pending"
        assert row.attempts == 0
        assert row.version == 1
        assert row.payload["eventType"] == "department.created"


@pytest.mark.unit
class TestSave:
    """Test the save transaction."""

    async def test_new_aggregate_inserts_snapshot_and_outbox(self):
        """Test version 0 adds the row, flushes, then adds outbox rows."""
        # Arrange
        session = make_session()
        repository = DepartmentRepository(make_database(session))
        aggregate = new_department()

        # Act
        result = await repository.save(
            aggregate.entity, expected_version=0, events=aggregate.pending_events
        )

        # Assert
        assert result == Success(value=None)
        added = session.add.call_args.args[0]
        assert isinstance(added, DepartmentModel)
        assert added.id == aggregate.id
        session.flush.assert_awaited_once()
        outbox_rows = session.add_all.call_args.args[0]
        assert [row.event_type for row in outbox_rows] == ["department.created"]

    async def test_update_uses_expected_version(self):
        """Test an existing aggregate is updated with a version guard."""
        session = make_session()
        session.execute.return_value = MagicMock(rowcount=1)
        repository = DepartmentRepository(make_database(session))
        aggregate = persisted(new_department())
        update_info(aggregate, {"name": "Technology"}, actor=ACTOR)

        result = await repository.save(
            aggregate.entity, expected_version=1, events=aggregate.pending_events
        )

        assert isinstance(result, Success)
        statement = session.execute.await_args.args[0]
        compiled = statement.compile()
        assert compiled.params["name"] == "Technology"
        assert compiled.params["version"] == 2
        assert 1 in compiled.params.values()
        session.add.assert_not_called()

    async def test_stale_version_reports_stored_version(self):
        """Test zero updated rows becomes a ConcurrencyConflict."""
        session = make_session()
        session.execute.return_value = MagicMock(rowcount=0)
        session.scalar.return_value = 3
        repository = DepartmentRepository(make_database(session))
        aggregate = persisted(new_department())

        result = await repository.save(aggregate.entity, expected_version=1, events=[])

        assert isinstance(result, Failure)
        assert isinstance(result.error, ConcurrencyConflict)
        assert result.error.expected_version == 1
        assert result.error.actual_version == 3
        session.add_all.assert_not_called()

    async def test_unique_index_violation_maps_to_duplicate_key(self):
        """Test the violated index name selects the duplicate-key code."""
        session = make_session()
        session.flush.side_effect = unique_violation("uq_departments_code")
        repository = DepartmentRepository(make_database(session))
        aggregate = new_department()

        result = await repository.save(
            aggregate.entity, expected_version=0, events=aggregate.pending_events
        )

        assert isinstance(result, Failure)
        assert result.error.code is ErrorCode.DUPLICATE_CODE
        assert result.error.field == "code"

    async def test_primary_key_violation_is_concurrency_conflict(self):
        """Test a concurrent insert of the same id is a ConcurrencyConflict."""
        session = make_session()
        session.flush.side_effect = unique_violation("departments_pkey")
        repository = DepartmentRepository(make_database(session))
        aggregate = new_department()

        result = await repository.save(aggregate.entity, expected_version=0, events=[])

        assert isinstance(result, Failure)
        assert isinstance(result.error, ConcurrencyConflict)

    async def test_unknown_integrity_error_is_fault(self):
        """Test an unmapped constraint violation is an infrastructure fault."""
        session = make_session()
        session.flush.side_effect = unique_violation("ck_departments_level")
        repository = DepartmentRepository(make_database(session))

        with pytest.raises(InfrastructureFault):
            await repository.save(new_department().entity, expected_version=0, events=[])

    async def test_operational_error_is_fault(self):
        """Test connection failures raise a retryable fault."""
        session = make_session()
        session.flush.side_effect = OperationalError("INSERT", {}, Exception("gone"))
        repository = DepartmentRepository(make_database(session))

        with pytest.raises(InfrastructureFault) as exc_info:
            await repository.save(new_department().entity, expected_version=0, events=[])

        assert exc_info.value.error.code is ErrorCode.STORE_UNAVAILABLE
        assert exc_info.value.error.operation == "department.save"
        assert exc_info.value.retryable is True


@pytest.mark.unit
class TestOutbox:
    """Test the SQLAlchemy outbox adapter."""

    async def test_mark_dispatched_skips_empty_batch(self):
        """Test no statement is issued for an empty sequence list."""
        session = make_session()
        outbox = SQLAlchemyOutbox(make_database(session))

        await outbox.mark_dispatched([], now=None)

        session.execute.assert_not_awaited()

    async def test_count_by_status_fills_missing_statuses(self):
        """Test statuses without rows are reported as zero."""
        session = make_session()
        session.execute.return_value = MagicMock(all=MagicMock(return_value=[("pending", 4)]))
        outbox = SQLAlchemyOutbox(make_database(session))

        counts = await outbox.count_by_status()

        assert {status.value: count for status, count in counts.items()} == {
            "pending": 4,
            "dispatched": 0,
            "dead": 0,
        }
