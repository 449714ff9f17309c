"""Unit tests for InMemoryEventBus and LoggingEventHandler.

Tests cover:
- Exact-class subscription and catch-all subscription
- Publishing with no handlers is a no-op
- One failing handler does not stop the others; failures are returned
- Handler timeout produces a failure
- LoggingEventHandler logs transitions, deletions and changed fields

Architecture:
- Handlers are AsyncMock instances (awaitable callables)
- Logger is the shared MagicMock fixture
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from iam_admin.domain.enums import LifecycleStatus
from iam_admin.domain.events.department_events import (
    DepartmentDeletedEvent,
    DepartmentStatusChangedEvent,
    DepartmentUpdatedEvent,
)
from iam_admin.domain.events.organization_events import OrganizationStatusChangedEvent
from iam_admin.domain.services.diffing import FieldChange
from iam_admin.infrastructure.events import InMemoryEventBus
from iam_admin.infrastructure.events.handlers import LoggingEventHandler
from iam_admin.infrastructure.events.in_memory_event_bus import handler_name


def status_changed(aggregate_id: str = "D1", version: int = 2):
    return DepartmentStatusChangedEvent(
        aggregate_id=aggregate_id,
        version=version,
        actor="admin-1",
        previous_status=LifecycleStatus.INITIALIZING,
        new_status=LifecycleStatus.ACTIVE,
    )


@pytest.mark.unit
class TestSubscriptions:
    """Test handler lookup."""

    async def test_publish_without_handlers_returns_no_failures(self, mock_logger):
        """Test publishing an event nobody listens to is a no-op."""
        bus = InMemoryEventBus(logger=mock_logger)

        failures = await bus.publish(status_changed())

        assert failures == []
        mock_logger.debug.assert_not_called()

    async def test_handler_receives_only_its_event_class(self, mock_logger):
        """Test subscribe() matches the exact event class."""
        # Arrange
        bus = InMemoryEventBus(logger=mock_logger)
        handler = AsyncMock()
        bus.subscribe(DepartmentStatusChangedEvent, handler)
        other = OrganizationStatusChangedEvent(
            aggregate_id="O1",
            version=2,
            actor="admin-1",
            previous_status=LifecycleStatus.INITIALIZING,
            new_status=LifecycleStatus.ACTIVE,
        )

        # Act
        await bus.publish(other)
        event = status_changed()
        await bus.publish(event)

        # Assert
        handler.assert_awaited_once_with(event)

    async def test_catch_all_receives_every_event(self, mock_logger):
        """Test subscribe_all() handlers see events of any class."""
        bus = InMemoryEventBus(logger=mock_logger)
        specific = AsyncMock()
        catch_all = AsyncMock()
        bus.subscribe(DepartmentStatusChangedEvent, specific)
        bus.subscribe_all(catch_all)

        event = status_changed()
        await bus.publish(event)

        specific.assert_awaited_once_with(event)
        catch_all.assert_awaited_once_with(event)
        assert bus.handlers_for(DepartmentStatusChangedEvent) == [specific, catch_all]


@pytest.mark.unit
class TestHandlerFailures:
    """Test failure isolation and reporting."""

    async def test_failing_handler_does_not_stop_others(self, mock_logger):
        """Test every handler runs and the failure is returned."""
        # Arrange
        bus = InMemoryEventBus(logger=mock_logger)
        failing = AsyncMock(side_effect=RuntimeError("boom"))
        healthy = AsyncMock()
        bus.subscribe(DepartmentStatusChangedEvent, failing)
        bus.subscribe(DepartmentStatusChangedEvent, healthy)

        # Act
        failures = await bus.publish(status_changed())

        # Assert
        healthy.assert_awaited_once()
        assert len(failures) == 1
        assert isinstance(failures[0].error, RuntimeError)
        call = mock_logger.warning.call_args
        assert call.args[0] == "event_handler_failed"
        assert call.kwargs["error_type"] == "RuntimeError"
        assert call.kwargs["error_message"] == "boom"
        assert call.kwargs["aggregate_id"] == "D1"
        assert call.kwargs["version"] == 2

    async def test_slow_handler_times_out(self, mock_logger):
        """Test a handler exceeding handler_timeout is reported as failed."""
        bus = InMemoryEventBus(logger=mock_logger, handler_timeout=0.01)

        async def slow(event):
            await asyncio.sleep(1)

        bus.subscribe(DepartmentStatusChangedEvent, slow)

        failures = await bus.publish(status_changed())

        assert len(failures) == 1
        assert isinstance(failures[0].error, TimeoutError)
        assert failures[0].handler_name.endswith("slow")

    def test_handler_name_prefers_qualname(self):
        """Test handler names for functions and bound methods."""
        handler = LoggingEventHandler(logger=AsyncMock())

        assert handler_name(handler.handle) == "LoggingEventHandler.handle"


@pytest.mark.unit
class TestLoggingEventHandler:
    """Test structured log lines for dispatched events."""

    async def test_status_change_logs_transition(self, mock_logger):
        """Test status change events include previous and new status."""
        handler = LoggingEventHandler(logger=mock_logger)

        await handler.handle(status_changed())

        call = mock_logger.info.call_args
        assert call.args[0] == "domain_event_dispatched"
        assert call.kwargs["event_type"] == "department.status_changed"
        assert call.kwargs["aggregate_type"] == "department"
        assert call.kwargs["previous_status"] == "INITIALIZING"
        assert call.kwargs["new_status"] == "ACTIVE"

    async def test_deletion_logs_previous_status(self, mock_logger):
        """Test deletion events include the status before deletion."""
        handler = LoggingEventHandler(logger=mock_logger)
        event = DepartmentDeletedEvent(
            aggregate_id="D1",
            version=3,
            actor="admin-1",
            previous_status=LifecycleStatus.ACTIVE,
        )

        await handler.handle(event)

        call = mock_logger.info.call_args
        assert call.kwargs["previous_status"] == "ACTIVE"
        assert "new_status" not in call.kwargs

    async def test_update_logs_sorted_changed_fields(self, mock_logger):
        """Test update events list changed field names only."""
        handler = LoggingEventHandler(logger=mock_logger)
        event = DepartmentUpdatedEvent(
            aggregate_id="D1",
            version=2,
            actor="admin-1",
            changed_fields={
                "name": FieldChange(old="Tech", new="Technology"),
                "description": FieldChange(old=None, new="Builds things"),
            },
        )

        await handler.handle(event)

        call = mock_logger.info.call_args
        assert call.kwargs["changed_fields"] == ["description", "name"]
        assert call.kwargs["version"] == 2
        assert call.kwargs["actor"] == "admin-1"
