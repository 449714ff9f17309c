"""Unit tests for ReadModelProjector.

Tests cover:
- In-order application with compare-and-swap writes
- Duplicate deliveries are no-ops
- Out-of-order events are parked and drained once the gap closes
- Bounded parking per aggregate
- Persistent write conflicts raise after the retry limit
- Unrecognized events move the version so later events are not stalled

Architecture:
- InMemoryReadModelStore for behaviour, AsyncMock store for conflicts
"""

from unittest.mock import AsyncMock

import pytest

from iam_admin.application.projections import (
    ProjectionDeferred,
    ProjectionWriteConflict,
    ReadModelProjector,
)
from iam_admin.application.projections.projector import MAX_WRITE_ATTEMPTS
from iam_admin.domain.aggregates import change_status, clear_events, update_info
from iam_admin.domain.enums import AggregateType, LifecycleStatus
from iam_admin.domain.events import UnrecognizedEvent
from iam_admin.infrastructure.memory import InMemoryReadModelStore
from tests.utils.builders import FIXED_NOW, new_organization


def organization_events(updates: int = 2):
    """Created plus ``updates`` Updated events for one organization."""
    aggregate = new_organization()
    for number in range(updates):
        update_info(
            aggregate, {"description": f"rev {number}"}, actor="u2", now=FIXED_NOW
        )
    return aggregate.id, clear_events(aggregate)


@pytest.fixture
def store():
    return InMemoryReadModelStore()


@pytest.fixture
def projector(store, mock_logger):
    return ReadModelProjector(store=store, logger=mock_logger, park_limit=10)


def unrecognized_at(aggregate_id, version):
    return UnrecognizedEvent(
        aggregate_id=aggregate_id,
        version=version,
        actor="u9",
        wire_type="organization.archived",
        kind=AggregateType.ORGANIZATION,
    )


async def stored(store, aggregate_id):
    return await store.get(AggregateType.ORGANIZATION, aggregate_id)


@pytest.mark.unit
class TestReadModelProjector:
    """Test projector runtime behaviour."""

    @pytest.mark.asyncio
    async def test_applies_in_order(self, projector, store):
        """Test each event advances last_applied_version."""
        aggregate_id, events = organization_events()

        for event in events:
            await projector.handle(event)

        document = await stored(store, aggregate_id)
        assert document.last_applied_version == 3
        assert document.data["description"] == "rev 1"

    @pytest.mark.asyncio
    async def test_duplicate_delivery_is_noop(self, projector, store):
        """Test a replayed event leaves the document unchanged."""
        aggregate_id, events = organization_events()
        for event in events:
            await projector.handle(event)
        before = await stored(store, aggregate_id)

        await projector.handle(events[1])

        assert await stored(store, aggregate_id) == before

    @pytest.mark.asyncio
    async def test_gap_parks_then_drains(self, projector, store):
        """Test v3 and v2 wait for v1, then all three are applied."""
        aggregate_id, events = organization_events()

        with pytest.raises(ProjectionDeferred) as deferred:
            await projector.handle(events[2])
        assert deferred.value.expected_version == 1
        with pytest.raises(ProjectionDeferred):
            await projector.handle(events[1])
        assert projector.parked_versions(aggregate_id) == [2, 3]
        assert await stored(store, aggregate_id) is None

        await projector.handle(events[0])

        document = await stored(store, aggregate_id)
        assert document.last_applied_version == 3
        assert projector.parked_versions(aggregate_id) == []

    @pytest.mark.asyncio
    async def test_redelivered_parked_event_after_drain_is_skipped(self, projector, store):
        """Test the dispatcher's retry of a drained event is a duplicate."""
        aggregate_id, events = organization_events(updates=1)
        with pytest.raises(ProjectionDeferred):
            await projector.handle(events[1])
        await projector.handle(events[0])

        await projector.handle(events[1])

        assert (await stored(store, aggregate_id)).last_applied_version == 2

    @pytest.mark.asyncio
    async def test_park_limit(self, store, mock_logger):
        """Test events beyond the park limit are not held."""
        projector = ReadModelProjector(store=store, logger=mock_logger, park_limit=1)
        aggregate_id, events = organization_events(updates=3)

        with pytest.raises(ProjectionDeferred):
            await projector.handle(events[2])
        with pytest.raises(ProjectionDeferred):
            await projector.handle(events[3])

        assert projector.parked_versions(aggregate_id) == [3]
        warnings = [c.args[0] for c in mock_logger.warning.call_args_list]
        assert "projection_park_full" in warnings

    @pytest.mark.asyncio
    async def test_status_change_projected(self, projector, store):
        """Test StatusChanged updates the document status."""
        aggregate = new_organization()
        change_status(aggregate, LifecycleStatus.ACTIVE, actor="u2", now=FIXED_NOW)

        for event in clear_events(aggregate):
            await projector.handle(event)

        assert (await stored(store, aggregate.id)).status is LifecycleStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_unrecognized_event_does_not_stall_successors(self, projector, store):
        """Test an undecodable v2 advances the version and v3 still applies."""
        aggregate_id, events = organization_events()
        unrecognized = unrecognized_at(aggregate_id, version=2)

        await projector.handle(events[0])
        await projector.handle(unrecognized)
        await projector.handle(events[2])

        document = await stored(store, aggregate_id)
        assert document.last_applied_version == 3
        assert document.data["description"] == "rev 1"

    @pytest.mark.asyncio
    async def test_unrecognized_event_drains_parked_successor(self, projector, store):
        """Test a parked v3 is applied once the undecodable v2 arrives."""
        aggregate_id, events = organization_events()
        await projector.handle(events[0])
        with pytest.raises(ProjectionDeferred):
            await projector.handle(events[2])

        await projector.handle(unrecognized_at(aggregate_id, version=2))

        assert (await stored(store, aggregate_id)).last_applied_version == 3
        assert projector.parked_versions(aggregate_id) == []

    @pytest.mark.asyncio
    async def test_persistent_conflict_raises(self, mock_logger):
        """Test the projector gives up after repeated CAS failures."""
        store = AsyncMock()
        store.get.return_value = None
        store.upsert.return_value = False
        projector = ReadModelProjector(store=store, logger=mock_logger)
        _, events = organization_events(updates=0)

        with pytest.raises(ProjectionWriteConflict):
            await projector.handle(events[0])

        assert store.upsert.await_count == MAX_WRITE_ATTEMPTS
