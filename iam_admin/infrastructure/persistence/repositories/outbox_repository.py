"""SQLAlchemy outbox repository.

Implements OutboxProtocol over the ``outbox_events`` table. Rows are written
by the entity repositories (``outbox_row``) inside their save transaction;
this adapter only reads them back and records delivery outcomes.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError

from iam_admin.domain.events.base_event import DomainEvent
from iam_admin.domain.events.codec import encode_event
from iam_admin.domain.protocols.outbox_protocol import OutboxRecord, OutboxStatus
from iam_admin.infrastructure.errors import database_fault
from iam_admin.infrastructure.persistence.database import Database
from iam_admin.infrastructure.persistence.models.outbox_event import OutboxEventModel
from iam_admin.infrastructure.timeouts import with_timeout


def outbox_row(event: DomainEvent) -> OutboxEventModel:
    """Outbox row for a pending event (added to the caller's session)."""
    return OutboxEventModel(
        event_id=event.event_id,
        aggregate_id=event.aggregate_id,
        aggregate_type=event.aggregate_type.value,
        event_type=event.event_type,
        version=event.version,
        occurred_on=event.occurred_on,
        payload=encode_event(event),
        status=OutboxStatus.PENDING.value,
        attempts=0,
    )


class SQLAlchemyOutbox:
    """SQLAlchemy implementation of OutboxProtocol."""

    def __init__(self, database: Database, *, timeout: float = 5.0) -> None:
        self._database = database
        self._timeout = timeout

    async def _update(self, operation: str, statement: Any) -> None:
        async def run() -> None:
            async with self._database.get_session() as session:
                await session.execute(statement)

        try:
            return await with_timeout(run(), self._timeout, operation)
        except SQLAlchemyError as e:
            raise database_fault(operation, e) from e

    async def fetch_pending(self, limit: int) -> list[OutboxRecord]:
        async def run() -> list[OutboxRecord]:
            async with self._database.get_session() as session:
                result = await session.execute(
                    select(OutboxEventModel)
                    .where(OutboxEventModel.status == OutboxStatus.PENDING.value)
                    .order_by(OutboxEventModel.sequence)
                    .limit(limit)
                )
                return [self._to_record(row) for row in result.scalars()]

        try:
            return await with_timeout(run(), self._timeout, "outbox.fetch_pending")
        except SQLAlchemyError as e:
            raise database_fault("outbox.fetch_pending", e) from e

    async def mark_dispatched(self, sequences: list[int], now: datetime) -> None:
        if not sequences:
            return
        await self._update(
            "outbox.mark_dispatched",
            update(OutboxEventModel)
            .where(OutboxEventModel.sequence.in_(sequences))
            .values(
                status=OutboxStatus.DISPATCHED.value,
                dispatched_at=now,
                next_attempt_at=None,
            ),
        )

    async def mark_retry(
        self, sequence: int, *, attempts: int, next_attempt_at: datetime, error: str
    ) -> None:
        await self._update(
            "outbox.mark_retry",
            update(OutboxEventModel)
            .where(OutboxEventModel.sequence == sequence)
            .values(attempts=attempts, next_attempt_at=next_attempt_at, last_error=error),
        )

    async def mark_dead(self, sequence: int, *, attempts: int, error: str) -> None:
        await self._update(
            "outbox.mark_dead",
            update(OutboxEventModel)
            .where(OutboxEventModel.sequence == sequence)
            .values(status=OutboxStatus.DEAD.value, attempts=attempts, last_error=error),
        )

    async def count_by_status(self) -> dict[OutboxStatus, int]:
        async def run() -> list[tuple[str, int]]:
            async with self._database.get_session() as session:
                result = await session.execute(
                    select(OutboxEventModel.status, func.count()).group_by(
                        OutboxEventModel.status
                    )
                )
                return [(status, count) for status, count in result.all()]

        try:
            rows = await with_timeout(run(), self._timeout, "outbox.count_by_status")
        except SQLAlchemyError as e:
            raise database_fault("outbox.count_by_status", e) from e

        counts = {status: 0 for status in OutboxStatus}
        for status, count in rows:
            counts[OutboxStatus(status)] = count
        return counts

    def _to_record(self, model: OutboxEventModel) -> OutboxRecord:
        return OutboxRecord(
            sequence=model.sequence,
            event_id=model.event_id,
            aggregate_id=model.aggregate_id,
            aggregate_type=model.aggregate_type,
            event_type=model.event_type,
            version=model.version,
            occurred_on=model.occurred_on,
            payload=model.payload,
            status=OutboxStatus(model.status),
            attempts=model.attempts,
            next_attempt_at=model.next_attempt_at,
            last_error=model.last_error,
        )
