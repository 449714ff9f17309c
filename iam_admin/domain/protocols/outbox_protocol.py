"""Transactional outbox protocol.

Records are appended by the write repository in the same transaction as the
entity snapshot (see ``EntityRepository.save``). The dispatcher reads due
records, delivers them and reports the outcome back through this port.

Implementations:
    - SQLAlchemyOutbox: iam_admin/infrastructure/persistence/repositories/outbox_repository.py
    - InMemoryWriteStore: iam_admin/infrastructure/memory/write_store.py
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Protocol
from uuid import UUID


class OutboxStatus(str, Enum):
    """Delivery state of an outbox record."""

    PENDING = "pending"
    DISPATCHED = "dispatched"
    DEAD = "dead"


@dataclass(frozen=True, slots=True, kw_only=True)
class OutboxRecord:
    """One committed event awaiting (or past) delivery.

    Attributes:
        sequence: Store-assigned, monotonically increasing append position.
        event_id: Event identifier.
        aggregate_id: Aggregate the event belongs to.
        aggregate_type: Aggregate kind value (e.g. "department").
        event_type: Wire event type (e.g. "department.created").
        version: Aggregate version the event produced.
        occurred_on: Event timestamp.
        payload: Full wire envelope as produced by ``encode_event``.
        status: Delivery state.
        attempts: Failed delivery attempts so far.
        next_attempt_at: Earliest time the record may be retried.
        last_error: Message of the most recent failure.
    """

    sequence: int
    event_id: UUID
    aggregate_id: str
    aggregate_type: str
    event_type: str
    version: int
    occurred_on: datetime
    payload: dict[str, Any]
    status: OutboxStatus = OutboxStatus.PENDING
    attempts: int = 0
    next_attempt_at: datetime | None = None
    last_error: str | None = None

    def is_due(self, now: datetime) -> bool:
        return self.next_attempt_at is None or self.next_attempt_at <= now


class OutboxProtocol(Protocol):
    """Outbox read/acknowledge port used by the dispatcher."""

    async def fetch_pending(self, limit: int) -> list[OutboxRecord]:
        """Return up to ``limit`` PENDING records ordered by sequence.

        Records not yet due are included so the dispatcher can hold back
        later versions of the same aggregate.
        """
        ...

    async def mark_dispatched(self, sequences: list[int], now: datetime) -> None:
        ...

    async def mark_retry(
        self, sequence: int, *, attempts: int, next_attempt_at: datetime, error: str
    ) -> None:
        """Record a failed attempt and schedule the next one."""
        ...

    async def mark_dead(self, sequence: int, *, attempts: int, error: str) -> None:
        """Give up on a record after too many failed attempts."""
        ...

    async def count_by_status(self) -> dict[OutboxStatus, int]:
        ...
