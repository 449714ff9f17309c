"""Transactional outbox table.

Rows are inserted in the same transaction as the entity snapshot they
describe and consumed by the outbox dispatcher.

Indexes:
    - uq_outbox_events_aggregate_version: one event per aggregate version
    - ix_outbox_events_pending: (sequence) where status = 'pending'
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import BigInteger, DateTime, Identity, Index, Integer, String, Text, Uuid, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from iam_admin.infrastructure.persistence.base import ID_LENGTH, BaseModel


class OutboxEventModel(BaseModel):
    """One committed domain event awaiting (or past) delivery."""

    __tablename__ = "outbox_events"

    sequence: Mapped[int] = mapped_column(
        BigInteger,
        Identity(always=True),
        primary_key=True,
        comment="Append position",
    )
    event_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, unique=True)
    aggregate_id: Mapped[str] = mapped_column(String(ID_LENGTH), nullable=False)
    aggregate_type: Mapped[str] = mapped_column(String(50), nullable=False)
    event_type: Mapped[str] = mapped_column(String(100), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    occurred_on: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        comment="Wire envelope {eventId, eventType, aggregateId, ...}",
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
        comment="pending, dispatched or dead",
    )
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    next_attempt_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Earliest redelivery time after a failure",
    )
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    dispatched_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        Index(
            "uq_outbox_events_aggregate_version",
            "aggregate_id",
            "version",
            unique=True,
        ),
        Index(
            "ix_outbox_events_pending",
            "sequence",
            postgresql_where=text("status = 'pending'"),
        ),
        {"comment": "Transactional outbox of domain events"},
    )

    def __repr__(self) -> str:
        return f"<OutboxEventModel(sequence={self.sequence}, event_type={self.event_type})>"
