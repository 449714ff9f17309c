"""Base domain event classes.

Domain events are immutable facts about one aggregate. Every concrete event
class declares two class-level tags:

- ``event_type``: wire name, ``<aggregate kind>.<action>``
- ``aggregate_type``: the AggregateType it belongs to

Instance fields split into the envelope (event_id, aggregate_id, version,
occurred_on) and the payload (everything else, always including ``actor``).

Architecture:
    - Frozen, keyword-only, slotted dataclasses
    - UUIDv7 event ids (time ordered)
    - ``version`` is the aggregate version this event produces (Created is 1)
    - Shared shapes (created / updated / status changed / deleted) live here;
      per-kind modules subclass them to tag the kind

Usage:
    @dataclass(frozen=True, kw_only=True, slots=True)
    class DepartmentUpdatedEvent(EntityUpdatedEvent):
        event_type: ClassVar[str] = "department.updated"
        aggregate_type: ClassVar[AggregateType] = AggregateType.DEPARTMENT
"""

from dataclasses import dataclass, field, fields
from datetime import UTC, datetime
from typing import Any, ClassVar
from uuid import UUID

from uuid_extensions import uuid7

from iam_admin.domain.enums import (
    AggregateType,
    IsolationLevel,
    LifecycleStatus,
    PrivacyLevel,
)
from iam_admin.domain.services.diffing import FieldChange

ENVELOPE_FIELDS: frozenset[str] = frozenset(
    {"event_id", "aggregate_id", "version", "occurred_on"}
)


@dataclass(frozen=True, kw_only=True, slots=True)
class DomainEvent:
    """Base class for all domain events.

    Attributes:
        aggregate_id: Aggregate the event belongs to.
        version: Aggregate version after this event.
        actor: Acting principal (opaque user id).
        event_id: Unique event id (UUIDv7), auto-generated.
        occurred_on: UTC timestamp, auto-generated.
    """

    event_type: ClassVar[str] = "domain.event"
    aggregate_type: ClassVar[AggregateType]

    aggregate_id: str
    version: int
    actor: str
    event_id: UUID = field(default_factory=uuid7)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(UTC))

    def payload(self) -> dict[str, Any]:
        """Payload fields (everything outside the envelope), by name."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name not in ENVELOPE_FIELDS
        }


@dataclass(frozen=True, kw_only=True, slots=True)
class EntityCreatedEvent(DomainEvent):
    """Created event shape: full scope so projectors never re-query.

    Attributes:
        tenant_id: Owning tenant.
        isolation_level: Isolation level fixed at creation.
        privacy_level: Privacy level.
        status: Initial status.
        organization_id: Owning organization, if any.
        department_ids: Owning departments.
        owner_user_id: Owning user, if any.
    """

    tenant_id: str
    isolation_level: IsolationLevel
    privacy_level: PrivacyLevel
    status: LifecycleStatus
    organization_id: str | None = None
    department_ids: tuple[str, ...] = ()
    owner_user_id: str | None = None


@dataclass(frozen=True, kw_only=True, slots=True)
class EntityUpdatedEvent(DomainEvent):
    """Fields changed by an update, old and new values."""

    changed_fields: dict[str, FieldChange]


@dataclass(frozen=True, kw_only=True, slots=True)
class EntityStatusChangedEvent(DomainEvent):
    """Lifecycle transition. ``occurred_on`` is the transition timestamp."""

    previous_status: LifecycleStatus
    new_status: LifecycleStatus


@dataclass(frozen=True, kw_only=True, slots=True)
class EntityDeletedEvent(DomainEvent):
    """Soft deletion (status DELETED)."""

    previous_status: LifecycleStatus


@dataclass(frozen=True, kw_only=True, slots=True)
class UnrecognizedEvent(DomainEvent):
    """Stored event whose type this build cannot decode.

    Only the envelope survives. Projectors step the document past its
    version so later events of the aggregate are not held behind it.

    Attributes:
        wire_type: The stored ``eventType``.
        kind: Aggregate kind of the record.
    """

    wire_type: str
    kind: AggregateType

    @property
    def event_type(self) -> str:  # type: ignore[override]
        return self.wire_type

    @property
    def aggregate_type(self) -> AggregateType:  # type: ignore[override]
        return self.kind
