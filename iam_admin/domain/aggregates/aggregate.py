"""Aggregate: an entity plus its uncommitted events.

The aggregate is a plain container. All legal mutations are the free
functions in this module and the per-kind factory modules; each successful
mutation records at most one event and bumps ``entity.version``.

Invariants:
    - No event for a no-op (same status, identical field values)
    - Failed mutations leave the entity untouched and record nothing
    - ``persisted_version`` is the version the store holds; the write
      repository compares against it (optimistic concurrency)

Usage:
    aggregate = Aggregate.load(department)
    result = change_status(aggregate, LifecycleStatus.ACTIVE, actor="u1")
    if isinstance(result, Success) and result.value:
        ...  # status changed, one event pending
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import BusinessRuleViolation
from iam_admin.core.result import Failure, Result, Success
from iam_admin.domain.aggregates.event_families import family_for
from iam_admin.domain.entities.scoped_entity import ScopedEntity
from iam_admin.domain.enums import AggregateType, LifecycleStatus
from iam_admin.domain.errors import Rule
from iam_admin.domain.events.base_event import DomainEvent
from iam_admin.domain.services.diffing import FieldChange, diff_fields

E = TypeVar("E", bound=ScopedEntity)


@dataclass
class Aggregate(Generic[E]):
    """Entity plus buffered, not yet dispatched events.

    Attributes:
        entity: The wrapped scoped entity.
        pending_events: Events recorded since load or last clear, in order.
        persisted_version: Entity version currently held by the write store
            (0 for a new aggregate).
    """

    entity: E
    pending_events: list[DomainEvent] = field(default_factory=list)
    persisted_version: int = 0

    @classmethod
    def load(cls, entity: E) -> "Aggregate[E]":
        """Wrap an entity read from the write store."""
        return cls(entity=entity, persisted_version=entity.version)

    @property
    def id(self) -> str:
        return self.entity.id

    @property
    def aggregate_type(self) -> AggregateType:
        return self.entity.AGGREGATE_TYPE

    @property
    def version(self) -> int:
        return self.entity.version

    @property
    def next_version(self) -> int:
        return self.entity.version + 1

    @property
    def has_pending_events(self) -> bool:
        return bool(self.pending_events)


def record_event(aggregate: Aggregate[Any], event: DomainEvent) -> None:
    """Append an event and advance the entity version to match it.

    Raises:
        ValueError: If the event does not belong to this aggregate or skips a
            version (programming error).
    """
    if event.aggregate_id != aggregate.id:
        raise ValueError("Event aggregate_id does not match aggregate")
    if event.version != aggregate.next_version:
        raise ValueError(
            f"Event version {event.version} does not follow {aggregate.version}"
        )
    aggregate.pending_events.append(event)
    aggregate.entity.version = event.version


def clear_events(aggregate: Aggregate[Any]) -> list[DomainEvent]:
    """Drain the pending events, returning them in order."""
    drained = list(aggregate.pending_events)
    aggregate.pending_events.clear()
    return drained


def mark_persisted(aggregate: Aggregate[Any]) -> None:
    """Record that the store now holds the current version."""
    aggregate.persisted_version = aggregate.entity.version


def _touch(entity: ScopedEntity, actor: str, now: datetime) -> None:
    entity.updated_by = actor
    entity.updated_at = now


def change_status(
    aggregate: Aggregate[Any],
    target: LifecycleStatus,
    *,
    actor: str,
    now: datetime | None = None,
) -> Result[bool, BusinessRuleViolation]:
    """Move the entity to ``target`` following the transition table.

    Returns:
        Success(True) when the status changed (one StatusChanged event
        recorded), Success(False) when ``target`` is already the current
        status, Failure when the transition is not allowed.
    """
    entity = aggregate.entity
    current = entity.status

    if target is current:
        return Success(value=False)

    if not current.can_transition_to(target):
        return Failure(
            error=BusinessRuleViolation(
                code=ErrorCode.INVALID_STATE_TRANSITION,
                message=f"Cannot change status from {current.value} to {target.value}",
                rule=Rule.VALID_TRANSITION,
                field="status",
                details={"from": current.value, "to": target.value},
            )
        )

    now = now or datetime.now(UTC)
    entity.status = target
    _touch(entity, actor, now)
    record_event(
        aggregate,
        family_for(aggregate.aggregate_type).status_changed(
            aggregate_id=entity.id,
            version=aggregate.next_version,
            actor=actor,
            occurred_on=now,
            previous_status=current,
            new_status=target,
        ),
    )
    return Success(value=True)


def update_info(
    aggregate: Aggregate[Any],
    changes: Mapping[str, Any],
    *,
    actor: str,
    now: datetime | None = None,
) -> dict[str, FieldChange]:
    """Apply the supplied field values that differ from the current ones.

    Args:
        aggregate: Aggregate to mutate.
        changes: Field values supplied by the caller. Keys must be in the
            entity's UPDATABLE_FIELDS.
        actor: Acting principal.
        now: Change timestamp (defaults to now, UTC).

    Returns:
        The applied changes. Empty means nothing changed: no event, no
        timestamp update.

    Raises:
        ValueError: If a key is not updatable (programming error).
    """
    entity = aggregate.entity
    unknown = set(changes) - entity.UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Fields not updatable: {', '.join(sorted(unknown))}")

    applied = diff_fields(entity.field_values(tuple(changes)), changes)
    if not applied:
        return applied

    now = now or datetime.now(UTC)
    for name, change in applied.items():
        setattr(entity, name, change.new)
    _touch(entity, actor, now)
    record_event(
        aggregate,
        family_for(aggregate.aggregate_type).updated(
            aggregate_id=entity.id,
            version=aggregate.next_version,
            actor=actor,
            occurred_on=now,
            changed_fields=applied,
        ),
    )
    return applied


def mark_deleted(
    aggregate: Aggregate[Any],
    *,
    actor: str,
    now: datetime | None = None,
) -> Result[None, BusinessRuleViolation]:
    """Soft-delete: move to the terminal DELETED status."""
    entity = aggregate.entity
    previous = entity.status
    if previous.is_terminal:
        return Failure(
            error=BusinessRuleViolation(
                code=ErrorCode.INVALID_STATE_TRANSITION,
                message="Entity is already deleted",
                rule=Rule.VALID_TRANSITION,
                field="status",
            )
        )

    now = now or datetime.now(UTC)
    entity.status = LifecycleStatus.DELETED
    _touch(entity, actor, now)
    record_event(
        aggregate,
        family_for(aggregate.aggregate_type).deleted(
            aggregate_id=entity.id,
            version=aggregate.next_version,
            actor=actor,
            occurred_on=now,
            previous_status=previous,
        ),
    )
    return Success(value=None)
