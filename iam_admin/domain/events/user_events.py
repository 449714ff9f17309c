"""User domain events."""

from dataclasses import dataclass
from typing import ClassVar

from iam_admin.domain.enums import AggregateType, IsolationLevel, UserType
from iam_admin.domain.events.base_event import (
    DomainEvent,
    EntityCreatedEvent,
    EntityDeletedEvent,
    EntityStatusChangedEvent,
    EntityUpdatedEvent,
)


@dataclass(frozen=True, kw_only=True, slots=True)
class UserCreatedEvent(EntityCreatedEvent):
    """User created."""

    event_type: ClassVar[str] = "user.created"
    aggregate_type: ClassVar[AggregateType] = AggregateType.USER

    username: str
    email: str
    display_name: str
    user_type: UserType
    phone: str | None = None


@dataclass(frozen=True, kw_only=True, slots=True)
class UserUpdatedEvent(EntityUpdatedEvent):
    """User fields changed."""

    event_type: ClassVar[str] = "user.updated"
    aggregate_type: ClassVar[AggregateType] = AggregateType.USER


@dataclass(frozen=True, kw_only=True, slots=True)
class UserStatusChangedEvent(EntityStatusChangedEvent):
    """User status changed."""

    event_type: ClassVar[str] = "user.status_changed"
    aggregate_type: ClassVar[AggregateType] = AggregateType.USER


@dataclass(frozen=True, kw_only=True, slots=True)
class UserAssignedToOrganizationEvent(DomainEvent):
    """User re-scoped into an organization.

    Attributes:
        organization_id: New organization.
        department_ids: New departments (may be empty).
        isolation_level: New isolation level (ORGANIZATION).
        previous_organization_id: Organization before the move.
        previous_department_ids: Departments before the move.
        previous_isolation_level: Isolation level before the move.
    """

    event_type: ClassVar[str] = "user.assigned_to_organization"
    aggregate_type: ClassVar[AggregateType] = AggregateType.USER

    organization_id: str
    department_ids: tuple[str, ...]
    isolation_level: IsolationLevel
    previous_isolation_level: IsolationLevel
    previous_organization_id: str | None = None
    previous_department_ids: tuple[str, ...] = ()


@dataclass(frozen=True, kw_only=True, slots=True)
class UserDeletedEvent(EntityDeletedEvent):
    """User deleted (profile and relationships are hard-deleted)."""

    event_type: ClassVar[str] = "user.deleted"
    aggregate_type: ClassVar[AggregateType] = AggregateType.USER


type UserEvent = (
    UserCreatedEvent
    | UserUpdatedEvent
    | UserStatusChangedEvent
    | UserAssignedToOrganizationEvent
    | UserDeletedEvent
)
