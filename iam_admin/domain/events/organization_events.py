"""Organization domain events."""

from dataclasses import dataclass
from typing import ClassVar

from iam_admin.domain.enums import AggregateType, OrganizationType
from iam_admin.domain.events.base_event import (
    EntityCreatedEvent,
    EntityDeletedEvent,
    EntityStatusChangedEvent,
    EntityUpdatedEvent,
)


@dataclass(frozen=True, kw_only=True, slots=True)
class OrganizationCreatedEvent(EntityCreatedEvent):
    """Organization created."""

    event_type: ClassVar[str] = "organization.created"
    aggregate_type: ClassVar[AggregateType] = AggregateType.ORGANIZATION

    name: str
    code: str
    organization_type: OrganizationType
    description: str | None = None


@dataclass(frozen=True, kw_only=True, slots=True)
class OrganizationUpdatedEvent(EntityUpdatedEvent):
    """Organization fields changed."""

    event_type: ClassVar[str] = "organization.updated"
    aggregate_type: ClassVar[AggregateType] = AggregateType.ORGANIZATION


@dataclass(frozen=True, kw_only=True, slots=True)
class OrganizationStatusChangedEvent(EntityStatusChangedEvent):
    """Organization status changed."""

    event_type: ClassVar[str] = "organization.status_changed"
    aggregate_type: ClassVar[AggregateType] = AggregateType.ORGANIZATION


@dataclass(frozen=True, kw_only=True, slots=True)
class OrganizationDeletedEvent(EntityDeletedEvent):
    """Organization deleted."""

    event_type: ClassVar[str] = "organization.deleted"
    aggregate_type: ClassVar[AggregateType] = AggregateType.ORGANIZATION


type OrganizationEvent = (
    OrganizationCreatedEvent
    | OrganizationUpdatedEvent
    | OrganizationStatusChangedEvent
    | OrganizationDeletedEvent
)
