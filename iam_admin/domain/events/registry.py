"""Domain events registry, the single source of truth for event wiring.

Used for:
- Decoding wire events (``eventType`` → event class)
- Container wiring (projector and logging subscriptions)
- Drift tests (every event class registered, wire names unique)

Adding new events:
1. Define the event dataclass in the kind's ``*_events.py`` module
2. Add an entry to EVENT_REGISTRY below
3. Handle it in the kind's projection (or the projector logs and drops it)
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum

from iam_admin.domain.enums import AggregateType
from iam_admin.domain.events.base_event import DomainEvent
from iam_admin.domain.events.department_events import (
    DepartmentCreatedEvent,
    DepartmentDeletedEvent,
    DepartmentStatusChangedEvent,
    DepartmentUpdatedEvent,
)
from iam_admin.domain.events.notification_template_events import (
    NotificationTemplateCreatedEvent,
    NotificationTemplateDeletedEvent,
    NotificationTemplateStatusChangedEvent,
    NotificationTemplateUpdatedEvent,
)
from iam_admin.domain.events.organization_events import (
    OrganizationCreatedEvent,
    OrganizationDeletedEvent,
    OrganizationStatusChangedEvent,
    OrganizationUpdatedEvent,
)
from iam_admin.domain.events.tenant_events import (
    TenantCreatedEvent,
    TenantDeletedEvent,
    TenantStatusChangedEvent,
    TenantUpdatedEvent,
)
from iam_admin.domain.events.user_events import (
    UserAssignedToOrganizationEvent,
    UserCreatedEvent,
    UserDeletedEvent,
    UserStatusChangedEvent,
    UserUpdatedEvent,
)


class EventCategory(Enum):
    """What kind of change an event records."""

    CREATED = "created"
    UPDATED = "updated"
    STATUS_CHANGED = "status_changed"
    RESCOPED = "rescoped"
    DELETED = "deleted"


@dataclass(frozen=True)
class EventMetadata:
    """Metadata for one domain event class.

    Attributes:
        event_class: The event dataclass.
        category: Kind of change.
        projected: Delivered to the read model projector.
        requires_logging: Delivered to the logging subscriber.
    """

    event_class: type[DomainEvent]
    category: EventCategory
    projected: bool = True
    requires_logging: bool = True

    @property
    def event_type(self) -> str:
        return self.event_class.event_type

    @property
    def aggregate_type(self) -> AggregateType:
        return self.event_class.aggregate_type


EVENT_REGISTRY: list[EventMetadata] = [
    # Tenant
    EventMetadata(event_class=TenantCreatedEvent, category=EventCategory.CREATED),
    EventMetadata(event_class=TenantUpdatedEvent, category=EventCategory.UPDATED),
    EventMetadata(
        event_class=TenantStatusChangedEvent, category=EventCategory.STATUS_CHANGED
    ),
    EventMetadata(event_class=TenantDeletedEvent, category=EventCategory.DELETED),
    # Organization
    EventMetadata(event_class=OrganizationCreatedEvent, category=EventCategory.CREATED),
    EventMetadata(event_class=OrganizationUpdatedEvent, category=EventCategory.UPDATED),
    EventMetadata(
        event_class=OrganizationStatusChangedEvent,
        category=EventCategory.STATUS_CHANGED,
    ),
    EventMetadata(event_class=OrganizationDeletedEvent, category=EventCategory.DELETED),
    # Department
    EventMetadata(event_class=DepartmentCreatedEvent, category=EventCategory.CREATED),
    EventMetadata(event_class=DepartmentUpdatedEvent, category=EventCategory.UPDATED),
    EventMetadata(
        event_class=DepartmentStatusChangedEvent,
        category=EventCategory.STATUS_CHANGED,
    ),
    EventMetadata(event_class=DepartmentDeletedEvent, category=EventCategory.DELETED),
    # User
    EventMetadata(event_class=UserCreatedEvent, category=EventCategory.CREATED),
    EventMetadata(event_class=UserUpdatedEvent, category=EventCategory.UPDATED),
    EventMetadata(
        event_class=UserStatusChangedEvent, category=EventCategory.STATUS_CHANGED
    ),
    EventMetadata(
        event_class=UserAssignedToOrganizationEvent, category=EventCategory.RESCOPED
    ),
    EventMetadata(event_class=UserDeletedEvent, category=EventCategory.DELETED),
    # Notification template
    EventMetadata(
        event_class=NotificationTemplateCreatedEvent, category=EventCategory.CREATED
    ),
    EventMetadata(
        event_class=NotificationTemplateUpdatedEvent, category=EventCategory.UPDATED
    ),
    EventMetadata(
        event_class=NotificationTemplateStatusChangedEvent,
        category=EventCategory.STATUS_CHANGED,
    ),
    EventMetadata(
        event_class=NotificationTemplateDeletedEvent, category=EventCategory.DELETED
    ),
]

_BY_EVENT_TYPE: dict[str, EventMetadata] = {
    meta.event_type: meta for meta in EVENT_REGISTRY
}


def get_all_events() -> list[type[DomainEvent]]:
    """Get all registered event classes."""
    return [meta.event_class for meta in EVENT_REGISTRY]


def get_event_class(event_type: str) -> type[DomainEvent] | None:
    """Look up an event class by wire ``eventType``; None when unknown."""
    meta = _BY_EVENT_TYPE.get(event_type)
    return meta.event_class if meta is not None else None


def get_events_for_aggregate(
    aggregate_type: AggregateType, *, projected_only: bool = False
) -> list[type[DomainEvent]]:
    """Event classes belonging to one aggregate kind."""
    return [
        meta.event_class
        for meta in EVENT_REGISTRY
        if meta.aggregate_type is aggregate_type
        and (meta.projected or not projected_only)
    ]


def get_events_requiring_logging() -> list[type[DomainEvent]]:
    """Event classes the logging subscriber listens to."""
    return [meta.event_class for meta in EVENT_REGISTRY if meta.requires_logging]


def get_statistics() -> dict[str, int | dict[str, int]]:
    """Get registry statistics.

    Returns:
        Dict with counts by aggregate type and category.
    """
    return {
        "total_events": len(EVENT_REGISTRY),
        "by_aggregate_type": dict(
            Counter(meta.aggregate_type.value for meta in EVENT_REGISTRY)
        ),
        "by_category": dict(Counter(meta.category.value for meta in EVENT_REGISTRY)),
        "projected": sum(1 for meta in EVENT_REGISTRY if meta.projected),
        "requiring_logging": sum(1 for meta in EVENT_REGISTRY if meta.requires_logging),
    }
