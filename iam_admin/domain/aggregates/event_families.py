"""Per-kind event classes for the shared lifecycle operations."""

from dataclasses import dataclass

from iam_admin.domain.enums import AggregateType
from iam_admin.domain.events import (
    DepartmentCreatedEvent,
    DepartmentDeletedEvent,
    DepartmentStatusChangedEvent,
    DepartmentUpdatedEvent,
    EntityCreatedEvent,
    EntityDeletedEvent,
    EntityStatusChangedEvent,
    EntityUpdatedEvent,
    NotificationTemplateCreatedEvent,
    NotificationTemplateDeletedEvent,
    NotificationTemplateStatusChangedEvent,
    NotificationTemplateUpdatedEvent,
    OrganizationCreatedEvent,
    OrganizationDeletedEvent,
    OrganizationStatusChangedEvent,
    OrganizationUpdatedEvent,
    TenantCreatedEvent,
    TenantDeletedEvent,
    TenantStatusChangedEvent,
    TenantUpdatedEvent,
    UserCreatedEvent,
    UserDeletedEvent,
    UserStatusChangedEvent,
    UserUpdatedEvent,
)


@dataclass(frozen=True, slots=True)
class EventFamily:
    """Event classes one aggregate kind uses for the shared operations."""

    created: type[EntityCreatedEvent]
    updated: type[EntityUpdatedEvent]
    status_changed: type[EntityStatusChangedEvent]
    deleted: type[EntityDeletedEvent]


EVENT_FAMILIES: dict[AggregateType, EventFamily] = {
    AggregateType.TENANT: EventFamily(
        created=TenantCreatedEvent,
        updated=TenantUpdatedEvent,
        status_changed=TenantStatusChangedEvent,
        deleted=TenantDeletedEvent,
    ),
    AggregateType.ORGANIZATION: EventFamily(
        created=OrganizationCreatedEvent,
        updated=OrganizationUpdatedEvent,
        status_changed=OrganizationStatusChangedEvent,
        deleted=OrganizationDeletedEvent,
    ),
    AggregateType.DEPARTMENT: EventFamily(
        created=DepartmentCreatedEvent,
        updated=DepartmentUpdatedEvent,
        status_changed=DepartmentStatusChangedEvent,
        deleted=DepartmentDeletedEvent,
    ),
    AggregateType.USER: EventFamily(
        created=UserCreatedEvent,
        updated=UserUpdatedEvent,
        status_changed=UserStatusChangedEvent,
        deleted=UserDeletedEvent,
    ),
    AggregateType.NOTIFICATION_TEMPLATE: EventFamily(
        created=NotificationTemplateCreatedEvent,
        updated=NotificationTemplateUpdatedEvent,
        status_changed=NotificationTemplateStatusChangedEvent,
        deleted=NotificationTemplateDeletedEvent,
    ),
}


def family_for(aggregate_type: AggregateType) -> EventFamily:
    return EVENT_FAMILIES[aggregate_type]
