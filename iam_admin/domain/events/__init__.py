"""Domain events package."""

from iam_admin.domain.events.base_event import (
    DomainEvent,
    EntityCreatedEvent,
    EntityDeletedEvent,
    EntityStatusChangedEvent,
    EntityUpdatedEvent,
    UnrecognizedEvent,
)
from iam_admin.domain.events.department_events import (
    DepartmentCreatedEvent,
    DepartmentDeletedEvent,
    DepartmentEvent,
    DepartmentStatusChangedEvent,
    DepartmentUpdatedEvent,
)
from iam_admin.domain.events.notification_template_events import (
    NotificationTemplateCreatedEvent,
    NotificationTemplateDeletedEvent,
    NotificationTemplateEvent,
    NotificationTemplateStatusChangedEvent,
    NotificationTemplateUpdatedEvent,
)
from iam_admin.domain.events.organization_events import (
    OrganizationCreatedEvent,
    OrganizationDeletedEvent,
    OrganizationEvent,
    OrganizationStatusChangedEvent,
    OrganizationUpdatedEvent,
)
from iam_admin.domain.events.tenant_events import (
    TenantCreatedEvent,
    TenantDeletedEvent,
    TenantEvent,
    TenantStatusChangedEvent,
    TenantUpdatedEvent,
)
from iam_admin.domain.events.user_events import (
    UserAssignedToOrganizationEvent,
    UserCreatedEvent,
    UserDeletedEvent,
    UserEvent,
    UserStatusChangedEvent,
    UserUpdatedEvent,
)

__all__ = [
    "DomainEvent",
    "EntityCreatedEvent",
    "EntityDeletedEvent",
    "EntityStatusChangedEvent",
    "EntityUpdatedEvent",
    "UnrecognizedEvent",
    "DepartmentCreatedEvent",
    "DepartmentDeletedEvent",
    "DepartmentEvent",
    "DepartmentStatusChangedEvent",
    "DepartmentUpdatedEvent",
    "NotificationTemplateCreatedEvent",
    "NotificationTemplateDeletedEvent",
    "NotificationTemplateEvent",
    "NotificationTemplateStatusChangedEvent",
    "NotificationTemplateUpdatedEvent",
    "OrganizationCreatedEvent",
    "OrganizationDeletedEvent",
    "OrganizationEvent",
    "OrganizationStatusChangedEvent",
    "OrganizationUpdatedEvent",
    "TenantCreatedEvent",
    "TenantDeletedEvent",
    "TenantEvent",
    "TenantStatusChangedEvent",
    "TenantUpdatedEvent",
    "UserAssignedToOrganizationEvent",
    "UserCreatedEvent",
    "UserDeletedEvent",
    "UserEvent",
    "UserStatusChangedEvent",
    "UserUpdatedEvent",
]
