"""Per-kind event application.

Each function folds one event of its kind into the current document. The
caller (``project``) has already checked the version is the next one, so
these only decide the new content. An event class outside the kind's union
falls to the last arm and yields None, which the caller turns into a Drop.
"""

from collections.abc import Callable

from iam_admin.application.projections.documents import (
    created_document,
    rescoped,
    tombstoned,
    with_changes,
    with_status,
)
from iam_admin.domain.enums import AggregateType
from iam_admin.domain.events import (
    DepartmentCreatedEvent,
    DepartmentDeletedEvent,
    DepartmentStatusChangedEvent,
    DepartmentUpdatedEvent,
    DomainEvent,
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
    UserAssignedToOrganizationEvent,
    UserCreatedEvent,
    UserDeletedEvent,
    UserStatusChangedEvent,
    UserUpdatedEvent,
)
from iam_admin.domain.value_objects import ReadModelDocument

type KindProjection = Callable[
    [ReadModelDocument | None, DomainEvent], ReadModelDocument | None
]


def apply_tenant_event(
    document: ReadModelDocument | None, event: DomainEvent
) -> ReadModelDocument | None:
    match event:
        case TenantCreatedEvent():
            return created_document(event)
        case TenantUpdatedEvent() if document is not None:
            return with_changes(document, event)
        case TenantStatusChangedEvent() if document is not None:
            return with_status(document, event)
        case TenantDeletedEvent() if document is not None:
            return tombstoned(document, event)
        case _:
            return None


def apply_organization_event(
    document: ReadModelDocument | None, event: DomainEvent
) -> ReadModelDocument | None:
    match event:
        case OrganizationCreatedEvent():
            return created_document(event)
        case OrganizationUpdatedEvent() if document is not None:
            return with_changes(document, event)
        case OrganizationStatusChangedEvent() if document is not None:
            return with_status(document, event)
        case OrganizationDeletedEvent() if document is not None:
            return tombstoned(document, event)
        case _:
            return None


def apply_department_event(
    document: ReadModelDocument | None, event: DomainEvent
) -> ReadModelDocument | None:
    match event:
        case DepartmentCreatedEvent():
            return created_document(event)
        case DepartmentUpdatedEvent() if document is not None:
            return with_changes(document, event)
        case DepartmentStatusChangedEvent() if document is not None:
            return with_status(document, event)
        case DepartmentDeletedEvent() if document is not None:
            return tombstoned(document, event)
        case _:
            return None


def apply_user_event(
    document: ReadModelDocument | None, event: DomainEvent
) -> ReadModelDocument | None:
    match event:
        case UserCreatedEvent():
            return created_document(event)
        case UserUpdatedEvent() if document is not None:
            return with_changes(document, event)
        case UserStatusChangedEvent() if document is not None:
            return with_status(document, event)
        case UserAssignedToOrganizationEvent() if document is not None:
            return rescoped(document, event)
        case UserDeletedEvent() if document is not None:
            return tombstoned(document, event)
        case _:
            return None


def apply_notification_template_event(
    document: ReadModelDocument | None, event: DomainEvent
) -> ReadModelDocument | None:
    match event:
        case NotificationTemplateCreatedEvent():
            return created_document(event)
        case NotificationTemplateUpdatedEvent() if document is not None:
            return with_changes(document, event)
        case NotificationTemplateStatusChangedEvent() if document is not None:
            return with_status(document, event)
        case NotificationTemplateDeletedEvent() if document is not None:
            return tombstoned(document, event)
        case _:
            return None


KIND_PROJECTIONS: dict[AggregateType, KindProjection] = {
    AggregateType.TENANT: apply_tenant_event,
    AggregateType.ORGANIZATION: apply_organization_event,
    AggregateType.DEPARTMENT: apply_department_event,
    AggregateType.USER: apply_user_event,
    AggregateType.NOTIFICATION_TEMPLATE: apply_notification_template_event,
}
