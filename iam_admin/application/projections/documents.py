"""Document transformations shared by the per-kind projections."""

from dataclasses import replace
from typing import Any

from iam_admin.domain.enums import LifecycleStatus
from iam_admin.domain.events import (
    DomainEvent,
    EntityCreatedEvent,
    EntityDeletedEvent,
    EntityStatusChangedEvent,
    EntityUpdatedEvent,
    UserAssignedToOrganizationEvent,
)
from iam_admin.domain.events.codec import to_primitive
from iam_admin.domain.value_objects import ReadModelDocument

CREATED_SCOPE_FIELDS: frozenset[str] = frozenset(
    {
        "actor",
        "tenant_id",
        "isolation_level",
        "privacy_level",
        "status",
        "organization_id",
        "department_ids",
        "owner_user_id",
    }
)


def _advance(document: ReadModelDocument, event: DomainEvent, **changes: Any) -> ReadModelDocument:
    return replace(
        document,
        last_applied_version=event.version,
        updated_at=event.occurred_on,
        updated_by=event.actor,
        **changes,
    )


def created_document(event: EntityCreatedEvent) -> ReadModelDocument:
    """First document for an aggregate, built from its Created event only."""
    return ReadModelDocument(
        id=event.aggregate_id,
        aggregate_type=event.aggregate_type,
        tenant_id=event.tenant_id,
        organization_id=event.organization_id,
        department_ids=tuple(event.department_ids),
        owner_user_id=event.owner_user_id,
        isolation_level=event.isolation_level,
        privacy_level=event.privacy_level,
        status=event.status,
        last_applied_version=event.version,
        created_at=event.occurred_on,
        updated_at=event.occurred_on,
        created_by=event.actor,
        updated_by=event.actor,
        data={
            name: to_primitive(value)
            for name, value in event.payload().items()
            if name not in CREATED_SCOPE_FIELDS
        },
    )


def with_changes(document: ReadModelDocument, event: EntityUpdatedEvent) -> ReadModelDocument:
    data = dict(document.data)
    for name, change in event.changed_fields.items():
        data[name] = to_primitive(change.new)
    return _advance(document, event, data=data)


def with_status(
    document: ReadModelDocument, event: EntityStatusChangedEvent
) -> ReadModelDocument:
    return _advance(document, event, status=event.new_status)


def tombstoned(document: ReadModelDocument, event: EntityDeletedEvent) -> ReadModelDocument:
    return _advance(document, event, status=LifecycleStatus.DELETED, deleted=True)


def rescoped(
    document: ReadModelDocument, event: UserAssignedToOrganizationEvent
) -> ReadModelDocument:
    return _advance(
        document,
        event,
        organization_id=event.organization_id,
        department_ids=tuple(event.department_ids),
        isolation_level=event.isolation_level,
    )
