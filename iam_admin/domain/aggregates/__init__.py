"""Aggregates: entity + pending events, and the operations that mutate them."""

from iam_admin.domain.aggregates.aggregate import (
    Aggregate,
    change_status,
    clear_events,
    mark_deleted,
    mark_persisted,
    record_event,
    update_info,
)
from iam_admin.domain.aggregates.event_families import EVENT_FAMILIES, family_for
from iam_admin.domain.aggregates.factories import (
    assign_user_to_organization,
    create_department,
    create_notification_template,
    create_organization,
    create_tenant,
    create_user,
    new_id,
)

__all__ = [
    "EVENT_FAMILIES",
    "Aggregate",
    "assign_user_to_organization",
    "change_status",
    "clear_events",
    "create_department",
    "create_notification_template",
    "create_organization",
    "create_tenant",
    "create_user",
    "family_for",
    "mark_deleted",
    "mark_persisted",
    "new_id",
    "record_event",
    "update_info",
]
