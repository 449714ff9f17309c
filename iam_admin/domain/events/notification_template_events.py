"""Notification template domain events."""

from dataclasses import dataclass
from typing import ClassVar

from iam_admin.domain.enums import AggregateType, TemplateChannel
from iam_admin.domain.events.base_event import (
    EntityCreatedEvent,
    EntityDeletedEvent,
    EntityStatusChangedEvent,
    EntityUpdatedEvent,
)


@dataclass(frozen=True, kw_only=True, slots=True)
class NotificationTemplateCreatedEvent(EntityCreatedEvent):
    """Template created."""

    event_type: ClassVar[str] = "notification_template.created"
    aggregate_type: ClassVar[AggregateType] = AggregateType.NOTIFICATION_TEMPLATE

    name: str
    channel: TemplateChannel
    content: str
    language: str
    subject: str | None = None
    variables: tuple[str, ...] = ()
    description: str | None = None


@dataclass(frozen=True, kw_only=True, slots=True)
class NotificationTemplateUpdatedEvent(EntityUpdatedEvent):
    """Template fields changed."""

    event_type: ClassVar[str] = "notification_template.updated"
    aggregate_type: ClassVar[AggregateType] = AggregateType.NOTIFICATION_TEMPLATE


@dataclass(frozen=True, kw_only=True, slots=True)
class NotificationTemplateStatusChangedEvent(EntityStatusChangedEvent):
    """Template status changed."""

    event_type: ClassVar[str] = "notification_template.status_changed"
    aggregate_type: ClassVar[AggregateType] = AggregateType.NOTIFICATION_TEMPLATE


@dataclass(frozen=True, kw_only=True, slots=True)
class NotificationTemplateDeletedEvent(EntityDeletedEvent):
    """Template deleted."""

    event_type: ClassVar[str] = "notification_template.deleted"
    aggregate_type: ClassVar[AggregateType] = AggregateType.NOTIFICATION_TEMPLATE


type NotificationTemplateEvent = (
    NotificationTemplateCreatedEvent
    | NotificationTemplateUpdatedEvent
    | NotificationTemplateStatusChangedEvent
    | NotificationTemplateDeletedEvent
)
