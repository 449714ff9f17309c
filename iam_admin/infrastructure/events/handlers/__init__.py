"""Event handlers subscribed to the event bus."""

from iam_admin.infrastructure.events.handlers.logging_event_handler import (
    LoggingEventHandler,
)

__all__ = ["LoggingEventHandler"]
