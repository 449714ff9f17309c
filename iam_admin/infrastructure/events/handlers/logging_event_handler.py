"""Logging event handler for dispatched domain events.

Subscribes to every event through ``subscribe_all`` and writes one
structured log line per delivery. Status changes and deletions are logged
with their transition so an operator can follow an aggregate's lifecycle
from the logs alone.

Usage:
    >>> handler = LoggingEventHandler(logger=logger)
    >>> bus.subscribe_all(handler.handle)
"""

from iam_admin.domain.events.base_event import (
    DomainEvent,
    EntityDeletedEvent,
    EntityStatusChangedEvent,
    EntityUpdatedEvent,
)
from iam_admin.domain.protocols.logger_protocol import LoggerProtocol


class LoggingEventHandler:
    """Event handler for structured logging of dispatched events."""

    def __init__(self, logger: LoggerProtocol) -> None:
        """Initialize logging handler with logger.

        Args:
            logger: Logger protocol implementation from container.
        """
        self._logger = logger

    async def handle(self, event: DomainEvent) -> None:
        """Log one dispatched event (INFO level)."""
        extra: dict[str, object] = {}
        match event:
            case EntityStatusChangedEvent(previous_status=old, new_status=new):
                extra = {"previous_status": old.value, "new_status": new.value}
            case EntityDeletedEvent(previous_status=old):
                extra = {"previous_status": old.value}
            case EntityUpdatedEvent(changed_fields=changes):
                extra = {"changed_fields": sorted(changes)}

        self._logger.info(
            "domain_event_dispatched",
            event_id=str(event.event_id),
            event_type=event.event_type,
            aggregate_type=event.aggregate_type.value,
            aggregate_id=event.aggregate_id,
            version=event.version,
            actor=event.actor,
            occurred_on=event.occurred_on.isoformat(),
            **extra,
        )
