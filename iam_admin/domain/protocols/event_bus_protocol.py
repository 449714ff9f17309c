"""Event bus protocol (port) for fanning out dispatched events.

Subscribers (projectors, the logging subscriber) register per event class.
Publishing runs every matching handler and reports which ones failed, so the
outbox dispatcher can decide whether a record counts as delivered.

Implementations:
    - InMemoryEventBus: iam_admin/infrastructure/events/in_memory_event_bus.py
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from iam_admin.domain.events.base_event import DomainEvent

EventHandler = Callable[[DomainEvent], Awaitable[None]]
"""Async handler: receives one event, returns None, raises on failure."""


@dataclass(frozen=True, slots=True, kw_only=True)
class HandlerFailure:
    """One handler that raised while handling an event.

    Attributes:
        handler_name: Qualified name of the handler.
        error: Exception the handler raised.
    """

    handler_name: str
    error: BaseException


class EventBusProtocol(Protocol):
    """Protocol for event bus implementations.

    Requirements:
        1. One handler failing does not stop the others.
        2. Handlers registered for a class receive only instances of that
           exact class.
        3. Failures are returned to the publisher, not swallowed.
    """

    def subscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        """Register ``handler`` for ``event_type``.

        Args:
            event_type: Concrete event class (e.g. TenantCreatedEvent).
            handler: Async callable accepting the event.
        """
        ...

    def subscribe_all(self, handler: EventHandler) -> None:
        """Register ``handler`` for every event class."""
        ...

    async def publish(self, event: DomainEvent) -> list[HandlerFailure]:
        """Deliver ``event`` to every registered handler.

        Returns:
            Handlers that raised (empty when all succeeded).
        """
        ...
