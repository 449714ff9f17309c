"""In-memory event bus implementation.

Implements EventBusProtocol with a dictionary-based handler registry. The
outbox dispatcher publishes each committed event here; subscribers are the
read model projector and the logging handler.

Architecture:
    - Implements EventBusProtocol (hexagonal adapter pattern)
    - Dictionary-based handler registry (event class -> handlers) plus
      catch-all handlers
    - Handlers for one event run concurrently (asyncio.gather); one failure
      does not stop the others
    - Each handler runs under a timeout
    - Failures are logged AND returned, so the dispatcher can retry the
      outbox record

Usage:
    >>> bus = InMemoryEventBus(logger=logger, handler_timeout=10.0)
    >>> bus.subscribe(DepartmentCreatedEvent, projector)
    >>> bus.subscribe_all(logging_handler.handle)
    >>> failures = await bus.publish(event)
"""

import asyncio
from collections import defaultdict

from iam_admin.domain.events.base_event import DomainEvent
from iam_admin.domain.protocols.event_bus_protocol import EventHandler, HandlerFailure
from iam_admin.domain.protocols.logger_protocol import LoggerProtocol


def handler_name(handler: EventHandler) -> str:
    """Readable name for functions, bound methods and callable objects."""
    return (
        getattr(handler, "__qualname__", None)
        or getattr(handler, "name", None)
        or type(handler).__name__
    )


class InMemoryEventBus:
    """In-memory event bus.

    Thread Safety:
        NOT thread-safe (single event loop design).

    Attributes:
        _handlers: Event class -> handlers for exactly that class.
        _catch_all: Handlers receiving every event.
        _handler_timeout: Seconds each handler may run (None: unbounded).
        _logger: Logger for publishing and handler failures.
    """

    def __init__(
        self, logger: LoggerProtocol, handler_timeout: float | None = None
    ) -> None:
        """Initialize event bus.

        Args:
            logger: Logger for handler failures (warning) and publishing (debug).
            handler_timeout: Per-handler timeout in seconds.
        """
        self._handlers: dict[type[DomainEvent], list[EventHandler]] = defaultdict(list)
        self._catch_all: list[EventHandler] = []
        self._handler_timeout = handler_timeout
        self._logger = logger

    def subscribe(
        self,
        event_type: type[DomainEvent],
        handler: EventHandler,
    ) -> None:
        """Register ``handler`` for ``event_type`` (exact class match).

        Notes:
            - No duplicate detection (same handler can be registered twice)
            - Handlers must be idempotent (delivery is at-least-once)
        """
        self._handlers[event_type].append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        """Register ``handler`` for every event class."""
        self._catch_all.append(handler)

    def handlers_for(self, event_type: type[DomainEvent]) -> list[EventHandler]:
        return [*self._handlers.get(event_type, []), *self._catch_all]

    async def publish(self, event: DomainEvent) -> list[HandlerFailure]:
        """Deliver ``event`` to every registered handler.

        Flow:
            1. Look up handlers for type(event) plus catch-all handlers
            2. If none, return immediately (no-op)
            3. Run all handlers with asyncio.gather(return_exceptions=True)
            4. Log and collect failures (timeouts included)

        Returns:
            One HandlerFailure per handler that raised or timed out.
        """
        handlers = self.handlers_for(type(event))
        if not handlers:
            return []

        self._logger.debug(
            "event_publishing",
            event_type=event.event_type,
            event_id=str(event.event_id),
            handler_count=len(handlers),
        )

        results = await asyncio.gather(
            *(self._run(handler, event) for handler in handlers),
            return_exceptions=True,
        )

        failures: list[HandlerFailure] = []
        for handler, result in zip(handlers, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                name = handler_name(handler)
                failures.append(HandlerFailure(handler_name=name, error=result))
                self._logger.warning(
                    "event_handler_failed",
                    event_type=event.event_type,
                    event_id=str(event.event_id),
                    aggregate_id=event.aggregate_id,
                    version=event.version,
                    handler_name=name,
                    error_type=type(result).__name__,
                    error_message=str(result),
                )
        return failures

    async def _run(self, handler: EventHandler, event: DomainEvent) -> None:
        if self._handler_timeout is None:
            await handler(event)
        else:
            await asyncio.wait_for(handler(event), timeout=self._handler_timeout)
