"""Event delivery: in-memory bus and the outbox dispatcher."""

from iam_admin.infrastructure.events.in_memory_event_bus import InMemoryEventBus
from iam_admin.infrastructure.events.outbox_dispatcher import (
    DispatchReport,
    OutboxDispatcher,
)

__all__ = ["DispatchReport", "InMemoryEventBus", "OutboxDispatcher"]
