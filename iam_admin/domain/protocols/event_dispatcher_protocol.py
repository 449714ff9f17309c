"""Dispatch trigger used by the command pipeline after commit."""

from collections.abc import Sequence
from typing import Protocol

from iam_admin.domain.events.base_event import DomainEvent


class EventDispatcherProtocol(Protocol):
    """Post-commit notification port.

    The events are already durable in the outbox when ``publish`` is called.
    Implementations either deliver them right away or just wake a background
    loop; either way a failure here never rolls back the write.
    """

    async def publish(self, events: Sequence[DomainEvent]) -> None:
        """Signal that ``events`` were committed and are ready to dispatch."""
        ...
