"""Domain protocols (ports) implemented by the infrastructure layer."""

from iam_admin.domain.protocols.entity_repository import EntityRepository
from iam_admin.domain.protocols.event_bus_protocol import (
    EventBusProtocol,
    EventHandler,
    HandlerFailure,
)
from iam_admin.domain.protocols.event_dispatcher_protocol import EventDispatcherProtocol
from iam_admin.domain.protocols.logger_protocol import LoggerProtocol
from iam_admin.domain.protocols.outbox_protocol import (
    OutboxProtocol,
    OutboxRecord,
    OutboxStatus,
)
from iam_admin.domain.protocols.read_model_protocol import (
    ReadModelRepository,
    ReadModelStore,
)
from iam_admin.domain.protocols.user_dependents_repository import UserDependentsRepository

__all__ = [
    "EntityRepository",
    "EventBusProtocol",
    "EventDispatcherProtocol",
    "EventHandler",
    "HandlerFailure",
    "LoggerProtocol",
    "OutboxProtocol",
    "OutboxRecord",
    "OutboxStatus",
    "ReadModelRepository",
    "ReadModelStore",
    "UserDependentsRepository",
]
