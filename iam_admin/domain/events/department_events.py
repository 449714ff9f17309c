"""Department domain events.

Re-parenting is an ordinary update: ``parent_department_id``, ``level`` and
``path`` appear together in ``changed_fields``.
"""

from dataclasses import dataclass
from typing import ClassVar

from iam_admin.domain.enums import AggregateType, DepartmentType
from iam_admin.domain.events.base_event import (
    EntityCreatedEvent,
    EntityDeletedEvent,
    EntityStatusChangedEvent,
    EntityUpdatedEvent,
)


@dataclass(frozen=True, kw_only=True, slots=True)
class DepartmentCreatedEvent(EntityCreatedEvent):
    """Department created."""

    event_type: ClassVar[str] = "department.created"
    aggregate_type: ClassVar[AggregateType] = AggregateType.DEPARTMENT

    name: str
    code: str
    department_type: DepartmentType
    level: int
    path: str
    description: str | None = None
    parent_department_id: str | None = None
    manager_id: str | None = None


@dataclass(frozen=True, kw_only=True, slots=True)
class DepartmentUpdatedEvent(EntityUpdatedEvent):
    """Department fields changed."""

    event_type: ClassVar[str] = "department.updated"
    aggregate_type: ClassVar[AggregateType] = AggregateType.DEPARTMENT


@dataclass(frozen=True, kw_only=True, slots=True)
class DepartmentStatusChangedEvent(EntityStatusChangedEvent):
    """Department status changed."""

    event_type: ClassVar[str] = "department.status_changed"
    aggregate_type: ClassVar[AggregateType] = AggregateType.DEPARTMENT


@dataclass(frozen=True, kw_only=True, slots=True)
class DepartmentDeletedEvent(EntityDeletedEvent):
    """Department deleted."""

    event_type: ClassVar[str] = "department.deleted"
    aggregate_type: ClassVar[AggregateType] = AggregateType.DEPARTMENT


type DepartmentEvent = (
    DepartmentCreatedEvent
    | DepartmentUpdatedEvent
    | DepartmentStatusChangedEvent
    | DepartmentDeletedEvent
)
