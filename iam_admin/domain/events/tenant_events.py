"""Tenant domain events."""

from dataclasses import dataclass
from typing import ClassVar

from iam_admin.domain.enums import AggregateType, TenantType
from iam_admin.domain.events.base_event import (
    EntityCreatedEvent,
    EntityDeletedEvent,
    EntityStatusChangedEvent,
    EntityUpdatedEvent,
)


@dataclass(frozen=True, kw_only=True, slots=True)
class TenantCreatedEvent(EntityCreatedEvent):
    """Tenant created."""

    event_type: ClassVar[str] = "tenant.created"
    aggregate_type: ClassVar[AggregateType] = AggregateType.TENANT

    name: str
    code: str
    domain: str
    tenant_type: TenantType
    max_users: int
    max_organizations: int
    max_storage_gb: int
    description: str | None = None


@dataclass(frozen=True, kw_only=True, slots=True)
class TenantUpdatedEvent(EntityUpdatedEvent):
    """Tenant fields changed."""

    event_type: ClassVar[str] = "tenant.updated"
    aggregate_type: ClassVar[AggregateType] = AggregateType.TENANT


@dataclass(frozen=True, kw_only=True, slots=True)
class TenantStatusChangedEvent(EntityStatusChangedEvent):
    """Tenant status changed."""

    event_type: ClassVar[str] = "tenant.status_changed"
    aggregate_type: ClassVar[AggregateType] = AggregateType.TENANT


@dataclass(frozen=True, kw_only=True, slots=True)
class TenantDeletedEvent(EntityDeletedEvent):
    """Tenant deleted."""

    event_type: ClassVar[str] = "tenant.deleted"
    aggregate_type: ClassVar[AggregateType] = AggregateType.TENANT


type TenantEvent = (
    TenantCreatedEvent
    | TenantUpdatedEvent
    | TenantStatusChangedEvent
    | TenantDeletedEvent
)
