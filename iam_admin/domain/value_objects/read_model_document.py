"""Read model document.

One document per aggregate id, owned exclusively by the projector. Scope
fields are denormalized for filtering; business fields sit in ``data`` as
JSON-compatible values. ``last_applied_version`` is the version of the last
event folded in, which makes replays and gaps detectable.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from iam_admin.domain.entities.scope import Scope
from iam_admin.domain.enums import (
    AggregateType,
    IsolationLevel,
    LifecycleStatus,
    PrivacyLevel,
)


@dataclass(frozen=True, slots=True, kw_only=True)
class ReadModelDocument:
    """Denormalized query-side view of one aggregate.

    Attributes:
        id: Aggregate id.
        aggregate_type: Aggregate kind.
        tenant_id: Owning tenant.
        isolation_level: Isolation level.
        privacy_level: Privacy level.
        status: Lifecycle status.
        last_applied_version: Version of the last applied event.
        created_at: Timestamp of the Created event.
        updated_at: Timestamp of the last applied event.
        created_by: Actor of the Created event.
        updated_by: Actor of the last applied event.
        organization_id: Owning organization, if any.
        department_ids: Owning departments.
        owner_user_id: Owning user, if any.
        deleted: Tombstone flag set by the Deleted event.
        data: Projected business fields.
    """

    id: str
    aggregate_type: AggregateType
    tenant_id: str
    isolation_level: IsolationLevel
    privacy_level: PrivacyLevel
    status: LifecycleStatus
    last_applied_version: int
    created_at: datetime
    updated_at: datetime
    created_by: str
    updated_by: str
    organization_id: str | None = None
    department_ids: tuple[str, ...] = ()
    owner_user_id: str | None = None
    deleted: bool = False
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def scope(self) -> Scope:
        return Scope(
            tenant_id=self.tenant_id,
            organization_id=self.organization_id,
            department_ids=self.department_ids,
            user_id=self.owner_user_id,
            isolation_level=self.isolation_level,
            privacy_level=self.privacy_level,
        )

    def to_dict(self) -> dict[str, Any]:
        """Storage mapping (``_id`` keyed, enums as values)."""
        return {
            "_id": self.id,
            "aggregate_type": self.aggregate_type.value,
            "tenant_id": self.tenant_id,
            "organization_id": self.organization_id,
            "department_ids": list(self.department_ids),
            "owner_user_id": self.owner_user_id,
            "isolation_level": self.isolation_level.value,
            "privacy_level": self.privacy_level.value,
            "status": self.status.value,
            "last_applied_version": self.last_applied_version,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "created_by": self.created_by,
            "updated_by": self.updated_by,
            "deleted": self.deleted,
            "data": dict(self.data),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ReadModelDocument":
        """Inverse of ``to_dict``."""
        return cls(
            id=raw["_id"],
            aggregate_type=AggregateType(raw["aggregate_type"]),
            tenant_id=raw["tenant_id"],
            organization_id=raw.get("organization_id"),
            department_ids=tuple(raw.get("department_ids") or ()),
            owner_user_id=raw.get("owner_user_id"),
            isolation_level=IsolationLevel(raw["isolation_level"]),
            privacy_level=PrivacyLevel(raw["privacy_level"]),
            status=LifecycleStatus(raw["status"]),
            last_applied_version=int(raw["last_applied_version"]),
            created_at=raw["created_at"],
            updated_at=raw["updated_at"],
            created_by=raw["created_by"],
            updated_by=raw["updated_by"],
            deleted=bool(raw.get("deleted", False)),
            data=dict(raw.get("data") or {}),
        )
