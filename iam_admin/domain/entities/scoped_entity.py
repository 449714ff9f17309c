"""Fields shared by every scoped entity kind.

Architecture:
    - Plain data container, no behaviour beyond read-only accessors
    - Mutations go through ``iam_admin.domain.aggregates`` functions, which
      enforce the lifecycle table and record events
    - ``version`` counts applied events (0 before creation, 1 after Created)
      and is the optimistic concurrency token of the write store
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar

from iam_admin.domain.entities.scope import Scope
from iam_admin.domain.enums import (
    AggregateType,
    IsolationLevel,
    LifecycleStatus,
    PrivacyLevel,
)
from iam_admin.domain.errors import EntityError


@dataclass(kw_only=True)
class ScopedEntity:
    """Base data for tenants, organizations, departments, users, templates.

    Attributes:
        id: Unique identifier (UUIDv7 string).
        scope: Tenancy scope; replaced wholesale on re-scoping.
        status: Lifecycle status.
        created_by: Actor that created the entity.
        updated_by: Actor of the last change.
        created_at: Creation timestamp (UTC).
        updated_at: Last change timestamp (UTC).
        version: Number of events applied.
    """

    AGGREGATE_TYPE: ClassVar[AggregateType]
    UPDATABLE_FIELDS: ClassVar[frozenset[str]] = frozenset()
    NATURAL_KEYS: ClassVar[tuple[str, ...]] = ()

    id: str
    scope: Scope
    created_by: str
    updated_by: str
    created_at: datetime
    updated_at: datetime
    status: LifecycleStatus = LifecycleStatus.INITIALIZING
    version: int = 0

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValueError(EntityError.MISSING_ID)
        if not self.created_by or not self.created_by.strip():
            raise ValueError(EntityError.MISSING_ACTOR)

    @property
    def tenant_id(self) -> str:
        return self.scope.tenant_id

    @property
    def organization_id(self) -> str | None:
        return self.scope.organization_id

    @property
    def department_ids(self) -> tuple[str, ...]:
        return self.scope.department_ids

    @property
    def isolation_level(self) -> IsolationLevel:
        return self.scope.isolation_level

    @property
    def privacy_level(self) -> PrivacyLevel:
        return self.scope.privacy_level

    @property
    def is_deleted(self) -> bool:
        return self.status is LifecycleStatus.DELETED

    def field_values(self, names: frozenset[str] | tuple[str, ...]) -> dict[str, Any]:
        """Current values of the named attributes."""
        return {name: getattr(self, name) for name in names}
