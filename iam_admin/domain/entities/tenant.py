"""Tenant domain entity.

A tenant is the top-level isolation boundary. Its scope points at itself
(``tenant_id == id``) at TENANT level. Name, code and domain are unique
across the platform.

Usage:
    aggregate = create_tenant(...)  # see iam_admin.domain.aggregates
"""

from dataclasses import dataclass
from typing import ClassVar

from iam_admin.domain.entities.scoped_entity import ScopedEntity
from iam_admin.domain.enums import AggregateType, TenantType
from iam_admin.domain.errors import EntityError


@dataclass(kw_only=True)
class Tenant(ScopedEntity):
    """Tenant with quota limits.

    Attributes:
        name: Display name (unique platform-wide).
        code: Short identifier (unique platform-wide, immutable).
        domain: Primary hostname (unique platform-wide).
        tenant_type: Classification driving default quotas.
        description: Optional free text.
        max_users: User quota.
        max_organizations: Organization quota.
        max_storage_gb: Storage quota in GB.
    """

    AGGREGATE_TYPE: ClassVar[AggregateType] = AggregateType.TENANT
    UPDATABLE_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {
            "name",
            "domain",
            "description",
            "max_users",
            "max_organizations",
            "max_storage_gb",
        }
    )
    NATURAL_KEYS: ClassVar[tuple[str, ...]] = ("name", "code", "domain")

    name: str
    code: str
    domain: str
    tenant_type: TenantType
    description: str | None = None
    max_users: int = 0
    max_organizations: int = 0
    max_storage_gb: int = 0

    def __post_init__(self) -> None:
        super().__post_init__()
        if not self.name or not self.name.strip():
            raise ValueError(EntityError.MISSING_NAME)
        if not self.code or not self.code.strip():
            raise ValueError(EntityError.MISSING_CODE)
