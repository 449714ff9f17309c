"""Tenant classification and the quota defaults that follow from it."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, slots=True)
class TenantQuota:
    """Resource limits granted to a tenant."""

    max_users: int
    max_organizations: int
    max_storage_gb: int


class TenantType(str, Enum):
    """Tenant classification.

    Example:
        >>> TenantType.PERSONAL.default_quota().max_users
        10
    """

    ENTERPRISE = "ENTERPRISE"
    ORGANIZATION = "ORGANIZATION"
    PARTNERSHIP = "PARTNERSHIP"
    PERSONAL = "PERSONAL"

    def default_quota(self) -> TenantQuota:
        return _DEFAULT_QUOTAS[self]


_DEFAULT_QUOTAS: dict[TenantType, TenantQuota] = {
    TenantType.ENTERPRISE: TenantQuota(
        max_users=10000, max_organizations=100, max_storage_gb=1000
    ),
    TenantType.ORGANIZATION: TenantQuota(
        max_users=1000, max_organizations=20, max_storage_gb=100
    ),
    TenantType.PARTNERSHIP: TenantQuota(
        max_users=500, max_organizations=10, max_storage_gb=50
    ),
    TenantType.PERSONAL: TenantQuota(
        max_users=10, max_organizations=1, max_storage_gb=10
    ),
}
