"""Tenant commands (CQRS write operations).

Commands are immutable data containers; handlers hold the logic and return
Result values. Update commands treat ``None`` as "not supplied".
"""

from dataclasses import dataclass

from iam_admin.domain.enums import PrivacyLevel, TenantType


@dataclass(frozen=True, kw_only=True)
class CreateTenant:
    """Create a tenant.

    Attributes:
        name: Display name, unique platform-wide.
        code: Short code, unique platform-wide.
        domain: Primary hostname, unique platform-wide.
        tenant_type: Tenant kind; selects the default quotas.
        actor: Acting principal.
        description: Optional description.
        max_users: Quota override.
        max_organizations: Quota override.
        max_storage_gb: Quota override.
        privacy_level: Privacy override (default SHARED).

    Example:
        >>> command = CreateTenant(
        ...     name="Acme",
        ...     code="ACME",
        ...     domain="acme.example.com",
        ...     tenant_type=TenantType.ENTERPRISE,
        ...     actor="admin-1",
        ... )
        >>> result = await handler.handle(command)
    """

    name: str
    code: str
    domain: str
    tenant_type: TenantType
    actor: str
    description: str | None = None
    max_users: int | None = None
    max_organizations: int | None = None
    max_storage_gb: int | None = None
    privacy_level: PrivacyLevel = PrivacyLevel.SHARED


@dataclass(frozen=True, kw_only=True)
class UpdateTenant:
    """Change tenant details. The code never changes."""

    tenant_id: str
    actor: str
    name: str | None = None
    domain: str | None = None
    description: str | None = None
    max_users: int | None = None
    max_organizations: int | None = None
    max_storage_gb: int | None = None
    expected_version: int | None = None


@dataclass(frozen=True, kw_only=True)
class DeleteTenant:
    """Soft-delete a tenant that has no organizations."""

    tenant_id: str
    actor: str
    expected_version: int | None = None
