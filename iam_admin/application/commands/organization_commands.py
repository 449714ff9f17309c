"""Organization commands (CQRS write operations)."""

from dataclasses import dataclass

from iam_admin.domain.enums import OrganizationType, PrivacyLevel


@dataclass(frozen=True, kw_only=True)
class CreateOrganization:
    """Create an organization inside an existing tenant.

    Attributes:
        tenant_id: Owning tenant (must exist).
        name: Name, unique within the tenant.
        code: Code, unique within the tenant.
        organization_type: Organization kind.
        actor: Acting principal.
        description: Optional description.
        privacy_level: Privacy override (default SHARED).
    """

    tenant_id: str
    name: str
    code: str
    organization_type: OrganizationType
    actor: str
    description: str | None = None
    privacy_level: PrivacyLevel = PrivacyLevel.SHARED


@dataclass(frozen=True, kw_only=True)
class UpdateOrganization:
    organization_id: str
    actor: str
    name: str | None = None
    code: str | None = None
    organization_type: OrganizationType | None = None
    description: str | None = None
    expected_version: int | None = None


@dataclass(frozen=True, kw_only=True)
class DeleteOrganization:
    """Soft-delete an organization that has no departments."""

    organization_id: str
    actor: str
    expected_version: int | None = None
