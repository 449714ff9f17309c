"""User commands (CQRS write operations)."""

from dataclasses import dataclass

from iam_admin.domain.enums import (
    PrivacyLevel,
    RelationshipTargetType,
    RelationshipType,
    UserType,
)


@dataclass(frozen=True, kw_only=True)
class CreateUser:
    """Create a user in a tenant, optionally inside an organization.

    Attributes:
        tenant_id: Owning tenant.
        username: 3-50 characters, unique within the tenant.
        email: Unique within the tenant (stored lowercase).
        display_name: Display name (at most 100 characters).
        actor: Acting principal.
        user_type: User kind.
        phone: Optional E.164 phone number.
        organization_id: Optional organization in the tenant.
        department_ids: Departments of that organization.
        privacy_level: Privacy override (default CONFIDENTIAL).
    """

    tenant_id: str
    username: str
    email: str
    display_name: str
    actor: str
    user_type: UserType = UserType.TENANT_USER
    phone: str | None = None
    organization_id: str | None = None
    department_ids: tuple[str, ...] = ()
    privacy_level: PrivacyLevel = PrivacyLevel.CONFIDENTIAL


@dataclass(frozen=True, kw_only=True)
class UpdateUser:
    """Change user details. The username never changes."""

    user_id: str
    actor: str
    email: str | None = None
    display_name: str | None = None
    user_type: UserType | None = None
    phone: str | None = None
    expected_version: int | None = None


@dataclass(frozen=True, kw_only=True)
class AssignUserToOrganization:
    """Re-scope a user into an organization (and its departments)."""

    user_id: str
    organization_id: str
    actor: str
    department_ids: tuple[str, ...] = ()
    expected_version: int | None = None


@dataclass(frozen=True, kw_only=True)
class UpdateUserProfile:
    """Create or change the user's profile. ``None`` keeps the stored value."""

    user_id: str
    actor: str
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    locale: str | None = None
    timezone: str | None = None


@dataclass(frozen=True, kw_only=True)
class AddUserRelationship:
    """Link a user to a tenant, organization, department or another user."""

    user_id: str
    target_id: str
    target_type: RelationshipTargetType
    relationship_type: RelationshipType
    actor: str


@dataclass(frozen=True, kw_only=True)
class DeleteUser:
    """Soft-delete a user and hard-delete their profile and relationships."""

    user_id: str
    actor: str
    expected_version: int | None = None
