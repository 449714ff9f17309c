"""Tenancy scope carried by every record and every accessor.

A Scope answers "where does this belong": tenant, optional organization,
departments, owning user, plus the isolation and privacy levels that govern
who may see it. The same type describes the caller's scope when checking
access (see ``iam_admin.domain.services.access_control``).

Scopes are immutable; re-scoping produces a new Scope that replaces the old
one in a single assignment, keeping level and ownership ids consistent.
"""

from dataclasses import dataclass

from iam_admin.domain.enums import IsolationLevel, PrivacyLevel


@dataclass(frozen=True, slots=True, kw_only=True)
class Scope:
    """Tenancy scope of a record or accessor.

    Attributes:
        tenant_id: Owning tenant.
        isolation_level: Tenancy tier.
        privacy_level: Visibility classification.
        organization_id: Owning organization (unset means "any" for accessors).
        department_ids: Owning departments (empty means "any" for accessors).
        user_id: Owning user (record) or acting user (accessor).
    """

    tenant_id: str
    isolation_level: IsolationLevel
    privacy_level: PrivacyLevel = PrivacyLevel.SHARED
    organization_id: str | None = None
    department_ids: tuple[str, ...] = ()
    user_id: str | None = None

    def __post_init__(self) -> None:
        if not self.tenant_id or not self.tenant_id.strip():
            raise ValueError("Scope tenant_id cannot be empty")
        if self.isolation_level.rank >= IsolationLevel.ORGANIZATION.rank and (
            self.organization_id is None
            and self.isolation_level is not IsolationLevel.USER
        ):
            raise ValueError(
                f"{self.isolation_level.value} scope requires an organization_id"
            )
