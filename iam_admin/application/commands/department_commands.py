"""Department commands (CQRS write operations)."""

from dataclasses import dataclass

from iam_admin.domain.enums import DepartmentType, PrivacyLevel


@dataclass(frozen=True, kw_only=True)
class CreateDepartment:
    """Create a department, as a root or under a parent.

    Attributes:
        tenant_id: Owning tenant.
        organization_id: Owning organization (must exist in the tenant).
        name: Name, unique within the tenant.
        code: Code, unique within the tenant.
        actor: Acting principal.
        department_type: Department kind.
        description: Optional description (at most 500 characters).
        parent_department_id: Parent in the same tenant and organization.
        manager_id: Managing user in the same tenant.
        privacy_level: Privacy override (default PROTECTED).

    Example:
        >>> command = CreateDepartment(
        ...     tenant_id="T1",
        ...     organization_id="O1",
        ...     name="Tech",
        ...     code="TECH",
        ...     actor="admin-1",
        ... )
    """

    tenant_id: str
    organization_id: str
    name: str
    code: str
    actor: str
    department_type: DepartmentType = DepartmentType.FUNCTIONAL
    description: str | None = None
    parent_department_id: str | None = None
    manager_id: str | None = None
    privacy_level: PrivacyLevel = PrivacyLevel.PROTECTED


@dataclass(frozen=True, kw_only=True)
class UpdateDepartment:
    """Change department details or move it under another parent.

    Attributes:
        parent_department_id: New parent id. Use ``make_root`` to detach.
        make_root: Detach from the current parent.
    """

    department_id: str
    actor: str
    name: str | None = None
    code: str | None = None
    department_type: DepartmentType | None = None
    description: str | None = None
    parent_department_id: str | None = None
    make_root: bool = False
    manager_id: str | None = None
    expected_version: int | None = None


@dataclass(frozen=True, kw_only=True)
class DeleteDepartment:
    """Soft-delete a department that has no sub-departments."""

    department_id: str
    actor: str
    expected_version: int | None = None
