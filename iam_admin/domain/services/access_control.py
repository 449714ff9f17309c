"""Access control over scoped records.

Access is decided in two stages.

Isolation:
    1. Same tenant, unless the accessor is PLATFORM level.
    2. The accessor's level is the same as or broader than the target's.
    3. For each scoping dimension down to the target's level (organization,
       then department), the accessor's id is unset (unrestricted) or matches
       the target's. The user dimension restricts only USER-level accessors;
       broader accessors carry their user id as identity, not as a filter.

Privacy (only when isolation passes):
    - PROTECTED: the department sets overlap in at least one department, or
      neither side has departments
    - SHARED: same organization when both sides name one
    - CONFIDENTIAL: the accessor is the owning user

Usage:
    from iam_admin.domain.services.access_control import can_access

    if not can_access(accessor_scope, document_scope):
        return Failure(error=not_found)
"""

from dataclasses import replace

from iam_admin.domain.entities.scope import Scope
from iam_admin.domain.enums import IsolationLevel, PrivacyLevel


def can_access(accessor: Scope, target: Scope) -> bool:
    """Decide whether ``accessor`` may see ``target``."""
    return passes_isolation(accessor, target) and passes_privacy(accessor, target)


def passes_isolation(accessor: Scope, target: Scope) -> bool:
    """Tenant, level-rank and per-dimension containment check."""
    if (
        accessor.isolation_level is not IsolationLevel.PLATFORM
        and accessor.tenant_id != target.tenant_id
    ):
        return False

    if accessor.isolation_level.rank > target.isolation_level.rank:
        return False

    target_rank = target.isolation_level.rank

    if target_rank >= IsolationLevel.ORGANIZATION.rank:
        if (
            accessor.organization_id is not None
            and accessor.organization_id != target.organization_id
        ):
            return False

    if target_rank >= IsolationLevel.DEPARTMENT.rank:
        if accessor.department_ids and not set(accessor.department_ids) & set(
            target.department_ids
        ):
            return False

    if (
        target_rank >= IsolationLevel.USER.rank
        and accessor.isolation_level is IsolationLevel.USER
    ):
        if accessor.user_id != target.user_id:
            return False

    return True


def passes_privacy(accessor: Scope, target: Scope) -> bool:
    """Privacy filter applied after isolation passes.

    PROTECTED asks for any shared department, not equal department sets: a
    member of one of the target's departments may see it.
    """
    match target.privacy_level:
        case PrivacyLevel.PROTECTED:
            if not target.department_ids and not accessor.department_ids:
                return True
            return bool(set(accessor.department_ids) & set(target.department_ids))
        case PrivacyLevel.SHARED:
            return (
                accessor.organization_id is None
                or target.organization_id is None
                or accessor.organization_id == target.organization_id
            )
        case PrivacyLevel.CONFIDENTIAL:
            return accessor.user_id is not None and accessor.user_id == target.user_id
    return False


def assign_to_organization(
    scope: Scope,
    organization_id: str,
    department_ids: tuple[str, ...] | list[str] = (),
) -> Scope:
    """Re-scope a record into an organization.

    Replaces organization and departments and sets the isolation level to
    ORGANIZATION in one new Scope. Privacy level and owner are kept.

    Raises:
        ValueError: If organization_id is empty (callers validate input first).
    """
    if not organization_id or not organization_id.strip():
        raise ValueError("organization_id cannot be empty")
    return replace(
        scope,
        organization_id=organization_id,
        department_ids=tuple(department_ids),
        isolation_level=IsolationLevel.ORGANIZATION,
    )
