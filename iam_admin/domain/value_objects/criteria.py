"""Filter criteria shared by write-side listing and read-side queries."""

from dataclasses import dataclass, field, replace
from typing import Any

from iam_admin.domain.entities.scope import Scope
from iam_admin.domain.enums import IsolationLevel, LifecycleStatus


SEARCH_FIELDS: tuple[str, ...] = ("name", "code", "username", "email", "display_name")


@dataclass(frozen=True, slots=True, kw_only=True)
class Criteria:
    """Listing filter. Unset attributes do not filter.

    Attributes:
        tenant_id: Restrict to a tenant.
        organization_id: Restrict to an organization.
        department_ids: Restrict to records scoped to any of these departments.
            None does not filter; an empty tuple matches nothing.
        status: Restrict to a status.
        search: Case-insensitive substring over name, code, username, email.
        include_deleted: Include DELETED records (write side) or tombstones.
        field_filters: Exact matches on business fields (e.g. parent id).
        accessor: Only records this scope may access (isolation and privacy,
            as decided by ``can_access``). Set through ``narrowed_to``.
    """

    tenant_id: str | None = None
    organization_id: str | None = None
    department_ids: tuple[str, ...] | None = None
    status: LifecycleStatus | None = None
    search: str | None = None
    include_deleted: bool = False
    field_filters: dict[str, Any] = field(default_factory=dict)
    accessor: Scope | None = None

    def narrowed_to(self, accessor: Scope) -> "Criteria":
        """Restrict the criteria to what ``accessor`` may access.

        The accessor itself is carried along and applied exactly by the
        stores. Tenant, organization and departments are also pinned where
        no accessible record can lie outside them, so stores can use their
        indexes: tenant unless the accessor is PLATFORM level, organization
        and departments only when the accessor sits at that level or below.
        """
        narrowed = replace(self, accessor=accessor)
        rank = accessor.isolation_level.rank
        if accessor.isolation_level is not IsolationLevel.PLATFORM:
            narrowed = replace(narrowed, tenant_id=accessor.tenant_id)
        if (
            accessor.organization_id is not None
            and rank >= IsolationLevel.ORGANIZATION.rank
        ):
            narrowed = replace(narrowed, organization_id=accessor.organization_id)
        if accessor.department_ids and rank >= IsolationLevel.DEPARTMENT.rank:
            allowed = accessor.department_ids
            if narrowed.department_ids is not None:
                allowed = tuple(d for d in narrowed.department_ids if d in allowed)
            narrowed = replace(narrowed, department_ids=allowed)
        return narrowed
