"""Criteria matching and sorting shared by the in-memory stores."""

from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from iam_admin.domain.entities.scope import Scope
from iam_admin.domain.enums import LifecycleStatus
from iam_admin.domain.services.access_control import can_access
from iam_admin.domain.value_objects import SEARCH_FIELDS, Criteria, Page, PageRequest

T = TypeVar("T")


def matches(
    criteria: Criteria,
    *,
    scope: Scope,
    status: LifecycleStatus,
    deleted: bool,
    values: Mapping[str, Any],
) -> bool:
    """True if a record with these attributes satisfies ``criteria``."""
    if deleted and not criteria.include_deleted:
        return False
    if criteria.tenant_id is not None and scope.tenant_id != criteria.tenant_id:
        return False
    if (
        criteria.organization_id is not None
        and scope.organization_id != criteria.organization_id
    ):
        return False
    if criteria.department_ids is not None and not set(scope.department_ids) & set(
        criteria.department_ids
    ):
        return False
    if criteria.accessor is not None and not can_access(criteria.accessor, scope):
        return False
    if criteria.status is not None and status is not criteria.status:
        return False
    for name, expected in criteria.field_filters.items():
        if values.get(name) != expected:
            return False
    if criteria.search:
        needle = criteria.search.casefold()
        return any(
            isinstance(values.get(name), str) and needle in values[name].casefold()
            for name in SEARCH_FIELDS
        )
    return True


def paginate(
    items: Iterable[T], page: PageRequest, sort_value: Callable[[T, str], Any]
) -> Page[T]:
    """Sort by ``page.sort_by`` (None last) and slice out one page."""
    present: list[T] = []
    missing: list[T] = []
    for item in items:
        (missing if sort_value(item, page.sort_by) is None else present).append(item)
    present.sort(key=lambda item: sort_value(item, page.sort_by), reverse=page.descending)
    ordered = present + missing
    return Page(
        items=ordered[page.offset : page.offset + page.size],
        total=len(ordered),
        page=page.page,
        size=page.size,
    )
