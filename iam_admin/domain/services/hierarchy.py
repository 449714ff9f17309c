"""Department tree rules.

Ancestor chains are collected by the caller (walking parent links in the
write store) and checked here without I/O.
"""

from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import BusinessRuleViolation
from iam_admin.core.result import Failure, Result, Success
from iam_admin.domain.errors import Rule


def placement_under(
    department_id: str, parent_level: int | None, parent_path: str | None
) -> tuple[int, str]:
    """Level and path of a department placed under a parent (or as a root)."""
    if parent_level is None or parent_path is None:
        return 1, f"/{department_id}"
    return parent_level + 1, f"{parent_path}/{department_id}"


def check_parent_assignment(
    department_id: str | None,
    parent_id: str,
    ancestor_chain: list[str],
    parent_level: int,
    max_depth: int,
) -> Result[None, BusinessRuleViolation]:
    """Validate placing a department under ``parent_id``.

    Args:
        department_id: Department being placed (None while it is being created).
        parent_id: Proposed parent.
        ancestor_chain: Ids above the parent, nearest first, as found by
            following parent links.
        parent_level: Level of the proposed parent.
        max_depth: Deepest level allowed.

    Returns:
        Success(None), or Failure for self-parenting, a cycle through the
        ancestors, or exceeding the depth limit.
    """
    if department_id is not None and parent_id == department_id:
        return Failure(
            error=BusinessRuleViolation(
                code=ErrorCode.INVALID_HIERARCHY,
                message="A department cannot be its own parent",
                rule=Rule.NO_SELF_PARENT,
                field="parent_department_id",
            )
        )

    if department_id is not None and department_id in ancestor_chain:
        return Failure(
            error=BusinessRuleViolation(
                code=ErrorCode.INVALID_HIERARCHY,
                message="A department cannot be placed under its own descendant",
                rule=Rule.NO_HIERARCHY_CYCLE,
                field="parent_department_id",
                details={"ancestor_chain": "/".join(reversed(ancestor_chain))},
            )
        )

    if parent_level + 1 > max_depth:
        return Failure(
            error=BusinessRuleViolation(
                code=ErrorCode.HIERARCHY_TOO_DEEP,
                message=f"Department hierarchy cannot be deeper than {max_depth} levels",
                rule=Rule.MAX_HIERARCHY_DEPTH,
                field="parent_department_id",
            )
        )

    return Success(value=None)
