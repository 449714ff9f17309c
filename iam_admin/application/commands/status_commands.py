"""Lifecycle command shared by every aggregate kind."""

from dataclasses import dataclass

from iam_admin.domain.enums import AggregateType, LifecycleStatus


@dataclass(frozen=True, kw_only=True)
class ChangeStatus:
    """Move an aggregate to another lifecycle status.

    Requesting the current status succeeds without recording anything.

    Example:
        >>> command = ChangeStatus.activate(
        ...     AggregateType.DEPARTMENT, department_id, actor="admin-1"
        ... )
        >>> result = await handler.handle(command)
    """

    aggregate_type: AggregateType
    aggregate_id: str
    target_status: LifecycleStatus
    actor: str
    expected_version: int | None = None

    @classmethod
    def activate(
        cls,
        aggregate_type: AggregateType,
        aggregate_id: str,
        *,
        actor: str,
        expected_version: int | None = None,
    ) -> "ChangeStatus":
        return cls(
            aggregate_type=aggregate_type,
            aggregate_id=aggregate_id,
            target_status=LifecycleStatus.ACTIVE,
            actor=actor,
            expected_version=expected_version,
        )
