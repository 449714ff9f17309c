"""Generic lifecycle handler, configured with one repository per kind.

Flow:
1. Validate input shape
2. Load the entity (NotFound if missing or deleted; version check)
3. Apply the transition table (same status is a no-op)
4-6. Persist with outbox, dispatch, clear (skipped for a no-op)
"""

from collections.abc import Mapping
from typing import Any

from iam_admin.application.commands.handlers.base import CommandHandler
from iam_admin.application.commands.status_commands import ChangeStatus
from iam_admin.application.commands.validators import validate_change_status
from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import BusinessRuleViolation, DomainError
from iam_admin.core.result import Failure, Result, Success
from iam_admin.domain.aggregates import change_status
from iam_admin.domain.entities import ScopedEntity
from iam_admin.domain.enums import AggregateType, LifecycleStatus
from iam_admin.domain.errors import Rule
from iam_admin.domain.protocols import (
    EntityRepository,
    EventDispatcherProtocol,
    LoggerProtocol,
)


class ChangeStatusHandler(CommandHandler[ChangeStatus, ScopedEntity]):
    """Handler for ChangeStatus across every aggregate kind.

    Deletion has its own commands (children checks, dependent cleanup), so
    DELETED is not a valid target here.
    """

    def __init__(
        self,
        *,
        repositories: Mapping[AggregateType, EntityRepository[Any]],
        dispatcher: EventDispatcherProtocol,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(dispatcher=dispatcher, logger=logger)
        self._repositories = dict(repositories)

    async def _execute(self, cmd: ChangeStatus) -> Result[ScopedEntity, DomainError]:
        valid = validate_change_status(cmd)
        if isinstance(valid, Failure):
            return valid

        aggregate_type = AggregateType(cmd.aggregate_type)
        target = LifecycleStatus(cmd.target_status)
        if target is LifecycleStatus.DELETED:
            return Failure(
                error=BusinessRuleViolation(
                    code=ErrorCode.INVALID_STATE_TRANSITION,
                    message="Use the delete command to delete an entity",
                    rule=Rule.VALID_TRANSITION,
                    field="target_status",
                )
            )

        repository = self._repositories[aggregate_type]
        loaded = await self._load(
            repository, aggregate_type.value, cmd.aggregate_id, cmd.expected_version
        )
        if isinstance(loaded, Failure):
            return loaded
        aggregate = loaded.value
        previous = aggregate.entity.status

        changed = change_status(aggregate, target, actor=cmd.actor)
        if isinstance(changed, Failure):
            return changed

        committed = await self._commit(aggregate, repository)
        if isinstance(committed, Failure):
            return committed

        if changed.value:
            self._logger.info(
                "status_changed",
                aggregate_type=aggregate_type.value,
                aggregate_id=aggregate.id,
                previous_status=previous.value,
                new_status=target.value,
                actor=cmd.actor,
            )
        return Success(value=aggregate.entity)
