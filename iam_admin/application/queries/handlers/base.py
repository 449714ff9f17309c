"""Shared boundary for query handlers.

Queries have no side effects. Read store faults raised as
``InfrastructureFault`` come back as ``Failure(InfrastructureError)``.
"""

from typing import Generic, TypeVar

from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import DomainError, InfrastructureFault, NotFoundError
from iam_admin.core.result import Failure, Result
from iam_admin.domain.entities import Scope
from iam_admin.domain.enums import AggregateType
from iam_admin.domain.protocols import LoggerProtocol, ReadModelRepository
from iam_admin.domain.services import can_access
from iam_admin.domain.value_objects import ReadModelDocument

Q = TypeVar("Q")
R = TypeVar("R")


def not_found(aggregate_type: AggregateType, entity_id: str) -> Failure[NotFoundError]:
    return Failure(
        error=NotFoundError(
            code=ErrorCode.RESOURCE_NOT_FOUND,
            message=f"{aggregate_type.value} not found",
            resource_type=aggregate_type.value,
            resource_id=entity_id,
        )
    )


def visible_to(document: ReadModelDocument, accessor: Scope | None) -> bool:
    """Whether ``accessor`` may see ``document`` (no accessor: unrestricted)."""
    return accessor is None or can_access(accessor, document.scope)


class QueryHandler(Generic[Q, R]):
    """Base class for read model query handlers."""

    def __init__(self, *, read_models: ReadModelRepository, logger: LoggerProtocol) -> None:
        self._read_models = read_models
        self._logger = logger.bind(handler=type(self).__name__)

    async def handle(self, query: Q) -> Result[R, DomainError]:
        try:
            return await self._execute(query)
        except InfrastructureFault as fault:
            self._logger.error(
                "query_infrastructure_fault",
                error=fault,
                query=type(query).__name__,
                operation=fault.error.operation,
            )
            return Failure(error=fault.error)

    async def _execute(self, query: Q) -> Result[R, DomainError]:
        raise NotImplementedError
