"""Read model query handlers.

Architecture:
- Served from the read model only, never the write store
- Pagination is validated (``1 <= size <= max_page_size``)
- With an accessor: listings and counts contain only records it may access
  (the accessor travels in the criteria and every store applies
  ``can_access``); point lookups it may not access are NotFound
"""

from iam_admin.application.queries.entity_queries import (
    CountEntities,
    FindByNaturalKey,
    GetEntity,
    ListEntities,
)
from iam_admin.application.queries.handlers.base import (
    QueryHandler,
    not_found,
    visible_to,
)
from iam_admin.core.errors import DomainError
from iam_admin.core.result import Failure, Result, Success
from iam_admin.domain.enums import AggregateType, IsolationLevel
from iam_admin.domain.protocols import LoggerProtocol, ReadModelRepository
from iam_admin.domain.value_objects import Page, PageRequest, ReadModelDocument


class GetEntityHandler(QueryHandler[GetEntity, ReadModelDocument]):
    async def _execute(self, query: GetEntity) -> Result[ReadModelDocument, DomainError]:
        aggregate_type = AggregateType(query.aggregate_type)
        document = await self._read_models.get(aggregate_type, query.entity_id)
        if document is None or not visible_to(document, query.accessor):
            return not_found(aggregate_type, query.entity_id)
        return Success(value=document)


class FindByNaturalKeyHandler(QueryHandler[FindByNaturalKey, ReadModelDocument]):
    """Natural-key lookup. Defaults the tenant to the accessor's own."""

    async def _execute(
        self, query: FindByNaturalKey
    ) -> Result[ReadModelDocument, DomainError]:
        aggregate_type = AggregateType(query.aggregate_type)
        tenant_id = query.tenant_id
        if (
            tenant_id is None
            and query.accessor is not None
            and query.accessor.isolation_level is not IsolationLevel.PLATFORM
            and aggregate_type is not AggregateType.TENANT
        ):
            tenant_id = query.accessor.tenant_id

        document = await self._read_models.find_by_natural_key(
            aggregate_type, query.field, query.value, tenant_id
        )
        if document is None or not visible_to(document, query.accessor):
            return not_found(aggregate_type, f"{query.field}={query.value}")
        return Success(value=document)


class ListEntitiesHandler(QueryHandler[ListEntities, Page[ReadModelDocument]]):
    def __init__(
        self,
        *,
        read_models: ReadModelRepository,
        logger: LoggerProtocol,
        max_page_size: int,
        default_page_size: int = 20,
    ) -> None:
        super().__init__(read_models=read_models, logger=logger)
        self._max_page_size = max_page_size
        self._default_page_size = default_page_size

    async def _execute(
        self, query: ListEntities
    ) -> Result[Page[ReadModelDocument], DomainError]:
        requested = query.page or PageRequest(size=self._default_page_size)
        page = requested.validate(self._max_page_size)
        if isinstance(page, Failure):
            return page

        criteria = query.criteria
        if query.accessor is not None:
            criteria = criteria.narrowed_to(query.accessor)

        result = await self._read_models.list(
            AggregateType(query.aggregate_type), criteria, page.value
        )
        return Success(value=result)


class CountEntitiesHandler(QueryHandler[CountEntities, int]):
    async def _execute(self, query: CountEntities) -> Result[int, DomainError]:
        criteria = query.criteria
        if query.accessor is not None:
            criteria = criteria.narrowed_to(query.accessor)
        total = await self._read_models.count(AggregateType(query.aggregate_type), criteria)
        return Success(value=total)
