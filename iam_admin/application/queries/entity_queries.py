"""Read-side queries (CQRS read operations).

Queries are served from the read model only. ``accessor`` is the caller's
scope as supplied by the authentication layer; when present, listings are
narrowed to it and point lookups it may not see are reported as not found.
"""

from dataclasses import dataclass, field

from iam_admin.domain.entities import Scope
from iam_admin.domain.enums import AggregateType
from iam_admin.domain.value_objects import Criteria, PageRequest


@dataclass(frozen=True, kw_only=True)
class GetEntity:
    """Fetch one document by aggregate id."""

    aggregate_type: AggregateType
    entity_id: str
    accessor: Scope | None = None


@dataclass(frozen=True, kw_only=True)
class FindByNaturalKey:
    """Fetch one document by a natural key (name, code, username, ...).

    Attributes:
        tenant_id: Tenant to search in; None searches every tenant (tenants
            themselves are unique platform-wide).
    """

    aggregate_type: AggregateType
    field: str
    value: str
    tenant_id: str | None = None
    accessor: Scope | None = None


@dataclass(frozen=True, kw_only=True)
class ListEntities:
    """One page of documents matching the criteria.

    Example:
        >>> query = ListEntities(
        ...     aggregate_type=AggregateType.DEPARTMENT,
        ...     criteria=Criteria(tenant_id="T1", organization_id="O1"),
        ...     page=PageRequest(page=1, size=50),
        ... )
        >>> result = await handler.handle(query)

    Omitting ``page`` requests the first page at the configured default size.
    """

    aggregate_type: AggregateType
    criteria: Criteria = field(default_factory=Criteria)
    page: PageRequest | None = None
    accessor: Scope | None = None


@dataclass(frozen=True, kw_only=True)
class CountEntities:
    aggregate_type: AggregateType
    criteria: Criteria = field(default_factory=Criteria)
    accessor: Scope | None = None
