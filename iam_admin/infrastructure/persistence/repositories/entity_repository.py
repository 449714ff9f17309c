"""Generic SQLAlchemy write repository for scoped entities.

Adapter for hexagonal architecture. Subclasses bind one entity kind to its
table and provide the business-column mapping; this base handles scope
columns, compare-and-swap saves, outbox appends and criteria queries.

Save protocol (one transaction):
    1. expected_version == 0: INSERT the snapshot
       otherwise: UPDATE ... WHERE id = :id AND version = :expected
    2. No row updated: ConcurrencyConflict (stored version reported)
    3. INSERT one outbox row per pending event
    4. A unique-index violation maps to BusinessRuleViolation (duplicate key)
"""

from collections.abc import Callable, Sequence
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import ColumnElement, and_, func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import BusinessRuleViolation, ConcurrencyConflict
from iam_admin.core.result import Failure, Result, Success
from iam_admin.domain.entities.scope import Scope
from iam_admin.domain.entities.scoped_entity import ScopedEntity
from iam_admin.domain.enums import (
    AggregateType,
    IsolationLevel,
    LifecycleStatus,
    PrivacyLevel,
)
from iam_admin.domain.errors import CASE_INSENSITIVE_KEYS, duplicate_key_violation
from iam_admin.domain.events.base_event import DomainEvent
from iam_admin.domain.value_objects import SEARCH_FIELDS, Criteria, Page, PageRequest
from iam_admin.infrastructure.errors import database_fault
from iam_admin.infrastructure.persistence.base import ScopedModel
from iam_admin.infrastructure.persistence.database import Database
from iam_admin.infrastructure.persistence.repositories.outbox_repository import (
    outbox_row,
)
from iam_admin.infrastructure.timeouts import with_timeout

E = TypeVar("E", bound=ScopedEntity)
M = TypeVar("M", bound=ScopedModel)


class _StaleVersion(Exception):
    """The CAS update matched no row; rolls the transaction back."""

    def __init__(self, actual_version: int | None) -> None:
        super().__init__(f"stored version is {actual_version}")
        self.actual_version = actual_version


def scope_columns(entity: ScopedEntity) -> dict[str, Any]:
    """Scope, lifecycle and audit columns of an entity snapshot."""
    scope = entity.scope
    return {
        "id": entity.id,
        "tenant_id": scope.tenant_id,
        "organization_id": scope.organization_id,
        "department_ids": list(scope.department_ids),
        "owner_user_id": scope.user_id,
        "isolation_level": scope.isolation_level.value,
        "privacy_level": scope.privacy_level.value,
        "status": entity.status.value,
        "version": entity.version,
        "created_by": entity.created_by,
        "updated_by": entity.updated_by,
        "created_at": entity.created_at,
        "updated_at": entity.updated_at,
    }


def scope_fields(model: ScopedModel) -> dict[str, Any]:
    """Inverse of ``scope_columns``: constructor kwargs shared by every kind."""
    return {
        "id": model.id,
        "scope": Scope(
            tenant_id=model.tenant_id,
            organization_id=model.organization_id,
            department_ids=tuple(model.department_ids or ()),
            user_id=model.owner_user_id,
            isolation_level=IsolationLevel(model.isolation_level),
            privacy_level=PrivacyLevel(model.privacy_level),
        ),
        "status": LifecycleStatus(model.status),
        "version": model.version,
        "created_by": model.created_by,
        "updated_by": model.updated_by,
        "created_at": model.created_at,
        "updated_at": model.updated_at,
    }


class SQLAlchemyEntityRepository(Generic[E, M]):
    """Base SQLAlchemy implementation of the EntityRepository protocol.

    This class does NOT inherit from the protocol (Protocol uses structural
    typing). Each call opens its own session via ``Database.get_session``.

    Attributes:
        model: Table model of the kind.
        aggregate_type: Kind served by the repository.
    """

    model: ClassVar[type[ScopedModel]]
    aggregate_type: ClassVar[AggregateType]

    def __init__(self, database: Database, *, timeout: float = 5.0) -> None:
        """Initialize repository.

        Args:
            database: Engine and session factory.
            timeout: Upper bound in seconds for each call.
        """
        self._database = database
        self._timeout = timeout

    # Subclass mapping

    def _business_columns(self, entity: E) -> dict[str, Any]:
        raise NotImplementedError

    def _to_domain(self, model: M) -> E:
        raise NotImplementedError

    def _row_values(self, entity: E) -> dict[str, Any]:
        return {**scope_columns(entity), **self._business_columns(entity)}

    # =========================================================================
    # Writes
    # =========================================================================

    async def save(
        self,
        entity: E,
        *,
        expected_version: int,
        events: Sequence[DomainEvent],
    ) -> Result[None, ConcurrencyConflict | BusinessRuleViolation]:
        operation = f"{self.aggregate_type.value}.save"
        try:
            await with_timeout(
                self._save(entity, expected_version, events), self._timeout, operation
            )
        except _StaleVersion as stale:
            return Failure(error=self._conflict(entity, expected_version, stale.actual_version))
        except IntegrityError as e:
            return Failure(error=self._integrity_failure(entity, expected_version, e))
        except SQLAlchemyError as e:
            raise database_fault(operation, e) from e
        return Success(value=None)

    async def _save(
        self, entity: E, expected_version: int, events: Sequence[DomainEvent]
    ) -> None:
        values = self._row_values(entity)
        async with self._database.get_session() as session:
            if expected_version == 0:
                session.add(self.model(**values))
                await session.flush()
            else:
                result = await session.execute(
                    update(self.model)
                    .where(
                        self.model.id == entity.id,
                        self.model.version == expected_version,
                    )
                    .values(**values)
                )
                if result.rowcount != 1:
                    actual = await session.scalar(
                        select(self.model.version).where(self.model.id == entity.id)
                    )
                    raise _StaleVersion(actual)
            session.add_all([outbox_row(event) for event in events])

    def _conflict(
        self, entity: E, expected_version: int, actual_version: int | None
    ) -> ConcurrencyConflict:
        return ConcurrencyConflict(
            code=ErrorCode.CONCURRENCY_CONFLICT,
            message=f"{self.aggregate_type.value} was modified concurrently",
            resource_type=self.aggregate_type.value,
            resource_id=entity.id,
            expected_version=expected_version,
            actual_version=actual_version,
        )

    def _integrity_failure(
        self, entity: E, expected_version: int, error: IntegrityError
    ) -> ConcurrencyConflict | BusinessRuleViolation:
        message = str(error.orig)
        table = self.model.__tablename__
        for key in entity.NATURAL_KEYS:
            if f"uq_{table}_{key}" in message:
                return duplicate_key_violation(
                    self.aggregate_type.value, key, getattr(entity, key)
                )
        if f"{table}_pkey" in message or "uq_outbox_events_aggregate_version" in message:
            return self._conflict(entity, expected_version, None)
        raise database_fault(f"{self.aggregate_type.value}.save", error) from error

    async def delete(self, entity_id: str) -> bool:
        operation = f"{self.aggregate_type.value}.delete"
        try:
            return await with_timeout(self._delete(entity_id), self._timeout, operation)
        except SQLAlchemyError as e:
            raise database_fault(operation, e) from e

    async def _delete(self, entity_id: str) -> bool:
        async with self._database.get_session() as session:
            model = await session.get(self.model, entity_id)
            if model is None:
                return False
            await session.delete(model)
            return True

    # =========================================================================
    # Reads
    # =========================================================================

    async def _read(self, statement: Any, operation: str) -> list[Any]:
        async def run() -> list[Any]:
            async with self._database.get_session() as session:
                result = await session.execute(statement)
                return list(result.scalars().all())

        try:
            return await with_timeout(
                run(), self._timeout, f"{self.aggregate_type.value}.{operation}"
            )
        except SQLAlchemyError as e:
            raise database_fault(f"{self.aggregate_type.value}.{operation}", e) from e

    def _live(self) -> ColumnElement[bool]:
        return self.model.status != LifecycleStatus.DELETED.value

    async def find_by_id(self, entity_id: str) -> E | None:
        rows = await self._read(
            select(self.model).where(self.model.id == entity_id, self._live()),
            "find_by_id",
        )
        return self._to_domain(rows[0]) if rows else None

    async def find_by_unique_key(
        self, key: str, value: str, tenant_id: str | None
    ) -> E | None:
        column = getattr(self.model, key)
        if key in CASE_INSENSITIVE_KEYS:
            match = func.lower(column) == value.lower()
        else:
            match = column == value
        statement = select(self.model).where(match, self._live())
        if tenant_id is not None:
            statement = statement.where(self.model.tenant_id == tenant_id)
        rows = await self._read(statement.limit(1), "find_by_unique_key")
        return self._to_domain(rows[0]) if rows else None

    def _where(self, criteria: Criteria) -> list[ColumnElement[bool]]:
        clauses: list[ColumnElement[bool]] = []
        if not criteria.include_deleted:
            clauses.append(self._live())
        if criteria.tenant_id is not None:
            clauses.append(self.model.tenant_id == criteria.tenant_id)
        if criteria.organization_id is not None:
            clauses.append(self.model.organization_id == criteria.organization_id)
        if criteria.department_ids is not None:
            clauses.append(self.model.department_ids.overlap(list(criteria.department_ids)))
        if criteria.status is not None:
            clauses.append(self.model.status == criteria.status.value)
        for name, value in criteria.field_filters.items():
            clauses.append(getattr(self.model, name) == value)
        if criteria.search:
            pattern = f"%{criteria.search}%"
            columns = [
                getattr(self.model, name)
                for name in SEARCH_FIELDS
                if hasattr(self.model, name)
            ]
            clauses.append(or_(*(column.ilike(pattern) for column in columns)))
        if criteria.accessor is not None:
            clauses.extend(self._access(criteria.accessor))
        return clauses

    def _access(self, accessor: Scope) -> list[ColumnElement[bool]]:
        """Express ``can_access(accessor, row)`` as SQL predicates."""
        model = self.model
        rank = accessor.isolation_level.rank

        def levels(predicate: Callable[[int], bool]) -> ColumnElement[bool]:
            return model.isolation_level.in_(
                [level.value for level in IsolationLevel if predicate(level.rank)]
            )

        clauses: list[ColumnElement[bool]] = [levels(lambda r: r >= rank)]
        if accessor.isolation_level is not IsolationLevel.PLATFORM:
            clauses.append(model.tenant_id == accessor.tenant_id)
        if accessor.organization_id is not None:
            clauses.append(
                or_(
                    levels(lambda r: r < IsolationLevel.ORGANIZATION.rank),
                    model.organization_id == accessor.organization_id,
                )
            )
        if accessor.department_ids:
            clauses.append(
                or_(
                    levels(lambda r: r < IsolationLevel.DEPARTMENT.rank),
                    model.department_ids.overlap(list(accessor.department_ids)),
                )
            )
        if accessor.isolation_level is IsolationLevel.USER:
            owner = (
                model.owner_user_id.is_(None)
                if accessor.user_id is None
                else model.owner_user_id == accessor.user_id
            )
            clauses.append(or_(levels(lambda r: r < IsolationLevel.USER.rank), owner))

        if accessor.department_ids:
            protected = model.department_ids.overlap(list(accessor.department_ids))
        else:
            protected = func.cardinality(model.department_ids) == 0
        privacy = [and_(model.privacy_level == PrivacyLevel.PROTECTED.value, protected)]
        shared = model.privacy_level == PrivacyLevel.SHARED.value
        if accessor.organization_id is not None:
            shared = and_(
                shared,
                or_(
                    model.organization_id.is_(None),
                    model.organization_id == accessor.organization_id,
                ),
            )
        privacy.append(shared)
        if accessor.user_id is not None:
            privacy.append(
                and_(
                    model.privacy_level == PrivacyLevel.CONFIDENTIAL.value,
                    model.owner_user_id == accessor.user_id,
                )
            )
        clauses.append(or_(*privacy))
        return clauses

    async def find_by_criteria(self, criteria: Criteria, page: PageRequest) -> Page[E]:
        sort_column = getattr(self.model, page.sort_by, self.model.created_at)
        order = sort_column.desc() if page.descending else sort_column.asc()
        tie = self.model.id.desc() if page.descending else self.model.id.asc()
        rows = await self._read(
            select(self.model)
            .where(*self._where(criteria))
            .order_by(order, tie)
            .offset(page.offset)
            .limit(page.size),
            "find_by_criteria",
        )
        total = await self.count(criteria)
        return Page(
            items=[self._to_domain(row) for row in rows],
            total=total,
            page=page.page,
            size=page.size,
        )

    async def count(self, criteria: Criteria) -> int:
        rows = await self._read(
            select(func.count()).select_from(self.model).where(*self._where(criteria)),
            "count",
        )
        return int(rows[0]) if rows else 0
