"""In-memory write store.

Holds entity snapshots and the outbox in process memory, for tests and local
runs. Snapshot writes and outbox appends happen under one lock, which gives
the same atomicity the SQL store gets from a transaction.

Architecture:
    - One ``InMemoryWriteStore`` per container; per-kind repositories are
      views over it (``store.repository(AggregateType.DEPARTMENT)``)
    - Stored snapshots are deep copies; callers never share state with the store
    - Natural keys are unique among non-deleted rows (per tenant, or
      platform-wide for tenants); email and domain compare case-insensitively
    - Implements OutboxProtocol directly
"""

import asyncio
import copy
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime
from typing import Any, Generic, TypeVar

from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import BusinessRuleViolation, ConcurrencyConflict
from iam_admin.core.result import Failure, Result, Success
from iam_admin.domain.entities.scoped_entity import ScopedEntity
from iam_admin.domain.enums import AggregateType
from iam_admin.domain.errors import duplicate_key_violation, normalize_key
from iam_admin.domain.events.base_event import DomainEvent
from iam_admin.domain.events.codec import encode_event
from iam_admin.domain.protocols.outbox_protocol import OutboxRecord, OutboxStatus
from iam_admin.domain.value_objects import Criteria, Page, PageRequest
from iam_admin.infrastructure.memory.filtering import matches, paginate

E = TypeVar("E", bound=ScopedEntity)


class InMemoryWriteStore:
    """Entity snapshots plus outbox, guarded by one asyncio lock."""

    def __init__(self) -> None:
        self._rows: dict[AggregateType, dict[str, ScopedEntity]] = {
            kind: {} for kind in AggregateType
        }
        self._outbox: dict[int, OutboxRecord] = {}
        self._sequence = 0
        self._lock = asyncio.Lock()

    def repository(self, aggregate_type: AggregateType) -> "InMemoryEntityRepository[Any]":
        """Repository view for one aggregate kind."""
        return InMemoryEntityRepository(self, aggregate_type)

    def rows(self, aggregate_type: AggregateType) -> dict[str, ScopedEntity]:
        return self._rows[aggregate_type]

    # =========================================================================
    # Snapshot writes
    # =========================================================================

    async def save(
        self,
        entity: ScopedEntity,
        *,
        expected_version: int,
        events: Sequence[DomainEvent],
    ) -> Result[None, ConcurrencyConflict | BusinessRuleViolation]:
        aggregate_type = entity.AGGREGATE_TYPE
        async with self._lock:
            rows = self._rows[aggregate_type]
            stored = rows.get(entity.id)
            actual = stored.version if stored is not None else 0
            if actual != expected_version:
                return Failure(
                    error=ConcurrencyConflict(
                        code=ErrorCode.CONCURRENCY_CONFLICT,
                        message=f"{aggregate_type.value} was modified concurrently",
                        resource_type=aggregate_type.value,
                        resource_id=entity.id,
                        expected_version=expected_version,
                        actual_version=actual if stored is not None else None,
                    )
                )

            if not entity.is_deleted:
                clash = self._find_clash(entity)
                if clash is not None:
                    return Failure(error=clash)

            rows[entity.id] = copy.deepcopy(entity)
            for event in events:
                self._append(event)
        return Success(value=None)

    def _find_clash(self, entity: ScopedEntity) -> BusinessRuleViolation | None:
        tenant_scope = self._uniqueness_scope(entity)
        for key in entity.NATURAL_KEYS:
            value = getattr(entity, key)
            if value is None:
                continue
            wanted = normalize_key(key, value)
            for other in self._rows[entity.AGGREGATE_TYPE].values():
                if other.id == entity.id or other.is_deleted:
                    continue
                if self._uniqueness_scope(other) != tenant_scope:
                    continue
                if normalize_key(key, getattr(other, key)) == wanted:
                    return duplicate_key_violation(entity.AGGREGATE_TYPE.value, key, value)
        return None

    @staticmethod
    def _uniqueness_scope(entity: ScopedEntity) -> str | None:
        if entity.AGGREGATE_TYPE is AggregateType.TENANT:
            return None
        return entity.tenant_id

    def _append(self, event: DomainEvent) -> None:
        self._sequence += 1
        self._outbox[self._sequence] = OutboxRecord(
            sequence=self._sequence,
            event_id=event.event_id,
            aggregate_id=event.aggregate_id,
            aggregate_type=event.aggregate_type.value,
            event_type=event.event_type,
            version=event.version,
            occurred_on=event.occurred_on,
            payload=encode_event(event),
        )

    async def hard_delete(self, aggregate_type: AggregateType, entity_id: str) -> bool:
        async with self._lock:
            return self._rows[aggregate_type].pop(entity_id, None) is not None

    # =========================================================================
    # OutboxProtocol
    # =========================================================================

    async def fetch_pending(self, limit: int) -> list[OutboxRecord]:
        pending = [
            record
            for record in self._outbox.values()
            if record.status is OutboxStatus.PENDING
        ]
        pending.sort(key=lambda record: record.sequence)
        return pending[:limit]

    async def mark_dispatched(self, sequences: list[int], now: datetime) -> None:
        async with self._lock:
            for sequence in sequences:
                record = self._outbox[sequence]
                self._outbox[sequence] = replace(
                    record, status=OutboxStatus.DISPATCHED, next_attempt_at=None
                )

    async def mark_retry(
        self, sequence: int, *, attempts: int, next_attempt_at: datetime, error: str
    ) -> None:
        async with self._lock:
            self._outbox[sequence] = replace(
                self._outbox[sequence],
                attempts=attempts,
                next_attempt_at=next_attempt_at,
                last_error=error,
            )

    async def mark_dead(self, sequence: int, *, attempts: int, error: str) -> None:
        async with self._lock:
            self._outbox[sequence] = replace(
                self._outbox[sequence],
                status=OutboxStatus.DEAD,
                attempts=attempts,
                last_error=error,
            )

    async def count_by_status(self) -> dict[OutboxStatus, int]:
        counts = {status: 0 for status in OutboxStatus}
        for record in self._outbox.values():
            counts[record.status] += 1
        return counts

    def outbox_records(self) -> list[OutboxRecord]:
        """All outbox records in append order."""
        return [self._outbox[sequence] for sequence in sorted(self._outbox)]


class InMemoryEntityRepository(Generic[E]):
    """EntityRepository view over one kind in an InMemoryWriteStore."""

    def __init__(self, store: InMemoryWriteStore, aggregate_type: AggregateType) -> None:
        self._store = store
        self._aggregate_type = aggregate_type

    @property
    def aggregate_type(self) -> AggregateType:
        return self._aggregate_type

    async def save(
        self,
        entity: E,
        *,
        expected_version: int,
        events: Sequence[DomainEvent],
    ) -> Result[None, ConcurrencyConflict | BusinessRuleViolation]:
        if entity.AGGREGATE_TYPE is not self._aggregate_type:
            raise TypeError(
                f"{type(entity).__name__} cannot be saved in the "
                f"{self._aggregate_type.value} repository"
            )
        return await self._store.save(
            entity, expected_version=expected_version, events=events
        )

    async def find_by_id(self, entity_id: str) -> E | None:
        entity = self._store.rows(self._aggregate_type).get(entity_id)
        if entity is None or entity.is_deleted:
            return None
        return copy.deepcopy(entity)  # type: ignore[return-value]

    async def find_by_unique_key(
        self, key: str, value: str, tenant_id: str | None
    ) -> E | None:
        wanted = normalize_key(key, value)
        for entity in self._store.rows(self._aggregate_type).values():
            if entity.is_deleted:
                continue
            if tenant_id is not None and entity.tenant_id != tenant_id:
                continue
            current = getattr(entity, key, None)
            if current is not None and normalize_key(key, current) == wanted:
                return copy.deepcopy(entity)  # type: ignore[return-value]
        return None

    def _matching(self, criteria: Criteria) -> list[ScopedEntity]:
        return [
            entity
            for entity in self._store.rows(self._aggregate_type).values()
            if matches(
                criteria,
                scope=entity.scope,
                status=entity.status,
                deleted=entity.is_deleted,
                values=vars(entity),
            )
        ]

    async def find_by_criteria(self, criteria: Criteria, page: PageRequest) -> Page[E]:
        result = paginate(
            self._matching(criteria),
            page,
            lambda entity, name: getattr(entity, name, None),
        )
        return Page(
            items=[copy.deepcopy(entity) for entity in result.items],  # type: ignore[misc]
            total=result.total,
            page=result.page,
            size=result.size,
        )

    async def count(self, criteria: Criteria) -> int:
        return len(self._matching(criteria))

    async def delete(self, entity_id: str) -> bool:
        return await self._store.hard_delete(self._aggregate_type, entity_id)
