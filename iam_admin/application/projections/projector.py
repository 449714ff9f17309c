"""Read model projector runtime.

Subscribed to the event bus for every projected event. For each delivery it
reads the current document, asks ``project`` for a decision and writes the
result with compare-and-swap on ``last_applied_version``.

Gap handling:
    A deferred event is parked in a bounded per-aggregate buffer and
    ``ProjectionDeferred`` is raised so the dispatcher keeps the outbox
    record pending. When the missing version is applied, parked successors
    are applied right after it, in order.

    A dropped event still moves the document to its version (data
    untouched), otherwise every later version would look like a gap.
"""

from collections import defaultdict

from iam_admin.application.projections.decisions import Apply, Defer, Drop, Skip
from iam_admin.application.projections.projection import project
from iam_admin.domain.events import DomainEvent
from iam_admin.domain.protocols import LoggerProtocol, ReadModelStore

MAX_WRITE_ATTEMPTS = 3


class ProjectionDeferred(Exception):
    """An event arrived before the version it depends on.

    Attributes:
        aggregate_id: Aggregate of the event.
        version: Version of the deferred event.
        expected_version: Version the document needs next.
    """

    def __init__(self, aggregate_id: str, version: int, expected_version: int) -> None:
        super().__init__(
            f"Event v{version} for {aggregate_id} deferred; waiting for v{expected_version}"
        )
        self.aggregate_id = aggregate_id
        self.version = version
        self.expected_version = expected_version


class ProjectionWriteConflict(Exception):
    """The document kept changing under the projector."""


class ReadModelProjector:
    """Idempotent, order-preserving writer of read model documents."""

    name = "read_model_projector"

    def __init__(
        self,
        *,
        store: ReadModelStore,
        logger: LoggerProtocol,
        park_limit: int = 100,
    ) -> None:
        """Initialize projector.

        Args:
            store: Read model store (projector-owned writes).
            logger: Structured logger.
            park_limit: Most deferred events held per aggregate.
        """
        self._store = store
        self._logger = logger.bind(projector=self.name)
        self._park_limit = park_limit
        self._parked: dict[str, dict[int, DomainEvent]] = defaultdict(dict)

    async def __call__(self, event: DomainEvent) -> None:
        await self.handle(event)

    def parked_versions(self, aggregate_id: str) -> list[int]:
        return sorted(self._parked.get(aggregate_id, {}))

    async def handle(self, event: DomainEvent) -> None:
        """Apply ``event`` and any parked successors.

        Raises:
            ProjectionDeferred: The event is waiting for an earlier version.
            ProjectionWriteConflict: Concurrent writers kept winning.
        """
        applied = await self._apply(event)
        if not applied:
            return

        parked = self._parked.get(event.aggregate_id)
        next_version = event.version + 1
        while parked and next_version in parked:
            successor = parked.pop(next_version)
            if not await self._apply(successor):
                break
            next_version += 1
        if parked is not None and not parked:
            self._parked.pop(event.aggregate_id, None)

    async def _apply(self, event: DomainEvent) -> bool:
        """Run one event through ``project``; True if a document was written."""
        for _ in range(MAX_WRITE_ATTEMPTS):
            current = await self._store.get(event.aggregate_type, event.aggregate_id)
            decision = project(current, event)

            match decision:
                case Apply(document=document):
                    expected = current.last_applied_version if current is not None else 0
                    if await self._store.upsert(document, expected_version=expected):
                        self._logger.debug(
                            "projection_applied",
                            event_type=event.event_type,
                            aggregate_id=event.aggregate_id,
                            version=event.version,
                        )
                        return True
                    self._logger.info(
                        "projection_write_conflict",
                        aggregate_id=event.aggregate_id,
                        version=event.version,
                    )
                case Skip(last_applied_version=last_applied):
                    self._logger.debug(
                        "projection_duplicate_skipped",
                        event_type=event.event_type,
                        aggregate_id=event.aggregate_id,
                        version=event.version,
                        last_applied_version=last_applied,
                    )
                    self._discard_parked(event.aggregate_id, last_applied)
                    return False
                case Defer(expected_version=expected_version):
                    self._park(event, expected_version)
                    raise ProjectionDeferred(
                        event.aggregate_id, event.version, expected_version
                    )
                case Drop(reason=reason, document=None):
                    self._log_dropped(event, reason)
                    return False
                case Drop(reason=reason, document=document):
                    expected = current.last_applied_version if current is not None else 0
                    if await self._store.upsert(document, expected_version=expected):
                        self._log_dropped(event, reason)
                        return True
                    self._logger.info(
                        "projection_write_conflict",
                        aggregate_id=event.aggregate_id,
                        version=event.version,
                    )

        raise ProjectionWriteConflict(
            f"Could not write {event.aggregate_id} v{event.version} "
            f"after {MAX_WRITE_ATTEMPTS} attempts"
        )

    def _log_dropped(self, event: DomainEvent, reason: str) -> None:
        self._logger.warning(
            "projection_event_dropped",
            event_type=event.event_type,
            aggregate_id=event.aggregate_id,
            version=event.version,
            reason=reason,
        )

    def _park(self, event: DomainEvent, expected_version: int) -> None:
        parked = self._parked[event.aggregate_id]
        if event.version in parked or len(parked) < self._park_limit:
            parked[event.version] = event
            self._logger.info(
                "projection_deferred",
                aggregate_id=event.aggregate_id,
                version=event.version,
                expected_version=expected_version,
                parked=len(parked),
            )
        else:
            self._logger.warning(
                "projection_park_full",
                aggregate_id=event.aggregate_id,
                version=event.version,
                park_limit=self._park_limit,
            )

    def _discard_parked(self, aggregate_id: str, up_to_version: int) -> None:
        parked = self._parked.get(aggregate_id)
        if not parked:
            return
        for version in [v for v in parked if v <= up_to_version]:
            del parked[version]
        if not parked:
            del self._parked[aggregate_id]
