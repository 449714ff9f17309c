"""Outbox dispatcher.

Delivers committed events from the transactional outbox to the event bus.
Delivery is at-least-once and strictly ordered per aggregate: records are
grouped by aggregate id, each group is delivered in version order, and a
group stops at its first failure so a later version never overtakes an
earlier one. Different aggregates are delivered concurrently.

Failure handling:
    - A handler failure (projector error, deferral, timeout) is logged as a
      ProjectionError and the record is rescheduled with exponential backoff
      (``base * 2**attempts``, capped).
    - After ``max_attempts`` failed deliveries the record becomes DEAD.
    - An unknown event type is logged and its envelope delivered as an
      UnrecognizedEvent, so projectors move the document past its version.
      It counts as dropped. Without a usable envelope it is acknowledged.
    - A malformed record can never succeed and becomes DEAD immediately.

Usage:
    >>> dispatcher = OutboxDispatcher(outbox=outbox, bus=bus, logger=logger)
    >>> await dispatcher.dispatch_pending()      # one pass
    >>> await dispatcher.run(stop_event)         # background loop
"""

import asyncio
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import InfrastructureFault, ProjectionError
from iam_admin.core.result import Failure, Success
from iam_admin.domain.events import DomainEvent, UnrecognizedEvent
from iam_admin.domain.events.codec import EventCodecError, decode_envelope, decode_event
from iam_admin.domain.protocols import (
    EventBusProtocol,
    HandlerFailure,
    LoggerProtocol,
    OutboxProtocol,
    OutboxRecord,
)
from iam_admin.infrastructure.timeouts import with_timeout


@dataclass(slots=True)
class DispatchReport:
    """Counts for one dispatch pass."""

    fetched: int = 0
    dispatched: int = 0
    dropped: int = 0
    retried: int = 0
    dead: int = 0
    held: int = 0

    def merge(self, other: "DispatchReport") -> None:
        self.dispatched += other.dispatched
        self.dropped += other.dropped
        self.retried += other.retried
        self.dead += other.dead
        self.held += other.held


class OutboxDispatcher:
    """Polls the outbox and fans records out through the event bus."""

    name = "outbox_dispatcher"

    def __init__(
        self,
        *,
        outbox: OutboxProtocol,
        bus: EventBusProtocol,
        logger: LoggerProtocol,
        batch_size: int = 100,
        poll_interval: float = 1.0,
        max_attempts: int = 10,
        backoff_base: float = 0.5,
        backoff_max: float = 60.0,
        dispatch_timeout: float = 10.0,
        store_timeout: float = 5.0,
        dispatch_inline: bool = False,
    ) -> None:
        """Initialize dispatcher.

        Args:
            outbox: Outbox port (read due records, acknowledge outcomes).
            bus: Event bus the projectors subscribe to.
            logger: Structured logger.
            batch_size: Records fetched per pass.
            poll_interval: Idle wait between passes in ``run``.
            max_attempts: Failed deliveries before a record is dead-lettered.
            backoff_base: First retry delay in seconds.
            backoff_max: Largest retry delay in seconds.
            dispatch_timeout: Bound for delivering one event.
            store_timeout: Bound for each outbox call.
            dispatch_inline: Drain the outbox inside ``publish``.
        """
        self._outbox = outbox
        self._bus = bus
        self._logger = logger.bind(component=self.name)
        self._batch_size = batch_size
        self._poll_interval = poll_interval
        self._max_attempts = max_attempts
        self._backoff_base = backoff_base
        self._backoff_max = backoff_max
        self._dispatch_timeout = dispatch_timeout
        self._store_timeout = store_timeout
        self._dispatch_inline = dispatch_inline
        self._wakeup = asyncio.Event()
        self._pass_lock = asyncio.Lock()

    async def publish(self, events: Sequence[DomainEvent]) -> None:
        """Signal newly committed events.

        The events are already in the outbox; this only wakes the loop, or
        drains the outbox right away when dispatching inline.
        """
        if not events:
            return
        self._wakeup.set()
        if self._dispatch_inline:
            await self.dispatch_pending()

    def backoff_delay(self, attempts: int) -> float:
        """Delay before the next try, given failed attempts so far."""
        return min(self._backoff_base * 2**attempts, self._backoff_max)

    async def dispatch_pending(self) -> DispatchReport:
        """Run one dispatch pass over the pending outbox records.

        Aggregates are delivered concurrently, but the pass only ends once
        all of them have settled, so passes never overlap.

        Raises:
            InfrastructureFault: The outbox could not be read or updated.
        """
        async with self._pass_lock:
            records = await with_timeout(
                self._outbox.fetch_pending(self._batch_size),
                self._store_timeout,
                "outbox.fetch_pending",
            )
            report = DispatchReport(fetched=len(records))
            if not records:
                return report

            groups: dict[str, list[OutboxRecord]] = defaultdict(list)
            for record in records:
                groups[record.aggregate_id].append(record)

            now = datetime.now(UTC)
            # Every group settles before the lock is released.
            outcomes = await asyncio.gather(
                *(
                    self._dispatch_group(
                        sorted(group, key=lambda r: (r.version, r.sequence)), now
                    )
                    for group in groups.values()
                ),
                return_exceptions=True,
            )
            errors = [o for o in outcomes if isinstance(o, BaseException)]
            if errors:
                raise errors[0]
            for outcome in outcomes:
                report.merge(outcome)

            self._logger.debug(
                "outbox_dispatch_pass",
                fetched=report.fetched,
                dispatched=report.dispatched,
                dropped=report.dropped,
                retried=report.retried,
                dead=report.dead,
                held=report.held,
            )
            return report

    async def _dispatch_group(
        self, records: list[OutboxRecord], now: datetime
    ) -> DispatchReport:
        """Deliver one aggregate's records in order, stopping at the first failure."""
        report = DispatchReport()
        for index, record in enumerate(records):
            if not record.is_due(now):
                report.held += len(records) - index
                break

            match decode_event(record.payload):
                case Failure(error=EventCodecError.UNKNOWN_EVENT_TYPE):
                    self._logger.warning(
                        "outbox_event_type_unknown",
                        sequence=record.sequence,
                        event_type=record.event_type,
                        aggregate_id=record.aggregate_id,
                    )
                    envelope = decode_envelope(record.payload)
                    if envelope is None:
                        await self._acknowledge(record, now)
                        report.dropped += 1
                        continue
                    event = envelope
                case Failure(error=reason):
                    self._logger.error(
                        "outbox_event_undecodable",
                        sequence=record.sequence,
                        event_type=record.event_type,
                        aggregate_id=record.aggregate_id,
                        reason=reason,
                    )
                    await self._bury(record, record.attempts + 1, reason)
                    report.dead += 1
                    report.held += len(records) - index - 1
                    break
                case Success(value=event):
                    pass

            failures = await self._deliver(event)
            if not failures:
                await self._acknowledge(record, now)
                if isinstance(event, UnrecognizedEvent):
                    report.dropped += 1
                else:
                    report.dispatched += 1
                continue

            if await self._record_failure(record, event, failures, now):
                report.dead += 1
            else:
                report.retried += 1
            report.held += len(records) - index - 1
            break
        return report

    async def _deliver(self, event: DomainEvent) -> list[HandlerFailure]:
        try:
            return await with_timeout(
                self._bus.publish(event), self._dispatch_timeout, "outbox.dispatch"
            )
        except InfrastructureFault as fault:
            return [HandlerFailure(handler_name=self.name, error=fault)]

    async def _record_failure(
        self,
        record: OutboxRecord,
        event: DomainEvent,
        failures: list[HandlerFailure],
        now: datetime,
    ) -> bool:
        """Log projection errors and reschedule or bury the record.

        Returns:
            True if the record was dead-lettered.
        """
        for failure in failures:
            error = ProjectionError(
                code=ErrorCode.PROJECTION_FAILED,
                message=str(failure.error) or type(failure.error).__name__,
                event_id=str(event.event_id),
                aggregate_id=event.aggregate_id,
                projector=failure.handler_name,
            )
            self._logger.warning(
                "projection_failed",
                error_code=error.code.value,
                error_message=error.message,
                error_type=type(failure.error).__name__,
                event_id=error.event_id,
                event_type=event.event_type,
                aggregate_id=error.aggregate_id,
                version=event.version,
                projector=error.projector,
            )

        attempts = record.attempts + 1
        message = "; ".join(f"{f.handler_name}: {f.error}" for f in failures)
        if attempts >= self._max_attempts:
            await self._bury(record, attempts, message)
            return True

        delay = self.backoff_delay(record.attempts)
        await with_timeout(
            self._outbox.mark_retry(
                record.sequence,
                attempts=attempts,
                next_attempt_at=now + timedelta(seconds=delay),
                error=message,
            ),
            self._store_timeout,
            "outbox.mark_retry",
        )
        self._logger.info(
            "outbox_dispatch_retry_scheduled",
            sequence=record.sequence,
            aggregate_id=record.aggregate_id,
            version=record.version,
            attempts=attempts,
            delay_seconds=delay,
        )
        return False

    async def _acknowledge(self, record: OutboxRecord, now: datetime) -> None:
        await with_timeout(
            self._outbox.mark_dispatched([record.sequence], now),
            self._store_timeout,
            "outbox.mark_dispatched",
        )

    async def _bury(self, record: OutboxRecord, attempts: int, message: str) -> None:
        await with_timeout(
            self._outbox.mark_dead(record.sequence, attempts=attempts, error=message),
            self._store_timeout,
            "outbox.mark_dead",
        )
        self._logger.error(
            "outbox_dispatch_failed",
            error_code=ErrorCode.DISPATCH_FAILED.value,
            sequence=record.sequence,
            event_type=record.event_type,
            aggregate_id=record.aggregate_id,
            version=record.version,
            attempts=attempts,
            last_error=message,
        )

    async def run(self, stop_event: asyncio.Event) -> None:
        """Dispatch until ``stop_event`` is set.

        Waits ``poll_interval`` between passes, or less when ``publish`` is
        called. A full batch is followed by another pass immediately.
        """
        self._logger.info(
            "outbox_dispatcher_started",
            batch_size=self._batch_size,
            poll_interval=self._poll_interval,
        )
        while not stop_event.is_set():
            self._wakeup.clear()
            try:
                report = await self.dispatch_pending()
            except InfrastructureFault as fault:
                self._logger.warning(
                    "outbox_dispatch_pass_failed",
                    error_code=fault.error.code.value,
                    operation=fault.error.operation,
                    error_message=fault.error.message,
                )
                report = DispatchReport()

            if report.fetched >= self._batch_size and report.dispatched:
                continue
            await self._idle(stop_event)
        self._logger.info("outbox_dispatcher_stopped")

    async def _idle(self, stop_event: asyncio.Event) -> None:
        waiters = {
            asyncio.create_task(stop_event.wait()),
            asyncio.create_task(self._wakeup.wait()),
        }
        try:
            await asyncio.wait(
                waiters,
                timeout=self._poll_interval,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            for waiter in waiters:
                waiter.cancel()
