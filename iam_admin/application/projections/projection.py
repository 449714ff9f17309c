"""Pure projection contract: ``(current document, event) -> decision``.

- ``event.version <= last_applied_version``: Skip (duplicate delivery)
- ``event.version > last_applied_version + 1``: Defer (gap; never guess the
  missing state)
- no document and not a Created event: Defer until version 1 lands
- event the kind does not handle: Drop, advancing only the document version
- otherwise: Apply with the folded document

Replaying an event therefore always yields the same document.
"""

from dataclasses import replace

from iam_admin.application.projections.decisions import (
    Apply,
    Defer,
    Drop,
    ProjectionDecision,
    Skip,
)
from iam_admin.application.projections.kind_projections import KIND_PROJECTIONS
from iam_admin.domain.events import DomainEvent, EntityCreatedEvent
from iam_admin.domain.value_objects import ReadModelDocument


def project(document: ReadModelDocument | None, event: DomainEvent) -> ProjectionDecision:
    """Decide what ``event`` does to ``document``."""
    last_applied = document.last_applied_version if document is not None else 0

    if event.version <= last_applied:
        return Skip(last_applied_version=last_applied)
    if event.version > last_applied + 1:
        return Defer(expected_version=last_applied + 1)
    if document is None and not isinstance(event, EntityCreatedEvent):
        return Defer(expected_version=1)
    if document is not None and document.aggregate_type is not event.aggregate_type:
        return Drop(reason="aggregate type does not match document")

    apply = KIND_PROJECTIONS.get(event.aggregate_type)
    updated = apply(document, event) if apply is not None else None
    if updated is None:
        skipped = (
            replace(document, last_applied_version=event.version)
            if document is not None
            else None
        )
        return Drop(reason=f"no projection for {event.event_type}", document=skipped)
    return Apply(document=updated)
