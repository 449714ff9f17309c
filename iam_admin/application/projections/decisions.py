"""Outcomes of folding one event into a read model document."""

from dataclasses import dataclass

from iam_admin.domain.value_objects import ReadModelDocument


@dataclass(frozen=True, slots=True, kw_only=True)
class Apply:
    """Write ``document`` (the event was the next version)."""

    document: ReadModelDocument


@dataclass(frozen=True, slots=True, kw_only=True)
class Skip:
    """Already applied; nothing to do."""

    last_applied_version: int


@dataclass(frozen=True, slots=True, kw_only=True)
class Defer:
    """An earlier version is missing; hold the event until it lands."""

    expected_version: int


@dataclass(frozen=True, slots=True, kw_only=True)
class Drop:
    """Event this projection does not understand; log and move on.

    ``document`` is the current document with only ``last_applied_version``
    moved to the dropped event, so later versions still apply. None when
    there is nothing to advance.
    """

    reason: str
    document: ReadModelDocument | None = None


type ProjectionDecision = Apply | Skip | Defer | Drop
