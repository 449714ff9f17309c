"""Read model projections: pure decisions plus the projector runtime."""

from iam_admin.application.projections.decisions import (
    Apply,
    Defer,
    Drop,
    ProjectionDecision,
    Skip,
)
from iam_admin.application.projections.projection import project
from iam_admin.application.projections.projector import (
    ProjectionDeferred,
    ProjectionWriteConflict,
    ReadModelProjector,
)

__all__ = [
    "Apply",
    "Defer",
    "Drop",
    "ProjectionDecision",
    "ProjectionDeferred",
    "ProjectionWriteConflict",
    "ReadModelProjector",
    "Skip",
    "project",
]
