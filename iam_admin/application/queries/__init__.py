"""Queries (CQRS read side)."""

from iam_admin.application.queries.entity_queries import (
    CountEntities,
    FindByNaturalKey,
    GetEntity,
    ListEntities,
)
from iam_admin.application.queries.notification_template_queries import (
    RenderNotificationTemplate,
)

__all__ = [
    "CountEntities",
    "FindByNaturalKey",
    "GetEntity",
    "ListEntities",
    "RenderNotificationTemplate",
]
