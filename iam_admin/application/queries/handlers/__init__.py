"""Query handlers (read side)."""

from iam_admin.application.queries.handlers.base import QueryHandler
from iam_admin.application.queries.handlers.entity_query_handlers import (
    CountEntitiesHandler,
    FindByNaturalKeyHandler,
    GetEntityHandler,
    ListEntitiesHandler,
)
from iam_admin.application.queries.handlers.render_notification_template_handler import (
    RenderNotificationTemplateHandler,
)

__all__ = [
    "CountEntitiesHandler",
    "FindByNaturalKeyHandler",
    "GetEntityHandler",
    "ListEntitiesHandler",
    "QueryHandler",
    "RenderNotificationTemplateHandler",
]
