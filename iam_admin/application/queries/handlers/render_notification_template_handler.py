"""Render a notification template from its read model document.

Every placeholder in the subject and content needs a value; missing values
fail with the names of all of them.
"""

from iam_admin.application.dtos.rendered_notification import RenderedNotification
from iam_admin.application.queries.handlers.base import (
    QueryHandler,
    not_found,
    visible_to,
)
from iam_admin.application.queries.notification_template_queries import (
    RenderNotificationTemplate,
)
from iam_admin.core.errors import DomainError
from iam_admin.core.result import Failure, Result, Success
from iam_admin.domain.enums import AggregateType, TemplateChannel
from iam_admin.domain.services.template_rendering import check_values_provided, render


class RenderNotificationTemplateHandler(
    QueryHandler[RenderNotificationTemplate, RenderedNotification]
):
    async def _execute(
        self, query: RenderNotificationTemplate
    ) -> Result[RenderedNotification, DomainError]:
        aggregate_type = AggregateType.NOTIFICATION_TEMPLATE
        document = await self._read_models.get(aggregate_type, query.template_id)
        if document is None or not visible_to(document, query.accessor):
            return not_found(aggregate_type, query.template_id)

        data = document.data
        subject = data.get("subject")
        checked = check_values_provided(subject, data["content"], query.values)
        if isinstance(checked, Failure):
            return checked

        self._logger.debug(
            "notification_template_rendered",
            template_id=document.id,
            value_count=len(query.values),
        )
        return Success(
            value=RenderedNotification(
                template_id=document.id,
                channel=TemplateChannel(data["channel"]),
                language=data.get("language", "en"),
                subject=render(subject, query.values) if subject else None,
                content=render(data["content"], query.values),
            )
        )
