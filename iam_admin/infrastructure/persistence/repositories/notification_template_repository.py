"""NotificationTemplateRepository - SQLAlchemy implementation."""

from typing import Any

from iam_admin.domain.entities.notification_template import NotificationTemplate
from iam_admin.domain.enums import AggregateType, TemplateChannel
from iam_admin.infrastructure.persistence.models.notification_template import (
    NotificationTemplateModel,
)
from iam_admin.infrastructure.persistence.repositories.entity_repository import (
    SQLAlchemyEntityRepository,
    scope_fields,
)


class NotificationTemplateRepository(
    SQLAlchemyEntityRepository[NotificationTemplate, NotificationTemplateModel]
):
    """Maps NotificationTemplate entities to the ``notification_templates`` table."""

    model = NotificationTemplateModel
    aggregate_type = AggregateType.NOTIFICATION_TEMPLATE

    def _business_columns(self, entity: NotificationTemplate) -> dict[str, Any]:
        return {
            "name": entity.name,
            "channel": entity.channel.value,
            "subject": entity.subject,
            "content": entity.content,
            "variables": list(entity.variables),
            "language": entity.language,
            "description": entity.description,
        }

    def _to_domain(self, model: NotificationTemplateModel) -> NotificationTemplate:
        return NotificationTemplate(
            **scope_fields(model),
            name=model.name,
            channel=TemplateChannel(model.channel),
            subject=model.subject,
            content=model.content,
            variables=tuple(model.variables or ()),
            language=model.language,
            description=model.description,
        )
