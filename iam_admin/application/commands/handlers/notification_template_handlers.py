"""Notification template command handlers.

Template names are unique within the tenant. Every placeholder used in the
subject or content must be declared in ``variables``, on create and after
every update.
"""

from typing import Any

from iam_admin.application.commands.handlers.base import CommandHandler
from iam_admin.application.commands.notification_template_commands import (
    CreateNotificationTemplate,
    DeleteNotificationTemplate,
    UpdateNotificationTemplate,
)
from iam_admin.application.commands.validators import (
    validate_create_template,
    validate_entity_reference,
    validate_update_template,
)
from iam_admin.core.errors import DomainError
from iam_admin.core.result import Failure, Result, Success
from iam_admin.domain.aggregates import create_notification_template, update_info
from iam_admin.domain.entities import NotificationTemplate, Organization
from iam_admin.domain.enums import AggregateType
from iam_admin.domain.protocols import (
    EntityRepository,
    EventDispatcherProtocol,
    LoggerProtocol,
)
from iam_admin.domain.services.template_rendering import check_declared_variables

RESOURCE = AggregateType.NOTIFICATION_TEMPLATE.value


class CreateNotificationTemplateHandler(
    CommandHandler[CreateNotificationTemplate, NotificationTemplate]
):
    """Handler for CreateNotificationTemplate.

    Flow:
    1. Validate input shape
    2. Check placeholders declared, name unused, organization in tenant
    3. Build the template aggregate (PLATFORM level for the platform tenant)
    4-6. Persist with outbox, dispatch, clear
    """

    def __init__(
        self,
        *,
        templates: EntityRepository[NotificationTemplate],
        organizations: EntityRepository[Organization],
        platform_tenant_id: str,
        dispatcher: EventDispatcherProtocol,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(dispatcher=dispatcher, logger=logger)
        self._templates = templates
        self._organizations = organizations
        self._platform_tenant_id = platform_tenant_id

    async def _execute(
        self, cmd: CreateNotificationTemplate
    ) -> Result[NotificationTemplate, DomainError]:
        # Step 1: Shape validation
        valid = validate_create_template(cmd)
        if isinstance(valid, Failure):
            return valid

        # Step 2: Business rules
        declared = check_declared_variables(cmd.subject, cmd.content, cmd.variables)
        if isinstance(declared, Failure):
            return declared

        unique = await self._ensure_unique_keys(
            self._templates,
            {"name": cmd.name},
            tenant_id=cmd.tenant_id,
            resource_type=RESOURCE,
        )
        if isinstance(unique, Failure):
            return unique

        if cmd.organization_id is not None:
            organization = await self._require_reference(
                self._organizations,
                cmd.organization_id,
                field="organization_id",
                resource_type=AggregateType.ORGANIZATION.value,
                tenant_id=cmd.tenant_id,
            )
            if isinstance(organization, Failure):
                return organization

        # Step 3: Build aggregate
        aggregate = create_notification_template(
            tenant_id=cmd.tenant_id,
            name=cmd.name,
            channel=cmd.channel,
            content=cmd.content,
            actor=cmd.actor,
            platform_tenant_id=self._platform_tenant_id,
            subject=cmd.subject,
            variables=cmd.variables,
            language=cmd.language,
            description=cmd.description,
            organization_id=cmd.organization_id,
            privacy_level=cmd.privacy_level,
        )

        # Steps 4-6
        committed = await self._commit(aggregate, self._templates)
        if isinstance(committed, Failure):
            return committed

        self._logger.info(
            "notification_template_created",
            template_id=aggregate.id,
            tenant_id=cmd.tenant_id,
            channel=aggregate.entity.channel.value,
            actor=cmd.actor,
        )
        return Success(value=aggregate.entity)


class UpdateNotificationTemplateHandler(
    CommandHandler[UpdateNotificationTemplate, NotificationTemplate]
):
    def __init__(
        self,
        *,
        templates: EntityRepository[NotificationTemplate],
        dispatcher: EventDispatcherProtocol,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(dispatcher=dispatcher, logger=logger)
        self._templates = templates

    async def _execute(
        self, cmd: UpdateNotificationTemplate
    ) -> Result[NotificationTemplate, DomainError]:
        valid = validate_update_template(cmd)
        if isinstance(valid, Failure):
            return valid

        loaded = await self._load(
            self._templates, RESOURCE, cmd.template_id, cmd.expected_version
        )
        if isinstance(loaded, Failure):
            return loaded
        aggregate = loaded.value
        template = aggregate.entity

        changes: dict[str, Any] = {
            name: value
            for name, value in {
                "name": cmd.name,
                "subject": cmd.subject,
                "content": cmd.content,
                "variables": cmd.variables,
                "language": cmd.language,
                "description": cmd.description,
            }.items()
            if value is not None
        }

        declared = check_declared_variables(
            changes.get("subject", template.subject),
            changes.get("content", template.content),
            changes.get("variables", template.variables),
        )
        if isinstance(declared, Failure):
            return declared

        unique = await self._ensure_unique_keys(
            self._templates,
            {"name": cmd.name},
            tenant_id=template.tenant_id,
            resource_type=RESOURCE,
            exclude_id=template.id,
        )
        if isinstance(unique, Failure):
            return unique

        applied = update_info(aggregate, changes, actor=cmd.actor)
        committed = await self._commit(aggregate, self._templates)
        if isinstance(committed, Failure):
            return committed

        if applied:
            self._logger.info(
                "notification_template_updated",
                template_id=template.id,
                changed_fields=sorted(applied),
                actor=cmd.actor,
            )
        return Success(value=template)


class DeleteNotificationTemplateHandler(CommandHandler[DeleteNotificationTemplate, None]):
    def __init__(
        self,
        *,
        templates: EntityRepository[NotificationTemplate],
        dispatcher: EventDispatcherProtocol,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(dispatcher=dispatcher, logger=logger)
        self._templates = templates

    async def _execute(self, cmd: DeleteNotificationTemplate) -> Result[None, DomainError]:
        valid = validate_entity_reference(cmd.template_id, cmd.actor, "template_id")
        if isinstance(valid, Failure):
            return valid

        loaded = await self._load(
            self._templates, RESOURCE, cmd.template_id, cmd.expected_version
        )
        if isinstance(loaded, Failure):
            return loaded

        return await self._soft_delete(self._templates, loaded.value, cmd.actor)
