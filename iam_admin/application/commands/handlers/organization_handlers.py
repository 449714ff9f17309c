"""Organization command handlers.

Names and codes are unique within the tenant; the tenant must exist. An
organization can only be deleted once it has no departments.
"""

from typing import Any

from iam_admin.application.commands.handlers.base import CommandHandler
from iam_admin.application.commands.organization_commands import (
    CreateOrganization,
    DeleteOrganization,
    UpdateOrganization,
)
from iam_admin.application.commands.validators import (
    validate_create_organization,
    validate_entity_reference,
    validate_update_organization,
)
from iam_admin.core.errors import DomainError
from iam_admin.core.result import Failure, Result, Success
from iam_admin.domain.aggregates import create_organization, update_info
from iam_admin.domain.entities import Department, Organization, Tenant
from iam_admin.domain.enums import AggregateType
from iam_admin.domain.protocols import (
    EntityRepository,
    EventDispatcherProtocol,
    LoggerProtocol,
)
from iam_admin.domain.value_objects import Criteria

RESOURCE = AggregateType.ORGANIZATION.value


class CreateOrganizationHandler(CommandHandler[CreateOrganization, Organization]):
    """Handler for CreateOrganization.

    Flow:
    1. Validate input shape
    2. Check tenant exists, name and code unused in the tenant
    3. Build the organization aggregate
    4-6. Persist with outbox, dispatch, clear
    """

    def __init__(
        self,
        *,
        tenants: EntityRepository[Tenant],
        organizations: EntityRepository[Organization],
        dispatcher: EventDispatcherProtocol,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(dispatcher=dispatcher, logger=logger)
        self._tenants = tenants
        self._organizations = organizations

    async def _execute(self, cmd: CreateOrganization) -> Result[Organization, DomainError]:
        # Step 1: Shape validation
        valid = validate_create_organization(cmd)
        if isinstance(valid, Failure):
            return valid

        # Step 2: Business rules
        tenant = await self._require_reference(
            self._tenants,
            cmd.tenant_id,
            field="tenant_id",
            resource_type=AggregateType.TENANT.value,
        )
        if isinstance(tenant, Failure):
            return tenant

        unique = await self._ensure_unique_keys(
            self._organizations,
            {"name": cmd.name, "code": cmd.code},
            tenant_id=cmd.tenant_id,
            resource_type=RESOURCE,
        )
        if isinstance(unique, Failure):
            return unique

        # Step 3: Build aggregate
        aggregate = create_organization(
            tenant_id=cmd.tenant_id,
            name=cmd.name,
            code=cmd.code,
            organization_type=cmd.organization_type,
            actor=cmd.actor,
            description=cmd.description,
            privacy_level=cmd.privacy_level,
        )

        # Steps 4-6
        committed = await self._commit(aggregate, self._organizations)
        if isinstance(committed, Failure):
            return committed

        self._logger.info(
            "organization_created",
            organization_id=aggregate.id,
            tenant_id=cmd.tenant_id,
            actor=cmd.actor,
        )
        return Success(value=aggregate.entity)


class UpdateOrganizationHandler(CommandHandler[UpdateOrganization, Organization]):
    def __init__(
        self,
        *,
        organizations: EntityRepository[Organization],
        dispatcher: EventDispatcherProtocol,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(dispatcher=dispatcher, logger=logger)
        self._organizations = organizations

    async def _execute(self, cmd: UpdateOrganization) -> Result[Organization, DomainError]:
        valid = validate_update_organization(cmd)
        if isinstance(valid, Failure):
            return valid

        loaded = await self._load(
            self._organizations, RESOURCE, cmd.organization_id, cmd.expected_version
        )
        if isinstance(loaded, Failure):
            return loaded
        aggregate = loaded.value

        changes: dict[str, Any] = {
            name: value
            for name, value in {
                "name": cmd.name,
                "code": cmd.code,
                "organization_type": cmd.organization_type,
                "description": cmd.description,
            }.items()
            if value is not None
        }

        unique = await self._ensure_unique_keys(
            self._organizations,
            {"name": cmd.name, "code": cmd.code},
            tenant_id=aggregate.entity.tenant_id,
            resource_type=RESOURCE,
            exclude_id=aggregate.id,
        )
        if isinstance(unique, Failure):
            return unique

        applied = update_info(aggregate, changes, actor=cmd.actor)
        committed = await self._commit(aggregate, self._organizations)
        if isinstance(committed, Failure):
            return committed

        if applied:
            self._logger.info(
                "organization_updated",
                organization_id=aggregate.id,
                changed_fields=sorted(applied),
                actor=cmd.actor,
            )
        return Success(value=aggregate.entity)


class DeleteOrganizationHandler(CommandHandler[DeleteOrganization, None]):
    """Handler for DeleteOrganization. Rejected while departments remain."""

    def __init__(
        self,
        *,
        organizations: EntityRepository[Organization],
        departments: EntityRepository[Department],
        dispatcher: EventDispatcherProtocol,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(dispatcher=dispatcher, logger=logger)
        self._organizations = organizations
        self._departments = departments

    async def _execute(self, cmd: DeleteOrganization) -> Result[None, DomainError]:
        valid = validate_entity_reference(
            cmd.organization_id, cmd.actor, "organization_id"
        )
        if isinstance(valid, Failure):
            return valid

        loaded = await self._load(
            self._organizations, RESOURCE, cmd.organization_id, cmd.expected_version
        )
        if isinstance(loaded, Failure):
            return loaded

        no_children = await self._reject_if_children(
            self._departments,
            Criteria(
                tenant_id=loaded.value.entity.tenant_id,
                organization_id=cmd.organization_id,
            ),
            resource_type=RESOURCE,
            child_type=AggregateType.DEPARTMENT.value,
        )
        if isinstance(no_children, Failure):
            return no_children

        return await self._soft_delete(self._organizations, loaded.value, cmd.actor)
