"""Tenant command handlers.

Tenant names, codes and domains are unique platform-wide. A tenant can only
be deleted once it has no organizations.
"""

from typing import Any

from iam_admin.application.commands.handlers.base import CommandHandler
from iam_admin.application.commands.tenant_commands import (
    CreateTenant,
    DeleteTenant,
    UpdateTenant,
)
from iam_admin.application.commands.validators import (
    validate_create_tenant,
    validate_entity_reference,
    validate_update_tenant,
)
from iam_admin.core.errors import DomainError
from iam_admin.core.result import Failure, Result, Success
from iam_admin.domain.aggregates import create_tenant, update_info
from iam_admin.domain.entities import Organization, Tenant
from iam_admin.domain.enums import AggregateType
from iam_admin.domain.protocols import (
    EntityRepository,
    EventDispatcherProtocol,
    LoggerProtocol,
)
from iam_admin.domain.value_objects import Criteria

RESOURCE = AggregateType.TENANT.value


class CreateTenantHandler(CommandHandler[CreateTenant, Tenant]):
    """Handler for CreateTenant.

    Flow:
    1. Validate input shape
    2. Check name, code and domain are unused
    3. Build the tenant aggregate (TENANT isolation, default quotas)
    4-6. Persist with outbox, dispatch, clear
    """

    def __init__(
        self,
        *,
        tenants: EntityRepository[Tenant],
        dispatcher: EventDispatcherProtocol,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(dispatcher=dispatcher, logger=logger)
        self._tenants = tenants

    async def _execute(self, cmd: CreateTenant) -> Result[Tenant, DomainError]:
        # Step 1: Shape validation
        valid = validate_create_tenant(cmd)
        if isinstance(valid, Failure):
            return valid

        # Step 2: Uniqueness
        unique = await self._ensure_unique_keys(
            self._tenants,
            {"name": cmd.name, "code": cmd.code, "domain": cmd.domain.lower()},
            tenant_id=None,
            resource_type=RESOURCE,
        )
        if isinstance(unique, Failure):
            return unique

        # Step 3: Build aggregate
        aggregate = create_tenant(
            name=cmd.name,
            code=cmd.code,
            domain=cmd.domain,
            tenant_type=cmd.tenant_type,
            actor=cmd.actor,
            description=cmd.description,
            max_users=cmd.max_users,
            max_organizations=cmd.max_organizations,
            max_storage_gb=cmd.max_storage_gb,
            privacy_level=cmd.privacy_level,
        )

        # Steps 4-6
        committed = await self._commit(aggregate, self._tenants)
        if isinstance(committed, Failure):
            return committed

        self._logger.info(
            "tenant_created",
            tenant_id=aggregate.id,
            code=cmd.code,
            actor=cmd.actor,
        )
        return Success(value=aggregate.entity)


class UpdateTenantHandler(CommandHandler[UpdateTenant, Tenant]):
    """Handler for UpdateTenant. Identical values are a silent no-op."""

    def __init__(
        self,
        *,
        tenants: EntityRepository[Tenant],
        dispatcher: EventDispatcherProtocol,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(dispatcher=dispatcher, logger=logger)
        self._tenants = tenants

    async def _execute(self, cmd: UpdateTenant) -> Result[Tenant, DomainError]:
        valid = validate_update_tenant(cmd)
        if isinstance(valid, Failure):
            return valid

        loaded = await self._load(
            self._tenants, RESOURCE, cmd.tenant_id, cmd.expected_version
        )
        if isinstance(loaded, Failure):
            return loaded
        aggregate = loaded.value

        changes: dict[str, Any] = {
            name: value
            for name, value in {
                "name": cmd.name,
                "domain": cmd.domain.lower() if cmd.domain else None,
                "description": cmd.description,
                "max_users": cmd.max_users,
                "max_organizations": cmd.max_organizations,
                "max_storage_gb": cmd.max_storage_gb,
            }.items()
            if value is not None
        }

        unique = await self._ensure_unique_keys(
            self._tenants,
            {key: changes.get(key) for key in ("name", "domain")},
            tenant_id=None,
            resource_type=RESOURCE,
            exclude_id=aggregate.id,
        )
        if isinstance(unique, Failure):
            return unique

        applied = update_info(aggregate, changes, actor=cmd.actor)
        committed = await self._commit(aggregate, self._tenants)
        if isinstance(committed, Failure):
            return committed

        if applied:
            self._logger.info(
                "tenant_updated",
                tenant_id=aggregate.id,
                changed_fields=sorted(applied),
                actor=cmd.actor,
            )
        return Success(value=aggregate.entity)


class DeleteTenantHandler(CommandHandler[DeleteTenant, None]):
    """Handler for DeleteTenant. Rejected while organizations remain."""

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

    async def _execute(self, cmd: DeleteTenant) -> Result[None, DomainError]:
        valid = validate_entity_reference(cmd.tenant_id, cmd.actor, "tenant_id")
        if isinstance(valid, Failure):
            return valid

        loaded = await self._load(
            self._tenants, RESOURCE, cmd.tenant_id, cmd.expected_version
        )
        if isinstance(loaded, Failure):
            return loaded

        no_children = await self._reject_if_children(
            self._organizations,
            Criteria(tenant_id=cmd.tenant_id),
            resource_type=RESOURCE,
            child_type=AggregateType.ORGANIZATION.value,
        )
        if isinstance(no_children, Failure):
            return no_children

        return await self._soft_delete(self._tenants, loaded.value, cmd.actor)
