"""User command handlers.

Usernames and emails are unique within the tenant. Referenced organization
and departments must exist in the user's tenant (departments in that
organization). Profiles and relationships are dependent records: written
here without events, hard-deleted with the user.
"""

from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

from iam_admin.application.commands.handlers.base import CommandHandler
from iam_admin.application.commands.user_commands import (
    AddUserRelationship,
    AssignUserToOrganization,
    CreateUser,
    DeleteUser,
    UpdateUser,
    UpdateUserProfile,
)
from iam_admin.application.commands.validators import (
    validate_add_relationship,
    validate_assign_user,
    validate_create_user,
    validate_entity_reference,
    validate_update_user,
    validate_update_user_profile,
)
from iam_admin.core.errors import BusinessRuleViolation, DomainError
from iam_admin.core.result import Failure, Result, Success
from iam_admin.domain.aggregates import (
    assign_user_to_organization,
    create_user,
    new_id,
    update_info,
)
from iam_admin.domain.entities import (
    Department,
    Organization,
    Tenant,
    User,
    UserProfile,
    UserRelationship,
)
from iam_admin.domain.enums import (
    AggregateType,
    RelationshipTargetType,
    RelationshipType,
)
from iam_admin.domain.protocols import (
    EntityRepository,
    EventDispatcherProtocol,
    LoggerProtocol,
    UserDependentsRepository,
)

RESOURCE = AggregateType.USER.value


class _MembershipRules(CommandHandler[Any, Any]):
    """Organization and department reference checks."""

    def __init__(
        self,
        *,
        users: EntityRepository[User],
        organizations: EntityRepository[Organization],
        departments: EntityRepository[Department],
        dispatcher: EventDispatcherProtocol,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(dispatcher=dispatcher, logger=logger)
        self._users = users
        self._organizations = organizations
        self._departments = departments

    async def _check_memberships(
        self,
        tenant_id: str,
        organization_id: str | None,
        department_ids: tuple[str, ...],
    ) -> Result[None, BusinessRuleViolation]:
        if organization_id is None:
            return Success(value=None)
        organization = await self._require_reference(
            self._organizations,
            organization_id,
            field="organization_id",
            resource_type=AggregateType.ORGANIZATION.value,
            tenant_id=tenant_id,
        )
        if isinstance(organization, Failure):
            return organization
        for department_id in department_ids:
            department = await self._require_reference(
                self._departments,
                department_id,
                field="department_ids",
                resource_type=AggregateType.DEPARTMENT.value,
                tenant_id=tenant_id,
                organization_id=organization_id,
            )
            if isinstance(department, Failure):
                return department
        return Success(value=None)


class CreateUserHandler(_MembershipRules):
    """Handler for CreateUser.

    Flow:
    1. Validate input shape
    2. Check username and email unused in tenant, memberships in scope
    3. Build the user aggregate (isolation from memberships, CONFIDENTIAL)
    4-6. Persist with outbox, dispatch, clear
    """

    async def _execute(self, cmd: CreateUser) -> Result[User, DomainError]:
        # Step 1: Shape validation
        valid = validate_create_user(cmd)
        if isinstance(valid, Failure):
            return valid

        # Step 2: Business rules
        unique = await self._ensure_unique_keys(
            self._users,
            {"username": cmd.username, "email": cmd.email.lower()},
            tenant_id=cmd.tenant_id,
            resource_type=RESOURCE,
        )
        if isinstance(unique, Failure):
            return unique

        memberships = await self._check_memberships(
            cmd.tenant_id, cmd.organization_id, cmd.department_ids
        )
        if isinstance(memberships, Failure):
            return memberships

        # Step 3: Build aggregate
        aggregate = create_user(
            tenant_id=cmd.tenant_id,
            username=cmd.username,
            email=cmd.email,
            display_name=cmd.display_name,
            actor=cmd.actor,
            user_type=cmd.user_type,
            phone=cmd.phone,
            organization_id=cmd.organization_id,
            department_ids=cmd.department_ids,
            privacy_level=cmd.privacy_level,
        )

        # Steps 4-6
        committed = await self._commit(aggregate, self._users)
        if isinstance(committed, Failure):
            return committed

        self._logger.info(
            "user_created",
            user_id=aggregate.id,
            tenant_id=cmd.tenant_id,
            isolation_level=aggregate.entity.isolation_level.value,
            actor=cmd.actor,
        )
        return Success(value=aggregate.entity)


class UpdateUserHandler(CommandHandler[UpdateUser, User]):
    def __init__(
        self,
        *,
        users: EntityRepository[User],
        dispatcher: EventDispatcherProtocol,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(dispatcher=dispatcher, logger=logger)
        self._users = users

    async def _execute(self, cmd: UpdateUser) -> Result[User, DomainError]:
        valid = validate_update_user(cmd)
        if isinstance(valid, Failure):
            return valid

        loaded = await self._load(self._users, RESOURCE, cmd.user_id, cmd.expected_version)
        if isinstance(loaded, Failure):
            return loaded
        aggregate = loaded.value

        email = cmd.email.lower() if cmd.email else None
        changes: dict[str, Any] = {
            name: value
            for name, value in {
                "email": email,
                "display_name": cmd.display_name,
                "user_type": cmd.user_type,
                "phone": cmd.phone,
            }.items()
            if value is not None
        }

        unique = await self._ensure_unique_keys(
            self._users,
            {"email": email},
            tenant_id=aggregate.entity.tenant_id,
            resource_type=RESOURCE,
            exclude_id=aggregate.id,
        )
        if isinstance(unique, Failure):
            return unique

        applied = update_info(aggregate, changes, actor=cmd.actor)
        committed = await self._commit(aggregate, self._users)
        if isinstance(committed, Failure):
            return committed

        if applied:
            self._logger.info(
                "user_updated",
                user_id=aggregate.id,
                changed_fields=sorted(applied),
                actor=cmd.actor,
            )
        return Success(value=aggregate.entity)


class AssignUserToOrganizationHandler(_MembershipRules):
    """Handler for AssignUserToOrganization (the only re-scoping operation)."""

    async def _execute(self, cmd: AssignUserToOrganization) -> Result[User, DomainError]:
        valid = validate_assign_user(cmd)
        if isinstance(valid, Failure):
            return valid

        loaded = await self._load(self._users, RESOURCE, cmd.user_id, cmd.expected_version)
        if isinstance(loaded, Failure):
            return loaded
        aggregate = loaded.value

        memberships = await self._check_memberships(
            aggregate.entity.tenant_id, cmd.organization_id, cmd.department_ids
        )
        if isinstance(memberships, Failure):
            return memberships

        changed = assign_user_to_organization(
            aggregate, cmd.organization_id, cmd.department_ids, actor=cmd.actor
        )
        committed = await self._commit(aggregate, self._users)
        if isinstance(committed, Failure):
            return committed

        if changed:
            self._logger.info(
                "user_assigned_to_organization",
                user_id=aggregate.id,
                organization_id=cmd.organization_id,
                department_count=len(cmd.department_ids),
                actor=cmd.actor,
            )
        return Success(value=aggregate.entity)


class UpdateUserProfileHandler(CommandHandler[UpdateUserProfile, UserProfile]):
    """Create or merge the user's profile. No events: profiles are not projected."""

    def __init__(
        self,
        *,
        users: EntityRepository[User],
        dependents: UserDependentsRepository,
        dispatcher: EventDispatcherProtocol,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(dispatcher=dispatcher, logger=logger)
        self._users = users
        self._dependents = dependents

    async def _execute(self, cmd: UpdateUserProfile) -> Result[UserProfile, DomainError]:
        valid = validate_update_user_profile(cmd)
        if isinstance(valid, Failure):
            return valid

        loaded = await self._load(self._users, RESOURCE, cmd.user_id)
        if isinstance(loaded, Failure):
            return loaded
        user = loaded.value.entity

        now = datetime.now(UTC)
        supplied = {
            name: getattr(cmd, name)
            for name in UserProfile.FIELDS
            if getattr(cmd, name) is not None
        }
        existing = await self._dependents.get_profile(user.id)
        if existing is None:
            profile = UserProfile(
                user_id=user.id, tenant_id=user.tenant_id, updated_at=now, **supplied
            )
        else:
            profile = replace(existing, updated_at=now, **supplied)

        await self._dependents.save_profile(profile)
        self._logger.info(
            "user_profile_saved",
            user_id=user.id,
            fields=sorted(supplied),
            actor=cmd.actor,
        )
        return Success(value=profile)


class AddUserRelationshipHandler(CommandHandler[AddUserRelationship, UserRelationship]):
    """Link a user to another record in the same tenant."""

    def __init__(
        self,
        *,
        users: EntityRepository[User],
        tenants: EntityRepository[Tenant],
        organizations: EntityRepository[Organization],
        departments: EntityRepository[Department],
        dependents: UserDependentsRepository,
        dispatcher: EventDispatcherProtocol,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(dispatcher=dispatcher, logger=logger)
        self._users = users
        self._dependents = dependents
        self._targets: dict[RelationshipTargetType, EntityRepository[Any]] = {
            RelationshipTargetType.TENANT: tenants,
            RelationshipTargetType.ORGANIZATION: organizations,
            RelationshipTargetType.DEPARTMENT: departments,
            RelationshipTargetType.USER: users,
        }

    async def _execute(
        self, cmd: AddUserRelationship
    ) -> Result[UserRelationship, DomainError]:
        valid = validate_add_relationship(cmd)
        if isinstance(valid, Failure):
            return valid

        loaded = await self._load(self._users, RESOURCE, cmd.user_id)
        if isinstance(loaded, Failure):
            return loaded
        user = loaded.value.entity

        target_type = RelationshipTargetType(cmd.target_type)
        target = await self._require_reference(
            self._targets[target_type],
            cmd.target_id,
            field="target_id",
            resource_type=target_type.value.lower(),
            tenant_id=user.tenant_id,
        )
        if isinstance(target, Failure):
            return target

        relationship = UserRelationship(
            id=new_id(),
            user_id=user.id,
            tenant_id=user.tenant_id,
            target_id=cmd.target_id,
            target_type=target_type,
            relationship_type=RelationshipType(cmd.relationship_type),
            created_by=cmd.actor,
            created_at=datetime.now(UTC),
        )
        await self._dependents.add_relationship(relationship)
        self._logger.info(
            "user_relationship_added",
            user_id=user.id,
            target_type=target_type.value,
            relationship_type=relationship.relationship_type.value,
            actor=cmd.actor,
        )
        return Success(value=relationship)


class DeleteUserHandler(CommandHandler[DeleteUser, None]):
    """Soft-delete the user, then hard-delete only that user's dependents."""

    def __init__(
        self,
        *,
        users: EntityRepository[User],
        dependents: UserDependentsRepository,
        dispatcher: EventDispatcherProtocol,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(dispatcher=dispatcher, logger=logger)
        self._users = users
        self._dependents = dependents

    async def _execute(self, cmd: DeleteUser) -> Result[None, DomainError]:
        valid = validate_entity_reference(cmd.user_id, cmd.actor, "user_id")
        if isinstance(valid, Failure):
            return valid

        loaded = await self._load(self._users, RESOURCE, cmd.user_id, cmd.expected_version)
        if isinstance(loaded, Failure):
            return loaded

        deleted = await self._soft_delete(self._users, loaded.value, cmd.actor)
        if isinstance(deleted, Failure):
            return deleted

        removed = await self._dependents.delete_for_user(cmd.user_id)
        self._logger.info(
            "user_dependents_removed",
            user_id=cmd.user_id,
            removed=removed,
        )
        return Success(value=None)
