"""Department command handlers.

Departments form a tree inside one organization. Parent assignment is
checked against the whole ancestor chain (no self-parenting, no cycles, depth
limit). Moving a department that has sub-departments is rejected because the
descendants' level and path would go stale.
"""

from typing import Any

from iam_admin.application.commands.department_commands import (
    CreateDepartment,
    DeleteDepartment,
    UpdateDepartment,
)
from iam_admin.application.commands.handlers.base import CommandHandler
from iam_admin.application.commands.validators import (
    validate_create_department,
    validate_entity_reference,
    validate_update_department,
)
from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import BusinessRuleViolation, DomainError
from iam_admin.core.result import Failure, Result, Success
from iam_admin.domain.aggregates import create_department, update_info
from iam_admin.domain.entities import Department, Organization, User
from iam_admin.domain.enums import AggregateType
from iam_admin.domain.errors import Rule
from iam_admin.domain.protocols import (
    EntityRepository,
    EventDispatcherProtocol,
    LoggerProtocol,
)
from iam_admin.domain.services.hierarchy import check_parent_assignment, placement_under
from iam_admin.domain.value_objects import Criteria

RESOURCE = AggregateType.DEPARTMENT.value


class _DepartmentRules(CommandHandler[Any, Any]):
    """Business-rule lookups shared by create and update."""

    def __init__(
        self,
        *,
        departments: EntityRepository[Department],
        users: EntityRepository[User],
        max_depth: int,
        dispatcher: EventDispatcherProtocol,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(dispatcher=dispatcher, logger=logger)
        self._departments = departments
        self._users = users
        self._max_depth = max_depth

    async def _ancestor_chain(self, parent: Department) -> list[str]:
        """Ids above ``parent``, nearest first, following stored parent links.

        Stops after ``max_depth`` hops so corrupt data cannot loop forever.
        """
        chain: list[str] = []
        current = parent
        while current.parent_department_id and len(chain) <= self._max_depth:
            chain.append(current.parent_department_id)
            found = await self._departments.find_by_id(current.parent_department_id)
            if found is None:
                break
            current = found
        return chain

    async def _resolve_parent(
        self,
        department_id: str | None,
        parent_id: str,
        tenant_id: str,
        organization_id: str,
    ) -> Result[Department, BusinessRuleViolation]:
        """Load the proposed parent and check the placement is legal."""
        parent = await self._require_reference(
            self._departments,
            parent_id,
            field="parent_department_id",
            resource_type=RESOURCE,
            tenant_id=tenant_id,
            organization_id=organization_id,
        )
        if isinstance(parent, Failure):
            return parent

        chain = await self._ancestor_chain(parent.value)
        placement = check_parent_assignment(
            department_id, parent_id, chain, parent.value.level, self._max_depth
        )
        if isinstance(placement, Failure):
            return placement
        return parent

    async def _check_manager(
        self, manager_id: str, tenant_id: str, organization_id: str
    ) -> Result[None, BusinessRuleViolation]:
        """Manager must be a user of the tenant and, if scoped, the organization."""
        manager = await self._require_reference(
            self._users,
            manager_id,
            field="manager_id",
            resource_type=AggregateType.USER.value,
            tenant_id=tenant_id,
        )
        if isinstance(manager, Failure):
            return manager
        user_org = manager.value.organization_id
        if user_org is not None and user_org != organization_id:
            return Failure(
                error=BusinessRuleViolation(
                    code=ErrorCode.REFERENCE_SCOPE_MISMATCH,
                    message="Manager belongs to another organization",
                    rule=Rule.REFERENCE_IN_SCOPE,
                    field="manager_id",
                )
            )
        return Success(value=None)


class CreateDepartmentHandler(_DepartmentRules):
    """Handler for CreateDepartment.

    Flow:
    1. Validate input shape
    2. Check name/code unused, organization in tenant, parent placement,
       manager scope
    3. Build the department aggregate (level and path from the parent)
    4-6. Persist with outbox, dispatch, clear
    """

    def __init__(
        self,
        *,
        organizations: EntityRepository[Organization],
        departments: EntityRepository[Department],
        users: EntityRepository[User],
        max_depth: int,
        dispatcher: EventDispatcherProtocol,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(
            departments=departments,
            users=users,
            max_depth=max_depth,
            dispatcher=dispatcher,
            logger=logger,
        )
        self._organizations = organizations

    async def _execute(self, cmd: CreateDepartment) -> Result[Department, DomainError]:
        # Step 1: Shape validation
        valid = validate_create_department(cmd)
        if isinstance(valid, Failure):
            return valid

        # Step 2: Business rules
        unique = await self._ensure_unique_keys(
            self._departments,
            {"name": cmd.name, "code": cmd.code},
            tenant_id=cmd.tenant_id,
            resource_type=RESOURCE,
        )
        if isinstance(unique, Failure):
            return unique

        organization = await self._require_reference(
            self._organizations,
            cmd.organization_id,
            field="organization_id",
            resource_type=AggregateType.ORGANIZATION.value,
            tenant_id=cmd.tenant_id,
        )
        if isinstance(organization, Failure):
            return organization

        parent: Department | None = None
        if cmd.parent_department_id is not None:
            resolved = await self._resolve_parent(
                None, cmd.parent_department_id, cmd.tenant_id, cmd.organization_id
            )
            if isinstance(resolved, Failure):
                return resolved
            parent = resolved.value

        if cmd.manager_id is not None:
            manager = await self._check_manager(
                cmd.manager_id, cmd.tenant_id, cmd.organization_id
            )
            if isinstance(manager, Failure):
                return manager

        # Step 3: Build aggregate
        aggregate = create_department(
            tenant_id=cmd.tenant_id,
            organization_id=cmd.organization_id,
            name=cmd.name,
            code=cmd.code,
            department_type=cmd.department_type,
            actor=cmd.actor,
            description=cmd.description,
            parent=parent,
            manager_id=cmd.manager_id,
            privacy_level=cmd.privacy_level,
        )

        # Steps 4-6
        committed = await self._commit(aggregate, self._departments)
        if isinstance(committed, Failure):
            return committed

        self._logger.info(
            "department_created",
            department_id=aggregate.id,
            tenant_id=cmd.tenant_id,
            organization_id=cmd.organization_id,
            level=aggregate.entity.level,
            actor=cmd.actor,
        )
        return Success(value=aggregate.entity)


class UpdateDepartmentHandler(_DepartmentRules):
    """Handler for UpdateDepartment, including re-parenting.

    A move rewrites ``parent_department_id``, ``level`` and ``path`` in one
    Updated event.
    """

    async def _execute(self, cmd: UpdateDepartment) -> Result[Department, DomainError]:
        valid = validate_update_department(cmd)
        if isinstance(valid, Failure):
            return valid

        loaded = await self._load(
            self._departments, RESOURCE, cmd.department_id, cmd.expected_version
        )
        if isinstance(loaded, Failure):
            return loaded
        aggregate = loaded.value
        department = aggregate.entity
        tenant_id = department.tenant_id
        organization_id = department.organization_id or ""

        changes: dict[str, Any] = {
            name: value
            for name, value in {
                "name": cmd.name,
                "code": cmd.code,
                "department_type": cmd.department_type,
                "description": cmd.description,
                "manager_id": cmd.manager_id,
            }.items()
            if value is not None
        }

        unique = await self._ensure_unique_keys(
            self._departments,
            {"name": cmd.name, "code": cmd.code},
            tenant_id=tenant_id,
            resource_type=RESOURCE,
            exclude_id=department.id,
        )
        if isinstance(unique, Failure):
            return unique

        if cmd.manager_id is not None and cmd.manager_id != department.manager_id:
            manager = await self._check_manager(cmd.manager_id, tenant_id, organization_id)
            if isinstance(manager, Failure):
                return manager

        moving = cmd.make_root and not department.is_root
        new_parent: Department | None = None
        if (
            cmd.parent_department_id is not None
            and cmd.parent_department_id != department.parent_department_id
        ):
            resolved = await self._resolve_parent(
                department.id, cmd.parent_department_id, tenant_id, organization_id
            )
            if isinstance(resolved, Failure):
                return resolved
            new_parent = resolved.value
            moving = True

        if moving:
            no_children = await self._reject_move_with_children(department)
            if isinstance(no_children, Failure):
                return no_children
            level, path = placement_under(
                department.id,
                new_parent.level if new_parent else None,
                new_parent.path if new_parent else None,
            )
            changes["parent_department_id"] = new_parent.id if new_parent else None
            changes["level"] = level
            changes["path"] = path

        applied = update_info(aggregate, changes, actor=cmd.actor)
        committed = await self._commit(aggregate, self._departments)
        if isinstance(committed, Failure):
            return committed

        if applied:
            self._logger.info(
                "department_updated",
                department_id=department.id,
                changed_fields=sorted(applied),
                moved=moving,
                actor=cmd.actor,
            )
        return Success(value=department)

    async def _reject_move_with_children(
        self, department: Department
    ) -> Result[None, BusinessRuleViolation]:
        children = await self._departments.count(
            Criteria(
                tenant_id=department.tenant_id,
                field_filters={"parent_department_id": department.id},
            )
        )
        if children:
            return Failure(
                error=BusinessRuleViolation(
                    code=ErrorCode.INVALID_HIERARCHY,
                    message="A department with sub-departments cannot be moved",
                    rule=Rule.NO_MOVE_WITH_CHILDREN,
                    field="parent_department_id",
                    details={"children": str(children)},
                )
            )
        return Success(value=None)


class DeleteDepartmentHandler(CommandHandler[DeleteDepartment, None]):
    """Handler for DeleteDepartment. Rejected while sub-departments remain."""

    def __init__(
        self,
        *,
        departments: EntityRepository[Department],
        dispatcher: EventDispatcherProtocol,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(dispatcher=dispatcher, logger=logger)
        self._departments = departments

    async def _execute(self, cmd: DeleteDepartment) -> Result[None, DomainError]:
        valid = validate_entity_reference(cmd.department_id, cmd.actor, "department_id")
        if isinstance(valid, Failure):
            return valid

        loaded = await self._load(
            self._departments, RESOURCE, cmd.department_id, cmd.expected_version
        )
        if isinstance(loaded, Failure):
            return loaded

        no_children = await self._reject_if_children(
            self._departments,
            Criteria(
                tenant_id=loaded.value.entity.tenant_id,
                field_filters={"parent_department_id": cmd.department_id},
            ),
            resource_type=RESOURCE,
            child_type="sub-department",
        )
        if isinstance(no_children, Failure):
            return no_children

        return await self._soft_delete(self._departments, loaded.value, cmd.actor)
