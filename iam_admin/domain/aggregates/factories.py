"""Named factories for every aggregate kind, plus user re-scoping.

Factories are the only way to create entities: each one fixes the isolation
level from the kind and its ownership, sets status INITIALIZING, and records
the Created event as version 1.
"""

from datetime import UTC, datetime
from typing import Any

from uuid_extensions import uuid7

from iam_admin.domain.aggregates.aggregate import Aggregate, record_event
from iam_admin.domain.aggregates.event_families import family_for
from iam_admin.domain.entities import (
    Department,
    NotificationTemplate,
    Organization,
    Scope,
    ScopedEntity,
    Tenant,
    User,
)
from iam_admin.domain.enums import (
    DepartmentType,
    IsolationLevel,
    OrganizationType,
    PrivacyLevel,
    TemplateChannel,
    TenantType,
    UserType,
)
from iam_admin.domain.events import UserAssignedToOrganizationEvent
from iam_admin.domain.services.access_control import assign_to_organization
from iam_admin.domain.services.hierarchy import placement_under


def new_id() -> str:
    """New entity id (UUIDv7, time ordered)."""
    return str(uuid7())


def _scope_payload(entity: ScopedEntity) -> dict[str, Any]:
    scope = entity.scope
    return {
        "tenant_id": scope.tenant_id,
        "isolation_level": scope.isolation_level,
        "privacy_level": scope.privacy_level,
        "status": entity.status,
        "organization_id": scope.organization_id,
        "department_ids": scope.department_ids,
        "owner_user_id": scope.user_id,
    }


def _record_created(
    aggregate: Aggregate[Any], actor: str, now: datetime, **fields: Any
) -> None:
    entity = aggregate.entity
    record_event(
        aggregate,
        family_for(entity.AGGREGATE_TYPE).created(
            aggregate_id=entity.id,
            version=aggregate.next_version,
            actor=actor,
            occurred_on=now,
            **_scope_payload(entity),
            **fields,
        ),
    )


def create_tenant(
    *,
    name: str,
    code: str,
    domain: str,
    tenant_type: TenantType,
    actor: str,
    description: str | None = None,
    max_users: int | None = None,
    max_organizations: int | None = None,
    max_storage_gb: int | None = None,
    privacy_level: PrivacyLevel = PrivacyLevel.SHARED,
    now: datetime | None = None,
) -> Aggregate[Tenant]:
    """Create a tenant. Quotas default from the tenant type."""
    now = now or datetime.now(UTC)
    tenant_id = new_id()
    quota = tenant_type.default_quota()
    tenant = Tenant(
        id=tenant_id,
        scope=Scope(
            tenant_id=tenant_id,
            isolation_level=IsolationLevel.TENANT,
            privacy_level=privacy_level,
        ),
        created_by=actor,
        updated_by=actor,
        created_at=now,
        updated_at=now,
        name=name,
        code=code,
        domain=domain.lower(),
        tenant_type=tenant_type,
        description=description,
        max_users=max_users if max_users is not None else quota.max_users,
        max_organizations=(
            max_organizations
            if max_organizations is not None
            else quota.max_organizations
        ),
        max_storage_gb=(
            max_storage_gb if max_storage_gb is not None else quota.max_storage_gb
        ),
    )
    aggregate = Aggregate(entity=tenant)
    _record_created(
        aggregate,
        actor,
        now,
        name=tenant.name,
        code=tenant.code,
        domain=tenant.domain,
        tenant_type=tenant.tenant_type,
        description=tenant.description,
        max_users=tenant.max_users,
        max_organizations=tenant.max_organizations,
        max_storage_gb=tenant.max_storage_gb,
    )
    return aggregate


def create_organization(
    *,
    tenant_id: str,
    name: str,
    code: str,
    organization_type: OrganizationType,
    actor: str,
    description: str | None = None,
    privacy_level: PrivacyLevel = PrivacyLevel.SHARED,
    now: datetime | None = None,
) -> Aggregate[Organization]:
    """Create an organization; its scope names itself as organization."""
    now = now or datetime.now(UTC)
    organization_id = new_id()
    organization = Organization(
        id=organization_id,
        scope=Scope(
            tenant_id=tenant_id,
            organization_id=organization_id,
            isolation_level=IsolationLevel.ORGANIZATION,
            privacy_level=privacy_level,
        ),
        created_by=actor,
        updated_by=actor,
        created_at=now,
        updated_at=now,
        name=name,
        code=code,
        organization_type=organization_type,
        description=description,
    )
    aggregate = Aggregate(entity=organization)
    _record_created(
        aggregate,
        actor,
        now,
        name=organization.name,
        code=organization.code,
        organization_type=organization.organization_type,
        description=organization.description,
    )
    return aggregate


def create_department(
    *,
    tenant_id: str,
    organization_id: str,
    name: str,
    code: str,
    department_type: DepartmentType,
    actor: str,
    description: str | None = None,
    parent: Department | None = None,
    manager_id: str | None = None,
    privacy_level: PrivacyLevel = PrivacyLevel.PROTECTED,
    now: datetime | None = None,
) -> Aggregate[Department]:
    """Create a department, as a root or under ``parent``.

    The caller has already checked that ``parent`` is in the same tenant and
    organization and that the depth limit allows another level.
    """
    now = now or datetime.now(UTC)
    department_id = new_id()
    level, path = placement_under(
        department_id,
        parent.level if parent else None,
        parent.path if parent else None,
    )
    department = Department(
        id=department_id,
        scope=Scope(
            tenant_id=tenant_id,
            organization_id=organization_id,
            department_ids=(department_id,),
            isolation_level=IsolationLevel.DEPARTMENT,
            privacy_level=privacy_level,
        ),
        created_by=actor,
        updated_by=actor,
        created_at=now,
        updated_at=now,
        name=name,
        code=code,
        department_type=department_type,
        description=description,
        parent_department_id=parent.id if parent else None,
        manager_id=manager_id,
        level=level,
        path=path,
    )
    aggregate = Aggregate(entity=department)
    _record_created(
        aggregate,
        actor,
        now,
        name=department.name,
        code=department.code,
        department_type=department.department_type,
        level=department.level,
        path=department.path,
        description=department.description,
        parent_department_id=department.parent_department_id,
        manager_id=department.manager_id,
    )
    return aggregate


def user_isolation_level(
    organization_id: str | None, department_ids: tuple[str, ...] | list[str]
) -> IsolationLevel:
    """Isolation level implied by a user's memberships."""
    if department_ids:
        return IsolationLevel.DEPARTMENT
    if organization_id:
        return IsolationLevel.ORGANIZATION
    return IsolationLevel.TENANT


def create_user(
    *,
    tenant_id: str,
    username: str,
    email: str,
    display_name: str,
    actor: str,
    user_type: UserType = UserType.TENANT_USER,
    phone: str | None = None,
    organization_id: str | None = None,
    department_ids: tuple[str, ...] | list[str] = (),
    privacy_level: PrivacyLevel = PrivacyLevel.CONFIDENTIAL,
    now: datetime | None = None,
) -> Aggregate[User]:
    """Create a user who owns their own record."""
    now = now or datetime.now(UTC)
    user_id = new_id()
    user = User(
        id=user_id,
        scope=Scope(
            tenant_id=tenant_id,
            organization_id=organization_id,
            department_ids=tuple(department_ids),
            user_id=user_id,
            isolation_level=user_isolation_level(organization_id, department_ids),
            privacy_level=privacy_level,
        ),
        created_by=actor,
        updated_by=actor,
        created_at=now,
        updated_at=now,
        username=username,
        email=email.lower(),
        display_name=display_name,
        user_type=user_type,
        phone=phone,
    )
    aggregate = Aggregate(entity=user)
    _record_created(
        aggregate,
        actor,
        now,
        username=user.username,
        email=user.email,
        display_name=user.display_name,
        user_type=user.user_type,
        phone=user.phone,
    )
    return aggregate


def template_isolation_level(
    tenant_id: str, organization_id: str | None, platform_tenant_id: str
) -> IsolationLevel:
    """Isolation level implied by a template's owner."""
    if tenant_id == platform_tenant_id:
        return IsolationLevel.PLATFORM
    if organization_id:
        return IsolationLevel.ORGANIZATION
    return IsolationLevel.TENANT


def create_notification_template(
    *,
    tenant_id: str,
    name: str,
    channel: TemplateChannel,
    content: str,
    actor: str,
    platform_tenant_id: str,
    subject: str | None = None,
    variables: tuple[str, ...] | list[str] = (),
    language: str = "en",
    description: str | None = None,
    organization_id: str | None = None,
    privacy_level: PrivacyLevel = PrivacyLevel.SHARED,
    now: datetime | None = None,
) -> Aggregate[NotificationTemplate]:
    """Create a notification template."""
    now = now or datetime.now(UTC)
    template = NotificationTemplate(
        id=new_id(),
        scope=Scope(
            tenant_id=tenant_id,
            organization_id=organization_id,
            isolation_level=template_isolation_level(
                tenant_id, organization_id, platform_tenant_id
            ),
            privacy_level=privacy_level,
        ),
        created_by=actor,
        updated_by=actor,
        created_at=now,
        updated_at=now,
        name=name,
        channel=channel,
        content=content,
        subject=subject,
        variables=tuple(variables),
        language=language,
        description=description,
    )
    aggregate = Aggregate(entity=template)
    _record_created(
        aggregate,
        actor,
        now,
        name=template.name,
        channel=template.channel,
        content=template.content,
        language=template.language,
        subject=template.subject,
        variables=template.variables,
        description=template.description,
    )
    return aggregate


def assign_user_to_organization(
    aggregate: Aggregate[User],
    organization_id: str,
    department_ids: tuple[str, ...] | list[str] = (),
    *,
    actor: str,
    now: datetime | None = None,
) -> bool:
    """Re-scope a user into an organization.

    Returns:
        True when the scope changed (one event recorded), False when the user
        already has exactly this organization, these departments and
        ORGANIZATION level.
    """
    user = aggregate.entity
    previous = user.scope
    updated = assign_to_organization(previous, organization_id, department_ids)
    if updated == previous:
        return False

    now = now or datetime.now(UTC)
    user.scope = updated
    user.updated_by = actor
    user.updated_at = now
    record_event(
        aggregate,
        UserAssignedToOrganizationEvent(
            aggregate_id=user.id,
            version=aggregate.next_version,
            actor=actor,
            occurred_on=now,
            organization_id=updated.organization_id or organization_id,
            department_ids=updated.department_ids,
            isolation_level=updated.isolation_level,
            previous_organization_id=previous.organization_id,
            previous_department_ids=previous.department_ids,
            previous_isolation_level=previous.isolation_level,
        ),
    )
    return True
