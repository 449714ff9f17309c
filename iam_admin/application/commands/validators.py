"""Shape validation for commands (pipeline step 1).

Pure checks, no I/O. Each validator runs every rule for its command and
returns all violations at once through ``collect_violations``.
"""

from typing import Any

from iam_admin.application.commands.department_commands import (
    CreateDepartment,
    UpdateDepartment,
)
from iam_admin.application.commands.notification_template_commands import (
    CreateNotificationTemplate,
    UpdateNotificationTemplate,
)
from iam_admin.application.commands.organization_commands import (
    CreateOrganization,
    UpdateOrganization,
)
from iam_admin.application.commands.status_commands import ChangeStatus
from iam_admin.application.commands.tenant_commands import CreateTenant, UpdateTenant
from iam_admin.application.commands.user_commands import (
    AddUserRelationship,
    AssignUserToOrganization,
    CreateUser,
    UpdateUser,
    UpdateUserProfile,
)
from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import ValidationError
from iam_admin.core.result import Failure, Result, Success
from iam_admin.core.validation import (
    CODE_PATTERN,
    DOMAIN_PATTERN,
    IDENTIFIER_PATTERN,
    PHONE_PATTERN,
    USERNAME_PATTERN,
    collect_violations,
    validate_choice,
    validate_email,
    validate_max_length,
    validate_min_length,
    validate_not_empty,
    validate_pattern,
)
from iam_admin.domain.enums import (
    AggregateType,
    DepartmentType,
    LifecycleStatus,
    OrganizationType,
    RelationshipTargetType,
    RelationshipType,
    TemplateChannel,
    TenantType,
    UserType,
)

NAME_MAX_LENGTH = 100
CODE_MAX_LENGTH = 50
DOMAIN_MAX_LENGTH = 255
DEPARTMENT_DESCRIPTION_MAX_LENGTH = 500
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
SUBJECT_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 10000

type Checks = list[Result[Any, ValidationError]]


def _non_negative(value: int | None, field_name: str) -> Result[int | None, ValidationError]:
    if value is not None and value < 0:
        return Failure(
            error=ValidationError(
                code=ErrorCode.INVALID_FORMAT,
                message=f"{field_name} must not be negative",
                field=field_name,
            )
        )
    return Success(value=value)


def _not_blank_if_given(value: str | None, field_name: str) -> Result[Any, ValidationError]:
    if value is None:
        return Success(value=None)
    return validate_not_empty(value, field_name)


def _name_checks(name: str | None, *, required: bool) -> Checks:
    return [
        validate_not_empty(name, "name") if required else _not_blank_if_given(name, "name"),
        validate_max_length(name, NAME_MAX_LENGTH, "name"),
    ]


def _code_checks(code: str | None, *, required: bool) -> Checks:
    return [
        validate_not_empty(code, "code") if required else _not_blank_if_given(code, "code"),
        validate_max_length(code, CODE_MAX_LENGTH, "code"),
        validate_pattern(
            code,
            CODE_PATTERN,
            "code",
            "code may contain only letters, digits, underscores and hyphens",
        ),
    ]


def _variable_checks(variables: tuple[str, ...] | None) -> Checks:
    return [
        validate_pattern(
            variable,
            IDENTIFIER_PATTERN,
            "variables",
            f"'{variable}' is not a valid variable name",
        )
        for variable in variables or ()
    ]


def validate_create_tenant(cmd: CreateTenant) -> Result[None, ValidationError]:
    return collect_violations(
        validate_not_empty(cmd.actor, "actor"),
        *_name_checks(cmd.name, required=True),
        *_code_checks(cmd.code, required=True),
        validate_not_empty(cmd.domain, "domain"),
        validate_max_length(cmd.domain, DOMAIN_MAX_LENGTH, "domain"),
        validate_pattern(cmd.domain, DOMAIN_PATTERN, "domain", "domain must be a hostname"),
        validate_choice(cmd.tenant_type, TenantType, "tenant_type"),
        _non_negative(cmd.max_users, "max_users"),
        _non_negative(cmd.max_organizations, "max_organizations"),
        _non_negative(cmd.max_storage_gb, "max_storage_gb"),
    )


def validate_update_tenant(cmd: UpdateTenant) -> Result[None, ValidationError]:
    return collect_violations(
        validate_not_empty(cmd.tenant_id, "tenant_id"),
        validate_not_empty(cmd.actor, "actor"),
        *_name_checks(cmd.name, required=False),
        _not_blank_if_given(cmd.domain, "domain"),
        validate_max_length(cmd.domain, DOMAIN_MAX_LENGTH, "domain"),
        validate_pattern(cmd.domain, DOMAIN_PATTERN, "domain", "domain must be a hostname"),
        _non_negative(cmd.max_users, "max_users"),
        _non_negative(cmd.max_organizations, "max_organizations"),
        _non_negative(cmd.max_storage_gb, "max_storage_gb"),
    )


def validate_create_organization(cmd: CreateOrganization) -> Result[None, ValidationError]:
    return collect_violations(
        validate_not_empty(cmd.tenant_id, "tenant_id"),
        validate_not_empty(cmd.actor, "actor"),
        *_name_checks(cmd.name, required=True),
        *_code_checks(cmd.code, required=True),
        validate_choice(cmd.organization_type, OrganizationType, "organization_type"),
    )


def validate_update_organization(cmd: UpdateOrganization) -> Result[None, ValidationError]:
    return collect_violations(
        validate_not_empty(cmd.organization_id, "organization_id"),
        validate_not_empty(cmd.actor, "actor"),
        *_name_checks(cmd.name, required=False),
        *_code_checks(cmd.code, required=False),
        validate_choice(cmd.organization_type, OrganizationType, "organization_type"),
    )


def validate_create_department(cmd: CreateDepartment) -> Result[None, ValidationError]:
    return collect_violations(
        validate_not_empty(cmd.tenant_id, "tenant_id"),
        validate_not_empty(cmd.organization_id, "organization_id"),
        validate_not_empty(cmd.actor, "actor"),
        *_name_checks(cmd.name, required=True),
        *_code_checks(cmd.code, required=True),
        validate_choice(cmd.department_type, DepartmentType, "department_type"),
        validate_max_length(
            cmd.description, DEPARTMENT_DESCRIPTION_MAX_LENGTH, "description"
        ),
    )


def validate_update_department(cmd: UpdateDepartment) -> Result[None, ValidationError]:
    checks: Checks = [
        validate_not_empty(cmd.department_id, "department_id"),
        validate_not_empty(cmd.actor, "actor"),
        *_name_checks(cmd.name, required=False),
        *_code_checks(cmd.code, required=False),
        validate_choice(cmd.department_type, DepartmentType, "department_type"),
        validate_max_length(
            cmd.description, DEPARTMENT_DESCRIPTION_MAX_LENGTH, "description"
        ),
    ]
    if cmd.make_root and cmd.parent_department_id is not None:
        checks.append(
            Failure(
                error=ValidationError(
                    code=ErrorCode.VALIDATION_FAILED,
                    message="make_root and parent_department_id are mutually exclusive",
                    field="parent_department_id",
                )
            )
        )
    return collect_violations(*checks)


def _user_field_checks(
    email: str | None, display_name: str | None, phone: str | None, *, required: bool
) -> Checks:
    presence = validate_not_empty if required else _not_blank_if_given
    return [
        presence(email, "email"),
        validate_email(email),
        presence(display_name, "display_name"),
        validate_max_length(display_name, NAME_MAX_LENGTH, "display_name"),
        validate_pattern(phone, PHONE_PATTERN, "phone", "phone must be in E.164 format"),
    ]


def validate_create_user(cmd: CreateUser) -> Result[None, ValidationError]:
    checks: Checks = [
        validate_not_empty(cmd.tenant_id, "tenant_id"),
        validate_not_empty(cmd.actor, "actor"),
        validate_not_empty(cmd.username, "username"),
        validate_min_length(cmd.username, USERNAME_MIN_LENGTH, "username"),
        validate_max_length(cmd.username, USERNAME_MAX_LENGTH, "username"),
        validate_pattern(
            cmd.username,
            USERNAME_PATTERN,
            "username",
            "username may contain only letters, digits, dots, underscores and hyphens",
        ),
        *_user_field_checks(cmd.email, cmd.display_name, cmd.phone, required=True),
        validate_choice(cmd.user_type, UserType, "user_type"),
    ]
    if cmd.department_ids and not cmd.organization_id:
        checks.append(
            Failure(
                error=ValidationError(
                    code=ErrorCode.FIELD_REQUIRED,
                    message="organization_id is required when department_ids are given",
                    field="organization_id",
                )
            )
        )
    return collect_violations(*checks)


def validate_update_user(cmd: UpdateUser) -> Result[None, ValidationError]:
    return collect_violations(
        validate_not_empty(cmd.user_id, "user_id"),
        validate_not_empty(cmd.actor, "actor"),
        *_user_field_checks(cmd.email, cmd.display_name, cmd.phone, required=False),
        validate_choice(cmd.user_type, UserType, "user_type"),
    )


def validate_assign_user(cmd: AssignUserToOrganization) -> Result[None, ValidationError]:
    return collect_violations(
        validate_not_empty(cmd.user_id, "user_id"),
        validate_not_empty(cmd.organization_id, "organization_id"),
        validate_not_empty(cmd.actor, "actor"),
    )


def validate_update_user_profile(cmd: UpdateUserProfile) -> Result[None, ValidationError]:
    return collect_violations(
        validate_not_empty(cmd.user_id, "user_id"),
        validate_not_empty(cmd.actor, "actor"),
        validate_max_length(cmd.first_name, NAME_MAX_LENGTH, "first_name"),
        validate_max_length(cmd.last_name, NAME_MAX_LENGTH, "last_name"),
        validate_max_length(cmd.bio, DEPARTMENT_DESCRIPTION_MAX_LENGTH, "bio"),
    )


def validate_add_relationship(cmd: AddUserRelationship) -> Result[None, ValidationError]:
    return collect_violations(
        validate_not_empty(cmd.user_id, "user_id"),
        validate_not_empty(cmd.target_id, "target_id"),
        validate_not_empty(cmd.actor, "actor"),
        validate_choice(cmd.target_type, RelationshipTargetType, "target_type"),
        validate_choice(cmd.relationship_type, RelationshipType, "relationship_type"),
    )


def _template_body_checks(
    subject: str | None, content: str | None, variables: tuple[str, ...] | None
) -> Checks:
    return [
        validate_max_length(subject, SUBJECT_MAX_LENGTH, "subject"),
        validate_max_length(content, CONTENT_MAX_LENGTH, "content"),
        *_variable_checks(variables),
    ]


def validate_create_template(
    cmd: CreateNotificationTemplate,
) -> Result[None, ValidationError]:
    checks: Checks = [
        validate_not_empty(cmd.tenant_id, "tenant_id"),
        validate_not_empty(cmd.actor, "actor"),
        *_name_checks(cmd.name, required=True),
        validate_choice(cmd.channel, TemplateChannel, "channel"),
        validate_not_empty(cmd.content, "content"),
        validate_not_empty(cmd.language, "language"),
        *_template_body_checks(cmd.subject, cmd.content, cmd.variables),
    ]
    if isinstance(cmd.channel, TemplateChannel) and cmd.channel.requires_subject:
        checks.append(validate_not_empty(cmd.subject, "subject"))
    return collect_violations(*checks)


def validate_update_template(
    cmd: UpdateNotificationTemplate,
) -> Result[None, ValidationError]:
    return collect_violations(
        validate_not_empty(cmd.template_id, "template_id"),
        validate_not_empty(cmd.actor, "actor"),
        *_name_checks(cmd.name, required=False),
        _not_blank_if_given(cmd.content, "content"),
        _not_blank_if_given(cmd.language, "language"),
        *_template_body_checks(cmd.subject, cmd.content, cmd.variables),
    )


def validate_change_status(cmd: ChangeStatus) -> Result[None, ValidationError]:
    return collect_violations(
        validate_not_empty(cmd.aggregate_id, "aggregate_id"),
        validate_not_empty(cmd.actor, "actor"),
        validate_choice(cmd.aggregate_type, AggregateType, "aggregate_type"),
        validate_choice(cmd.target_status, LifecycleStatus, "target_status"),
    )


def validate_entity_reference(
    entity_id: str, actor: str, field_name: str
) -> Result[None, ValidationError]:
    """Checks for commands that only name an entity and an actor."""
    return collect_violations(
        validate_not_empty(entity_id, field_name),
        validate_not_empty(actor, "actor"),
    )
