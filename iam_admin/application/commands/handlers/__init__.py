"""Command handlers (use cases)."""

from iam_admin.application.commands.handlers.base import CommandHandler
from iam_admin.application.commands.handlers.change_status_handler import (
    ChangeStatusHandler,
)
from iam_admin.application.commands.handlers.department_handlers import (
    CreateDepartmentHandler,
    DeleteDepartmentHandler,
    UpdateDepartmentHandler,
)
from iam_admin.application.commands.handlers.notification_template_handlers import (
    CreateNotificationTemplateHandler,
    DeleteNotificationTemplateHandler,
    UpdateNotificationTemplateHandler,
)
from iam_admin.application.commands.handlers.organization_handlers import (
    CreateOrganizationHandler,
    DeleteOrganizationHandler,
    UpdateOrganizationHandler,
)
from iam_admin.application.commands.handlers.tenant_handlers import (
    CreateTenantHandler,
    DeleteTenantHandler,
    UpdateTenantHandler,
)
from iam_admin.application.commands.handlers.user_handlers import (
    AddUserRelationshipHandler,
    AssignUserToOrganizationHandler,
    CreateUserHandler,
    DeleteUserHandler,
    UpdateUserHandler,
    UpdateUserProfileHandler,
)

__all__ = [
    "AddUserRelationshipHandler",
    "AssignUserToOrganizationHandler",
    "ChangeStatusHandler",
    "CommandHandler",
    "CreateDepartmentHandler",
    "CreateNotificationTemplateHandler",
    "CreateOrganizationHandler",
    "CreateTenantHandler",
    "CreateUserHandler",
    "DeleteDepartmentHandler",
    "DeleteNotificationTemplateHandler",
    "DeleteOrganizationHandler",
    "DeleteTenantHandler",
    "DeleteUserHandler",
    "UpdateDepartmentHandler",
    "UpdateNotificationTemplateHandler",
    "UpdateOrganizationHandler",
    "UpdateTenantHandler",
    "UpdateUserHandler",
    "UpdateUserProfileHandler",
]
