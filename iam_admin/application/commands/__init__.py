"""Commands (CQRS write side) and their shape validators."""

from iam_admin.application.commands.department_commands import (
    CreateDepartment,
    DeleteDepartment,
    UpdateDepartment,
)
from iam_admin.application.commands.notification_template_commands import (
    CreateNotificationTemplate,
    DeleteNotificationTemplate,
    UpdateNotificationTemplate,
)
from iam_admin.application.commands.organization_commands import (
    CreateOrganization,
    DeleteOrganization,
    UpdateOrganization,
)
from iam_admin.application.commands.status_commands import ChangeStatus
from iam_admin.application.commands.tenant_commands import (
    CreateTenant,
    DeleteTenant,
    UpdateTenant,
)
from iam_admin.application.commands.user_commands import (
    AddUserRelationship,
    AssignUserToOrganization,
    CreateUser,
    DeleteUser,
    UpdateUser,
    UpdateUserProfile,
)

__all__ = [
    "AddUserRelationship",
    "AssignUserToOrganization",
    "ChangeStatus",
    "CreateDepartment",
    "CreateNotificationTemplate",
    "CreateOrganization",
    "CreateTenant",
    "CreateUser",
    "DeleteDepartment",
    "DeleteNotificationTemplate",
    "DeleteOrganization",
    "DeleteTenant",
    "DeleteUser",
    "UpdateDepartment",
    "UpdateNotificationTemplate",
    "UpdateOrganization",
    "UpdateTenant",
    "UpdateUser",
    "UpdateUserProfile",
]
