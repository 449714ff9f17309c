"""SQLAlchemy models. Importing this package registers every table."""

from iam_admin.infrastructure.persistence.models.department import DepartmentModel
from iam_admin.infrastructure.persistence.models.notification_template import (
    NotificationTemplateModel,
)
from iam_admin.infrastructure.persistence.models.organization import OrganizationModel
from iam_admin.infrastructure.persistence.models.outbox_event import OutboxEventModel
from iam_admin.infrastructure.persistence.models.tenant import TenantModel
from iam_admin.infrastructure.persistence.models.user import UserModel
from iam_admin.infrastructure.persistence.models.user_dependents import (
    UserProfileModel,
    UserRelationshipModel,
)

__all__ = [
    "DepartmentModel",
    "NotificationTemplateModel",
    "OrganizationModel",
    "OutboxEventModel",
    "TenantModel",
    "UserModel",
    "UserProfileModel",
    "UserRelationshipModel",
]
