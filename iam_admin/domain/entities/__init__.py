"""Domain entities."""

from iam_admin.domain.entities.department import Department
from iam_admin.domain.entities.notification_template import NotificationTemplate
from iam_admin.domain.entities.organization import Organization
from iam_admin.domain.entities.scope import Scope
from iam_admin.domain.entities.scoped_entity import ScopedEntity
from iam_admin.domain.entities.tenant import Tenant
from iam_admin.domain.entities.user import User
from iam_admin.domain.entities.user_dependents import UserProfile, UserRelationship

__all__ = [
    "Department",
    "NotificationTemplate",
    "Organization",
    "Scope",
    "ScopedEntity",
    "Tenant",
    "User",
    "UserProfile",
    "UserRelationship",
]
