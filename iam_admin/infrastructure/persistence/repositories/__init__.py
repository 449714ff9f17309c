"""SQLAlchemy repository implementations."""

from iam_admin.infrastructure.persistence.repositories.department_repository import (
    DepartmentRepository,
)
from iam_admin.infrastructure.persistence.repositories.entity_repository import (
    SQLAlchemyEntityRepository,
)
from iam_admin.infrastructure.persistence.repositories.notification_template_repository import (
    NotificationTemplateRepository,
)
from iam_admin.infrastructure.persistence.repositories.organization_repository import (
    OrganizationRepository,
)
from iam_admin.infrastructure.persistence.repositories.outbox_repository import (
    SQLAlchemyOutbox,
)
from iam_admin.infrastructure.persistence.repositories.tenant_repository import (
    TenantRepository,
)
from iam_admin.infrastructure.persistence.repositories.user_dependents_repository import (
    SQLAlchemyUserDependents,
)
from iam_admin.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
)

__all__ = [
    "DepartmentRepository",
    "NotificationTemplateRepository",
    "OrganizationRepository",
    "SQLAlchemyEntityRepository",
    "SQLAlchemyOutbox",
    "SQLAlchemyUserDependents",
    "TenantRepository",
    "UserRepository",
]
