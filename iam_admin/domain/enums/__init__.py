"""Domain enums.

Available Enums:
    - IsolationLevel: ranked tenancy tiers
    - PrivacyLevel: visibility classification
    - LifecycleStatus: entity status and its transition table
    - AggregateType: aggregate kinds (wire ``aggregateType``)
    - TenantType, OrganizationType, DepartmentType, UserType, TemplateChannel
    - RelationshipTargetType, RelationshipType: user relationship records
"""

from iam_admin.domain.enums.aggregate_type import AggregateType
from iam_admin.domain.enums.entity_kinds import (
    DepartmentType,
    OrganizationType,
    RelationshipTargetType,
    RelationshipType,
    TemplateChannel,
    UserType,
)
from iam_admin.domain.enums.isolation_level import IsolationLevel
from iam_admin.domain.enums.lifecycle_status import ALLOWED_TRANSITIONS, LifecycleStatus
from iam_admin.domain.enums.privacy_level import PrivacyLevel
from iam_admin.domain.enums.tenant_type import TenantQuota, TenantType

__all__ = [
    "ALLOWED_TRANSITIONS",
    "AggregateType",
    "DepartmentType",
    "IsolationLevel",
    "LifecycleStatus",
    "OrganizationType",
    "PrivacyLevel",
    "RelationshipTargetType",
    "RelationshipType",
    "TemplateChannel",
    "TenantQuota",
    "TenantType",
    "UserType",
]
