"""Classification enums for organizations, departments, users and templates."""

from enum import Enum


class OrganizationType(str, Enum):
    """Organization classification."""

    BUSINESS = "BUSINESS"
    FUNCTIONAL = "FUNCTIONAL"
    PROJECT = "PROJECT"
    MATRIX = "MATRIX"
    VIRTUAL = "VIRTUAL"
    SUBSIDIARY = "SUBSIDIARY"
    JOINT_VENTURE = "JOINT_VENTURE"
    PARTNER = "PARTNER"
    SUPPLIER = "SUPPLIER"
    CUSTOMER = "CUSTOMER"
    OTHER = "OTHER"


class DepartmentType(str, Enum):
    """Department classification."""

    BUSINESS = "BUSINESS"
    FUNCTIONAL = "FUNCTIONAL"
    TECHNICAL = "TECHNICAL"
    MANAGEMENT = "MANAGEMENT"
    FINANCE = "FINANCE"
    HUMAN_RESOURCES = "HUMAN_RESOURCES"
    MARKETING = "MARKETING"
    SALES = "SALES"
    CUSTOMER_SERVICE = "CUSTOMER_SERVICE"
    OPERATIONS = "OPERATIONS"
    OTHER = "OTHER"


class UserType(str, Enum):
    """Kind of principal a user record represents."""

    TENANT_USER = "TENANT_USER"
    PLATFORM_USER = "PLATFORM_USER"
    SYSTEM_USER = "SYSTEM_USER"
    SERVICE_USER = "SERVICE_USER"
    GUEST_USER = "GUEST_USER"


class RelationshipTargetType(str, Enum):
    """What a user relationship points at."""

    TENANT = "TENANT"
    ORGANIZATION = "ORGANIZATION"
    DEPARTMENT = "DEPARTMENT"
    USER = "USER"


class RelationshipType(str, Enum):
    """Role a user holds in a relationship."""

    MEMBER = "MEMBER"
    MANAGER = "MANAGER"
    OWNER = "OWNER"
    DELEGATE = "DELEGATE"


class TemplateChannel(str, Enum):
    """Delivery channel a notification template renders for."""

    EMAIL = "EMAIL"
    SMS = "SMS"
    PUSH = "PUSH"
    WEBHOOK = "WEBHOOK"
    IN_APP = "IN_APP"

    @property
    def requires_subject(self) -> bool:
        return self is TemplateChannel.EMAIL
