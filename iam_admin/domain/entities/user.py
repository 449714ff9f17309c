"""User domain entity.

Users own their own records (``scope.user_id == id``), which is what
CONFIDENTIAL privacy checks against. Isolation level follows membership:
DEPARTMENT with departments, ORGANIZATION with only an organization,
TENANT otherwise. Assigning a user to an organization re-scopes them.
"""

from dataclasses import dataclass
from typing import ClassVar

from iam_admin.domain.entities.scoped_entity import ScopedEntity
from iam_admin.domain.enums import AggregateType, UserType
from iam_admin.domain.errors import EntityError


@dataclass(kw_only=True)
class User(ScopedEntity):
    """User account record (no credentials).

    Attributes:
        username: Login name (unique within tenant, immutable).
        email: Contact email (unique within tenant).
        display_name: Name shown in listings.
        user_type: Kind of principal.
        phone: Optional E.164 phone number.
    """

    AGGREGATE_TYPE: ClassVar[AggregateType] = AggregateType.USER
    UPDATABLE_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"email", "display_name", "user_type", "phone"}
    )
    NATURAL_KEYS: ClassVar[tuple[str, ...]] = ("username", "email")

    username: str
    email: str
    display_name: str
    user_type: UserType = UserType.TENANT_USER
    phone: str | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if not self.username or not self.username.strip():
            raise ValueError(EntityError.MISSING_USERNAME)
