"""Organization domain entity.

Organizations live inside a tenant at ORGANIZATION level; their scope's
``organization_id`` is their own id so filtering by organization finds them.
"""

from dataclasses import dataclass
from typing import ClassVar

from iam_admin.domain.entities.scoped_entity import ScopedEntity
from iam_admin.domain.enums import AggregateType, OrganizationType
from iam_admin.domain.errors import EntityError


@dataclass(kw_only=True)
class Organization(ScopedEntity):
    """Organization within a tenant.

    Attributes:
        name: Display name (unique within tenant).
        code: Short identifier (unique within tenant).
        organization_type: Classification.
        description: Optional free text.
    """

    AGGREGATE_TYPE: ClassVar[AggregateType] = AggregateType.ORGANIZATION
    UPDATABLE_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"name", "code", "organization_type", "description"}
    )
    NATURAL_KEYS: ClassVar[tuple[str, ...]] = ("name", "code")

    name: str
    code: str
    organization_type: OrganizationType
    description: str | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if not self.name or not self.name.strip():
            raise ValueError(EntityError.MISSING_NAME)
        if not self.code or not self.code.strip():
            raise ValueError(EntityError.MISSING_CODE)
