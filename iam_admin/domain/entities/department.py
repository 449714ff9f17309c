"""Department domain entity.

Departments form a tree inside one organization. ``level`` is 1 for roots
and ``parent.level + 1`` otherwise; ``path`` lists ids from the root down to
the department itself (``/root-id/child-id``).
"""

from dataclasses import dataclass
from typing import ClassVar

from iam_admin.domain.entities.scoped_entity import ScopedEntity
from iam_admin.domain.enums import AggregateType, DepartmentType
from iam_admin.domain.errors import EntityError


@dataclass(kw_only=True)
class Department(ScopedEntity):
    """Department within an organization.

    Attributes:
        name: Display name (unique within tenant).
        code: Short identifier (unique within tenant).
        department_type: Classification.
        description: Optional free text.
        parent_department_id: Parent department, None for roots.
        manager_id: Managing user, if any.
        level: Depth in the tree (roots are 1).
        path: Ids from root to self, slash separated.
    """

    AGGREGATE_TYPE: ClassVar[AggregateType] = AggregateType.DEPARTMENT
    UPDATABLE_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {
            "name",
            "code",
            "department_type",
            "description",
            "manager_id",
            "parent_department_id",
            "level",
            "path",
        }
    )
    NATURAL_KEYS: ClassVar[tuple[str, ...]] = ("name", "code")

    name: str
    code: str
    department_type: DepartmentType
    description: str | None = None
    parent_department_id: str | None = None
    manager_id: str | None = None
    level: int = 1
    path: str = ""

    def __post_init__(self) -> None:
        super().__post_init__()
        if not self.name or not self.name.strip():
            raise ValueError(EntityError.MISSING_NAME)
        if not self.code or not self.code.strip():
            raise ValueError(EntityError.MISSING_CODE)
        if self.scope.organization_id is None:
            raise ValueError(EntityError.MISSING_ORGANIZATION)
        if self.level < 1:
            raise ValueError(EntityError.INVALID_LEVEL)
        if not self.path:
            self.path = f"/{self.id}"

    @property
    def is_root(self) -> bool:
        return self.parent_department_id is None

    def ancestor_ids(self) -> list[str]:
        """Ids on the path above this department, root first."""
        return [part for part in self.path.split("/") if part][:-1]
