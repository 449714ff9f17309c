"""DepartmentRepository - SQLAlchemy implementation."""

from typing import Any

from iam_admin.domain.entities.department import Department
from iam_admin.domain.enums import AggregateType, DepartmentType
from iam_admin.infrastructure.persistence.models.department import DepartmentModel
from iam_admin.infrastructure.persistence.repositories.entity_repository import (
    SQLAlchemyEntityRepository,
    scope_fields,
)


class DepartmentRepository(SQLAlchemyEntityRepository[Department, DepartmentModel]):
    """Maps Department entities to the ``departments`` table.

    Hierarchy columns (parent, level, path) are stored as computed by the
    use case; the repository does not re-derive them.
    """

    model = DepartmentModel
    aggregate_type = AggregateType.DEPARTMENT

    def _business_columns(self, entity: Department) -> dict[str, Any]:
        return {
            "name": entity.name,
            "code": entity.code,
            "department_type": entity.department_type.value,
            "description": entity.description,
            "parent_department_id": entity.parent_department_id,
            "manager_id": entity.manager_id,
            "level": entity.level,
            "path": entity.path,
        }

    def _to_domain(self, model: DepartmentModel) -> Department:
        return Department(
            **scope_fields(model),
            name=model.name,
            code=model.code,
            department_type=DepartmentType(model.department_type),
            description=model.description,
            parent_department_id=model.parent_department_id,
            manager_id=model.manager_id,
            level=model.level,
            path=model.path,
        )
