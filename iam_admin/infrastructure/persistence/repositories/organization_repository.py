"""OrganizationRepository - SQLAlchemy implementation."""

from typing import Any

from iam_admin.domain.entities.organization import Organization
from iam_admin.domain.enums import AggregateType, OrganizationType
from iam_admin.infrastructure.persistence.models.organization import OrganizationModel
from iam_admin.infrastructure.persistence.repositories.entity_repository import (
    SQLAlchemyEntityRepository,
    scope_fields,
)


class OrganizationRepository(SQLAlchemyEntityRepository[Organization, OrganizationModel]):
    """Maps Organization entities to the ``organizations`` table."""

    model = OrganizationModel
    aggregate_type = AggregateType.ORGANIZATION

    def _business_columns(self, entity: Organization) -> dict[str, Any]:
        return {
            "name": entity.name,
            "code": entity.code,
            "organization_type": entity.organization_type.value,
            "description": entity.description,
        }

    def _to_domain(self, model: OrganizationModel) -> Organization:
        return Organization(
            **scope_fields(model),
            name=model.name,
            code=model.code,
            organization_type=OrganizationType(model.organization_type),
            description=model.description,
        )
