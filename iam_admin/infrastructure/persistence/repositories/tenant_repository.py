"""TenantRepository - SQLAlchemy implementation."""

from typing import Any

from iam_admin.domain.entities.tenant import Tenant
from iam_admin.domain.enums import AggregateType, TenantType
from iam_admin.infrastructure.persistence.models.tenant import TenantModel
from iam_admin.infrastructure.persistence.repositories.entity_repository import (
    SQLAlchemyEntityRepository,
    scope_fields,
)


class TenantRepository(SQLAlchemyEntityRepository[Tenant, TenantModel]):
    """Maps Tenant entities to the ``tenants`` table."""

    model = TenantModel
    aggregate_type = AggregateType.TENANT

    def _business_columns(self, entity: Tenant) -> dict[str, Any]:
        return {
            "name": entity.name,
            "code": entity.code,
            "domain": entity.domain,
            "tenant_type": entity.tenant_type.value,
            "description": entity.description,
            "max_users": entity.max_users,
            "max_organizations": entity.max_organizations,
            "max_storage_gb": entity.max_storage_gb,
        }

    def _to_domain(self, model: TenantModel) -> Tenant:
        return Tenant(
            **scope_fields(model),
            name=model.name,
            code=model.code,
            domain=model.domain,
            tenant_type=TenantType(model.tenant_type),
            description=model.description,
            max_users=model.max_users,
            max_organizations=model.max_organizations,
            max_storage_gb=model.max_storage_gb,
        )
