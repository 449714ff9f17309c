"""Tenant snapshot table."""

from sqlalchemy import Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from iam_admin.infrastructure.persistence.base import NOT_DELETED, ScopedModel


class TenantModel(ScopedModel):
    """Tenant row. Natural keys are unique platform-wide among live rows.

    Indexes:
        - uq_tenants_name: (name) where not deleted
        - uq_tenants_code: (code) where not deleted
        - uq_tenants_domain: (lower(domain)) where not deleted
    """

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False)
    domain: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Primary DNS domain (compared case-insensitively)",
    )
    tenant_type: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    max_users: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_organizations: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_storage_gb: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("uq_tenants_name", "name", unique=True, postgresql_where=NOT_DELETED),
        Index("uq_tenants_code", "code", unique=True, postgresql_where=NOT_DELETED),
        {"comment": "Tenant snapshots"},
    )


Index(
    "uq_tenants_domain",
    func.lower(TenantModel.domain),
    unique=True,
    postgresql_where=NOT_DELETED,
)
