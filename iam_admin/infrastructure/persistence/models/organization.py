"""Organization snapshot table."""

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from iam_admin.infrastructure.persistence.base import NOT_DELETED, ScopedModel


class OrganizationModel(ScopedModel):
    """Organization row. Name and code are unique per tenant among live rows."""

    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False)
    organization_type: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index(
            "uq_organizations_name",
            "tenant_id",
            "name",
            unique=True,
            postgresql_where=NOT_DELETED,
        ),
        Index(
            "uq_organizations_code",
            "tenant_id",
            "code",
            unique=True,
            postgresql_where=NOT_DELETED,
        ),
        {"comment": "Organization snapshots"},
    )
