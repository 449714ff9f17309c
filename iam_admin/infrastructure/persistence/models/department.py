"""Department snapshot table."""

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from iam_admin.infrastructure.persistence.base import ID_LENGTH, NOT_DELETED, ScopedModel


class DepartmentModel(ScopedModel):
    """Department row.

    Indexes:
        - uq_departments_name / uq_departments_code: per tenant, live rows
        - ix_departments_parent_department_id: child lookups
    """

    __tablename__ = "departments"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False)
    department_type: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    parent_department_id: Mapped[str | None] = mapped_column(
        String(ID_LENGTH),
        nullable=True,
        index=True,
        comment="Parent department (same organization); NULL for roots",
    )
    manager_id: Mapped[str | None] = mapped_column(String(ID_LENGTH), nullable=True)
    level: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Depth in the hierarchy; roots are 1",
    )
    path: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Slash-separated ancestor ids ending with this id",
    )

    __table_args__ = (
        Index(
            "uq_departments_name",
            "tenant_id",
            "name",
            unique=True,
            postgresql_where=NOT_DELETED,
        ),
        Index(
            "uq_departments_code",
            "tenant_id",
            "code",
            unique=True,
            postgresql_where=NOT_DELETED,
        ),
        {"comment": "Department snapshots"},
    )
