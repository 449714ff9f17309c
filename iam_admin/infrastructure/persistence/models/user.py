"""User snapshot table."""

from sqlalchemy import Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from iam_admin.infrastructure.persistence.base import NOT_DELETED, ScopedModel


class UserModel(ScopedModel):
    """User row. Username and lower(email) are unique per tenant among live rows."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    user_type: Mapped[str] = mapped_column(String(20), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)

    __table_args__ = (
        Index(
            "uq_users_username",
            "tenant_id",
            "username",
            unique=True,
            postgresql_where=NOT_DELETED,
        ),
        {"comment": "User snapshots"},
    )


Index(
    "uq_users_email",
    UserModel.tenant_id,
    func.lower(UserModel.email),
    unique=True,
    postgresql_where=NOT_DELETED,
)
