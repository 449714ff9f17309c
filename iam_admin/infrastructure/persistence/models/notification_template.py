"""Notification template snapshot table."""

from sqlalchemy import Index, String, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from iam_admin.infrastructure.persistence.base import NOT_DELETED, ScopedModel


class NotificationTemplateModel(ScopedModel):
    """Notification template row. Name is unique per tenant among live rows."""

    __tablename__ = "notification_templates"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    channel: Mapped[str] = mapped_column(String(20), nullable=False)
    subject: Mapped[str | None] = mapped_column(String(200), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    variables: Mapped[list[str]] = mapped_column(
        ARRAY(String(100)),
        nullable=False,
        default=list,
        comment="Declared placeholder names",
    )
    language: Mapped[str] = mapped_column(String(10), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index(
            "uq_notification_templates_name",
            "tenant_id",
            "name",
            unique=True,
            postgresql_where=NOT_DELETED,
        ),
        {"comment": "Notification template snapshots"},
    )
