"""User profile and relationship tables.

Both are owned by a user row and removed with it (hard delete after the
user's soft delete).
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from iam_admin.infrastructure.persistence.base import ID_LENGTH, BaseModel


class UserProfileModel(BaseModel):
    """One optional profile per user, keyed by user id."""

    __tablename__ = "user_profiles"

    user_id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    tenant_id: Mapped[str] = mapped_column(String(ID_LENGTH), nullable=False, index=True)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    locale: Mapped[str | None] = mapped_column(String(20), nullable=True)
    timezone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class UserRelationshipModel(BaseModel):
    """Link from a user to a tenant, organization, department or user."""

    __tablename__ = "user_relationships"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        nullable=False,
        index=True,
        comment="Owning user",
    )
    tenant_id: Mapped[str] = mapped_column(String(ID_LENGTH), nullable=False)
    target_id: Mapped[str] = mapped_column(String(ID_LENGTH), nullable=False)
    target_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="TENANT, ORGANIZATION, DEPARTMENT or USER",
    )
    relationship_type: Mapped[str] = mapped_column(String(20), nullable=False)
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
