"""Base models for all database tables.

This module provides:
- BaseModel: Declarative base for ALL models (string UUIDv7 ``id``)
- ScopedModel: Abstract base for scoped entity snapshot tables

Following hexagonal architecture:
- This is an infrastructure concern (database implementation detail)
- Domain entities should NOT inherit from this
- Domain entities are mapped to/from database models by the repositories

Architecture:
    BaseModel (id)
        ├── ScopedModel (+ scope, status, version, audit columns)
        │   ├── TenantModel
        │   ├── OrganizationModel
        │   ├── DepartmentModel
        │   ├── UserModel
        │   └── NotificationTemplateModel
        │
        ├── UserProfileModel
        ├── UserRelationshipModel
        └── OutboxEventModel (own integer sequence key)

Note: Timestamps come from the domain (event time), not from server
defaults, so snapshots and events agree.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Integer, String, text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

ID_LENGTH = 36

NOT_DELETED = text("status <> 'DELETED'")
"""Partial index predicate: natural keys are unique among live rows only."""


class BaseModel(DeclarativeBase):
    """Declarative base shared by every table."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)})>"


class ScopedModel(BaseModel):
    """Columns shared by every scoped entity table.

    Fields:
        id: Entity id (UUIDv7 string)
        tenant_id: Owning tenant
        organization_id: Owning organization, if any
        department_ids: Owning departments
        owner_user_id: Owning user, if any
        isolation_level: IsolationLevel value
        privacy_level: PrivacyLevel value
        status: LifecycleStatus value (DELETED rows are soft-deleted)
        version: Optimistic concurrency token (number of applied events)
        created_by / updated_by: Acting principals
        created_at / updated_at: Domain timestamps (UTC)
    """

    __abstract__ = True

    id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        primary_key=True,
        comment="Entity id (UUIDv7)",
    )
    tenant_id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        nullable=False,
        index=True,
        comment="Owning tenant",
    )
    organization_id: Mapped[str | None] = mapped_column(
        String(ID_LENGTH),
        nullable=True,
        index=True,
        comment="Owning organization",
    )
    department_ids: Mapped[list[str]] = mapped_column(
        ARRAY(String(ID_LENGTH)),
        nullable=False,
        default=list,
        comment="Owning departments",
    )
    owner_user_id: Mapped[str | None] = mapped_column(
        String(ID_LENGTH),
        nullable=True,
        comment="Owning user",
    )
    isolation_level: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="PLATFORM, TENANT, ORGANIZATION, DEPARTMENT or USER",
    )
    privacy_level: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="PROTECTED, SHARED or CONFIDENTIAL",
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        index=True,
        comment="Lifecycle status",
    )
    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Number of applied events (compare-and-swap token)",
    )
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)
    updated_by: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def to_dict(self) -> dict[str, Any]:
        """Column values by name (for debugging/logging)."""
        return {column.name: getattr(self, column.key) for column in self.__table__.columns}
