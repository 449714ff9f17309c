"""initial_schema

Revision ID: 3f9a1c2b7d10
Revises:
Create Date: 2026-10-18 11:00:00.000000+00:00

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f9a1c2b7d10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ID = sa.String(length=36)
NOT_DELETED = sa.text("status <> 'DELETED'")
SCOPED_TABLES = ("tenants", "organizations", "departments", "users", "notification_templates")


def scope_columns() -> list[sa.Column]:
    """Columns shared by every scoped entity table."""
    return [
        sa.Column("id", ID, nullable=False, comment="Entity id (UUIDv7)"),
        sa.Column("tenant_id", ID, nullable=False, comment="Owning tenant"),
        sa.Column("organization_id", ID, nullable=True, comment="Owning organization"),
        sa.Column(
            "department_ids",
            postgresql.ARRAY(ID),
            nullable=False,
            comment="Owning departments",
        ),
        sa.Column("owner_user_id", ID, nullable=True, comment="Owning user"),
        sa.Column(
            "isolation_level",
            sa.String(length=20),
            nullable=False,
            comment="PLATFORM, TENANT, ORGANIZATION, DEPARTMENT or USER",
        ),
        sa.Column(
            "privacy_level",
            sa.String(length=20),
            nullable=False,
            comment="PROTECTED, SHARED or CONFIDENTIAL",
        ),
        sa.Column("status", sa.String(length=20), nullable=False, comment="Lifecycle status"),
        sa.Column(
            "version",
            sa.Integer(),
            nullable=False,
            comment="Number of applied events (compare-and-swap token)",
        ),
        sa.Column("created_by", sa.String(length=255), nullable=False),
        sa.Column("updated_by", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def create_scope_indexes(table: str) -> None:
    for column in ("tenant_id", "organization_id", "status"):
        op.create_index(op.f(f"ix_{table}_{column}"), table, [column], unique=False)


def create_natural_key_index(table: str, name: str, columns: list, *, tenant_scoped: bool = True) -> None:
    op.create_index(
        f"uq_{table}_{name}",
        table,
        (["tenant_id"] if tenant_scoped else []) + columns,
        unique=True,
        postgresql_where=NOT_DELETED,
    )


def upgrade() -> None:
    """Create entity, user dependent and outbox tables."""
    op.create_table(
        "tenants",
        *scope_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column(
            "domain",
            sa.String(length=255),
            nullable=False,
            comment="Primary DNS domain (compared case-insensitively)",
        ),
        sa.Column("tenant_type", sa.String(length=20), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("max_users", sa.Integer(), nullable=False),
        sa.Column("max_organizations", sa.Integer(), nullable=False),
        sa.Column("max_storage_gb", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        comment="Tenant snapshots",
    )
    create_natural_key_index("tenants", "name", ["name"], tenant_scoped=False)
    create_natural_key_index("tenants", "code", ["code"], tenant_scoped=False)
    create_natural_key_index(
        "tenants", "domain", [sa.text("lower(domain)")], tenant_scoped=False
    )

    op.create_table(
        "organizations",
        *scope_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("organization_type", sa.String(length=20), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        comment="Organization snapshots",
    )
    create_natural_key_index("organizations", "name", ["name"])
    create_natural_key_index("organizations", "code", ["code"])

    op.create_table(
        "departments",
        *scope_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("department_type", sa.String(length=20), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "parent_department_id",
            ID,
            nullable=True,
            comment="Parent department (same organization); NULL for roots",
        ),
        sa.Column("manager_id", ID, nullable=True),
        sa.Column("level", sa.Integer(), nullable=False, comment="Depth in the hierarchy; roots are 1"),
        sa.Column(
            "path",
            sa.Text(),
            nullable=False,
            comment="Slash-separated ancestor ids ending with this id",
        ),
        sa.PrimaryKeyConstraint("id"),
        comment="Department snapshots",
    )
    op.create_index(
        op.f("ix_departments_parent_department_id"),
        "departments",
        ["parent_department_id"],
        unique=False,
    )
    create_natural_key_index("departments", "name", ["name"])
    create_natural_key_index("departments", "code", ["code"])

    op.create_table(
        "users",
        *scope_columns(),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=100), nullable=False),
        sa.Column("user_type", sa.String(length=20), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        comment="User snapshots",
    )
    create_natural_key_index("users", "username", ["username"])
    create_natural_key_index("users", "email", [sa.text("lower(email)")])

    op.create_table(
        "notification_templates",
        *scope_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("channel", sa.String(length=20), nullable=False),
        sa.Column("subject", sa.String(length=200), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "variables",
            postgresql.ARRAY(sa.String(length=100)),
            nullable=False,
            comment="Declared placeholder names",
        ),
        sa.Column("language", sa.String(length=10), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        comment="Notification template snapshots",
    )
    create_natural_key_index("notification_templates", "name", ["name"])

    for table in SCOPED_TABLES:
        create_scope_indexes(table)

    op.create_table(
        "user_profiles",
        sa.Column("user_id", ID, nullable=False),
        sa.Column("tenant_id", ID, nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=100), nullable=True),
        sa.Column("avatar_url", sa.String(length=500), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("locale", sa.String(length=20), nullable=True),
        sa.Column("timezone", sa.String(length=50), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("user_id"),
    )
    op.create_index(
        op.f("ix_user_profiles_tenant_id"), "user_profiles", ["tenant_id"], unique=False
    )

    op.create_table(
        "user_relationships",
        sa.Column("id", ID, nullable=False),
        sa.Column("user_id", ID, nullable=False, comment="Owning user"),
        sa.Column("tenant_id", ID, nullable=False),
        sa.Column("target_id", ID, nullable=False),
        sa.Column(
            "target_type",
            sa.String(length=20),
            nullable=False,
            comment="TENANT, ORGANIZATION, DEPARTMENT or USER",
        ),
        sa.Column("relationship_type", sa.String(length=20), nullable=False),
        sa.Column("created_by", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_user_relationships_user_id"), "user_relationships", ["user_id"], unique=False
    )

    op.create_table(
        "outbox_events",
        sa.Column(
            "sequence",
            sa.BigInteger(),
            sa.Identity(always=True),
            nullable=False,
            comment="Append position",
        ),
        sa.Column("event_id", sa.Uuid(), nullable=False),
        sa.Column("aggregate_id", ID, nullable=False),
        sa.Column("aggregate_type", sa.String(length=50), nullable=False),
        sa.Column("event_type", sa.String(length=100), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("occurred_on", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "payload",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            comment="Wire envelope {eventId, eventType, aggregateId, ...}",
        ),
        sa.Column(
            "status",
            sa.String(length=20),
            nullable=False,
            comment="pending, dispatched or dead",
        ),
        sa.Column("attempts", sa.Integer(), nullable=False),
        sa.Column(
            "next_attempt_at",
            sa.DateTime(timezone=True),
            nullable=True,
            comment="Earliest redelivery time after a failure",
        ),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("dispatched_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("sequence"),
        sa.UniqueConstraint("event_id"),
        comment="Transactional outbox of domain events",
    )
    op.create_index(
        "uq_outbox_events_aggregate_version",
        "outbox_events",
        ["aggregate_id", "version"],
        unique=True,
    )
    op.create_index(
        "ix_outbox_events_pending",
        "outbox_events",
        ["sequence"],
        unique=False,
        postgresql_where=sa.text("status = 'pending'"),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("ix_outbox_events_pending", table_name="outbox_events")
    op.drop_index("uq_outbox_events_aggregate_version", table_name="outbox_events")
    op.drop_table("outbox_events")

    op.drop_index(op.f("ix_user_relationships_user_id"), table_name="user_relationships")
    op.drop_table("user_relationships")
    op.drop_index(op.f("ix_user_profiles_tenant_id"), table_name="user_profiles")
    op.drop_table("user_profiles")

    # Dropping a table drops its indexes
    for table in reversed(SCOPED_TABLES):
        op.drop_table(table)
