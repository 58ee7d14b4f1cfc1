"""Create organization, identity, role, grant and module-gate tables.

Revision ID: 001_authz
Revises: None
Create Date: 2026-10-19

Rollback: reverse-drop every table created below
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "001_authz"
down_revision = None
branch_labels = None
depends_on = None

_UUID = postgresql.UUID(as_uuid=True)
_NOW = sa.text("now()")
_GEN_UUID = sa.text("gen_random_uuid()")
_TRUE = sa.text("true")
_FALSE = sa.text("false")


def _id() -> sa.Column:
    return sa.Column("id", _UUID, primary_key=True, server_default=_GEN_UUID)


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=False, server_default=_NOW)


def _fk(name: str, target: str, *, ondelete: str = "CASCADE", nullable: bool = False) -> sa.Column:
    return sa.Column(name, _UUID, sa.ForeignKey(target, ondelete=ondelete), nullable=nullable)


def upgrade() -> None:
    # --- organizations ---
    op.create_table(
        "organizations",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(128), nullable=False, unique=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=_TRUE),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_organizations_slug", "organizations", ["slug"], unique=True)

    # --- users ---
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("display_name", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=_TRUE),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # --- org_members ---
    op.create_table(
        "org_members",
        _id(),
        _fk("org_id", "organizations.id"),
        _fk("user_id", "users.id"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=_TRUE),
        _timestamp("created_at"),
        sa.UniqueConstraint("org_id", "user_id", name="uq_org_members_org_user"),
    )
    op.create_index("ix_org_members_user_id", "org_members", ["user_id"])

    # --- roles (tenant: org_id set; platform: org_id NULL) ---
    op.create_table(
        "roles",
        _id(),
        _fk("org_id", "organizations.id", nullable=True),
        sa.Column("code", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("is_platform", sa.Boolean(), nullable=False, server_default=_FALSE),
        sa.Column("is_root", sa.Boolean(), nullable=False, server_default=_FALSE),
        _timestamp("created_at"),
        sa.UniqueConstraint("org_id", "code", name="uq_roles_org_code"),
        sa.CheckConstraint(
            "(is_platform AND org_id IS NULL) OR (NOT is_platform AND org_id IS NOT NULL)",
            name="ck_roles_platform_org",
        ),
    )

    # --- role_permissions (grants) ---
    op.create_table(
        "role_permissions",
        _id(),
        _fk("role_id", "roles.id"),
        sa.Column("permission_key", sa.String(128), nullable=False),
        sa.Column("scope", sa.String(16), nullable=False, server_default="org"),
        sa.UniqueConstraint("role_id", "permission_key", name="uq_role_permissions_role_key"),
        sa.CheckConstraint(
            "scope IN ('own', 'org', 'assigned', 'any')",
            name="ck_role_permissions_scope",
        ),
    )

    # --- tenant_user_roles ---
    op.create_table(
        "tenant_user_roles",
        _id(),
        _fk("org_id", "organizations.id"),
        _fk("user_id", "users.id"),
        _fk("role_id", "roles.id", ondelete="RESTRICT"),
        _timestamp("updated_at"),
        sa.UniqueConstraint("org_id", "user_id", name="uq_tenant_user_roles_org_user"),
    )

    # --- platform_user_roles ---
    op.create_table(
        "platform_user_roles",
        _id(),
        sa.Column(
            "user_id",
            _UUID,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        _fk("role_id", "roles.id", ondelete="RESTRICT"),
        sa.Column("access_level", sa.String(16), nullable=False, server_default="LIMITED"),
        sa.CheckConstraint(
            "access_level IN ('GLOBAL', 'LIMITED')",
            name="ck_platform_user_roles_access_level",
        ),
    )

    # --- platform_user_org_access (LIMITED allow-list) ---
    op.create_table(
        "platform_user_org_access",
        _id(),
        _fk("user_id", "users.id"),
        _fk("org_id", "organizations.id"),
        sa.UniqueConstraint("user_id", "org_id", name="uq_platform_user_org_access"),
    )

    # --- org_modules (module gate) ---
    op.create_table(
        "org_modules",
        _id(),
        _fk("org_id", "organizations.id"),
        sa.Column("module_key", sa.String(64), nullable=False),
        sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default=_TRUE),
        sa.UniqueConstraint("org_id", "module_key", name="uq_org_modules_org_key"),
    )


def downgrade() -> None:
    op.drop_table("org_modules")
    op.drop_table("platform_user_org_access")
    op.drop_table("platform_user_roles")
    op.drop_table("tenant_user_roles")
    op.drop_table("role_permissions")
    op.drop_table("roles")
    op.drop_index("ix_org_members_user_id", table_name="org_members")
    op.drop_table("org_members")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_organizations_slug", table_name="organizations")
    op.drop_table("organizations")
