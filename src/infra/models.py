"""SQLAlchemy ORM models for OrgGuard.

Maps to migration DDL in migrations/versions/001_create_authz_tables.py:
  organizations, users, org_members           -> Organization, User, OrgMember
  roles, role_permissions                     -> Role, RolePermission
  tenant_user_roles                           -> TenantUserRole
  platform_user_roles, platform_user_org_access -> PlatformUserRole, PlatformUserOrgAccess
  org_modules                                 -> OrgModule

Tenant roles carry an org_id; platform roles have org_id NULL and
is_platform=true. These models live in the Infrastructure layer and back
the store adapters in src/infra/stores.py. The authz and session layers
MUST NOT import this module directly.
"""

from __future__ import annotations

import uuid as _uuid  # noqa: TC003 -- SQLAlchemy resolves Mapped[] annotations at runtime
from datetime import datetime  # noqa: TC003

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

_UUID = postgresql.UUID(as_uuid=True)
_NOW = sa.text("now()")
_GEN_UUID = sa.text("gen_random_uuid()")
_TRUE = sa.text("true")
_FALSE = sa.text("false")


class Base(DeclarativeBase):
    """Declarative base for all OrgGuard ORM models."""


class Organization(Base):
    """Tenant organization."""

    __tablename__ = "organizations"

    id: Mapped[_uuid.UUID] = mapped_column(_UUID, primary_key=True, server_default=_GEN_UUID)
    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    slug: Mapped[str] = mapped_column(sa.String(128), nullable=False, unique=True)
    is_active: Mapped[bool] = mapped_column(sa.Boolean(), nullable=False, server_default=_TRUE)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=_NOW,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=_NOW,
    )

    __table_args__ = (sa.Index("ix_organizations_slug", "slug", unique=True),)


class User(Base):
    """Identity (cross-org)."""

    __tablename__ = "users"

    id: Mapped[_uuid.UUID] = mapped_column(_UUID, primary_key=True, server_default=_GEN_UUID)
    email: Mapped[str] = mapped_column(sa.String(320), nullable=False, unique=True)
    password_hash: Mapped[str | None] = mapped_column(sa.String(255), nullable=True)
    display_name: Mapped[str | None] = mapped_column(sa.String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(sa.Boolean(), nullable=False, server_default=_TRUE)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=_NOW,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=_NOW,
    )

    __table_args__ = (sa.Index("ix_users_email", "email", unique=True),)


class OrgMember(Base):
    """Membership: an identity belongs to an organization."""

    __tablename__ = "org_members"

    id: Mapped[_uuid.UUID] = mapped_column(_UUID, primary_key=True, server_default=_GEN_UUID)
    org_id: Mapped[_uuid.UUID] = mapped_column(
        _UUID,
        sa.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[_uuid.UUID] = mapped_column(
        _UUID,
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(sa.Boolean(), nullable=False, server_default=_TRUE)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=_NOW,
    )

    __table_args__ = (
        sa.UniqueConstraint("org_id", "user_id", name="uq_org_members_org_user"),
        sa.Index("ix_org_members_user_id", "user_id"),
    )


class Role(Base):
    """Tenant role (org_id set) or platform role (org_id NULL, is_platform)."""

    __tablename__ = "roles"

    id: Mapped[_uuid.UUID] = mapped_column(_UUID, primary_key=True, server_default=_GEN_UUID)
    org_id: Mapped[_uuid.UUID | None] = mapped_column(
        _UUID,
        sa.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=True,
    )
    code: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    level: Mapped[int] = mapped_column(sa.Integer(), nullable=False)
    is_platform: Mapped[bool] = mapped_column(
        sa.Boolean(),
        nullable=False,
        server_default=_FALSE,
    )
    is_root: Mapped[bool] = mapped_column(sa.Boolean(), nullable=False, server_default=_FALSE)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=_NOW,
    )

    __table_args__ = (
        sa.UniqueConstraint("org_id", "code", name="uq_roles_org_code"),
        sa.CheckConstraint(
            "(is_platform AND org_id IS NULL) OR (NOT is_platform AND org_id IS NOT NULL)",
            name="ck_roles_platform_org",
        ),
    )


class RolePermission(Base):
    """Grant: a permission key with its scope, attached to a role."""

    __tablename__ = "role_permissions"

    id: Mapped[_uuid.UUID] = mapped_column(_UUID, primary_key=True, server_default=_GEN_UUID)
    role_id: Mapped[_uuid.UUID] = mapped_column(
        _UUID,
        sa.ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
    )
    permission_key: Mapped[str] = mapped_column(sa.String(128), nullable=False)
    scope: Mapped[str] = mapped_column(sa.String(16), nullable=False, server_default="org")

    __table_args__ = (
        sa.UniqueConstraint("role_id", "permission_key", name="uq_role_permissions_role_key"),
        sa.CheckConstraint(
            "scope IN ('own', 'org', 'assigned', 'any')",
            name="ck_role_permissions_scope",
        ),
    )


class TenantUserRole(Base):
    """The single tenant role an identity holds in an organization."""

    __tablename__ = "tenant_user_roles"

    id: Mapped[_uuid.UUID] = mapped_column(_UUID, primary_key=True, server_default=_GEN_UUID)
    org_id: Mapped[_uuid.UUID] = mapped_column(
        _UUID,
        sa.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[_uuid.UUID] = mapped_column(
        _UUID,
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    role_id: Mapped[_uuid.UUID] = mapped_column(
        _UUID,
        sa.ForeignKey("roles.id", ondelete="RESTRICT"),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=_NOW,
    )

    __table_args__ = (
        sa.UniqueConstraint("org_id", "user_id", name="uq_tenant_user_roles_org_user"),
    )


class PlatformUserRole(Base):
    """At most one platform role per identity."""

    __tablename__ = "platform_user_roles"

    id: Mapped[_uuid.UUID] = mapped_column(_UUID, primary_key=True, server_default=_GEN_UUID)
    user_id: Mapped[_uuid.UUID] = mapped_column(
        _UUID,
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    role_id: Mapped[_uuid.UUID] = mapped_column(
        _UUID,
        sa.ForeignKey("roles.id", ondelete="RESTRICT"),
        nullable=False,
    )
    access_level: Mapped[str] = mapped_column(
        sa.String(16),
        nullable=False,
        server_default="LIMITED",
    )

    __table_args__ = (
        sa.CheckConstraint(
            "access_level IN ('GLOBAL', 'LIMITED')",
            name="ck_platform_user_roles_access_level",
        ),
    )


class PlatformUserOrgAccess(Base):
    """Allow-list row: a LIMITED platform identity may reach this org."""

    __tablename__ = "platform_user_org_access"

    id: Mapped[_uuid.UUID] = mapped_column(_UUID, primary_key=True, server_default=_GEN_UUID)
    user_id: Mapped[_uuid.UUID] = mapped_column(
        _UUID,
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    org_id: Mapped[_uuid.UUID] = mapped_column(
        _UUID,
        sa.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        sa.UniqueConstraint("user_id", "org_id", name="uq_platform_user_org_access"),
    )


class OrgModule(Base):
    """Per-org module switch consulted by the module gate."""

    __tablename__ = "org_modules"

    id: Mapped[_uuid.UUID] = mapped_column(_UUID, primary_key=True, server_default=_GEN_UUID)
    org_id: Mapped[_uuid.UUID] = mapped_column(
        _UUID,
        sa.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )
    module_key: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    is_enabled: Mapped[bool] = mapped_column(sa.Boolean(), nullable=False, server_default=_TRUE)

    __table_args__ = (sa.UniqueConstraint("org_id", "module_key", name="uq_org_modules_org_key"),)
