"""Seed the built-in platform roles.

ROOT (level 0, is_root) bypasses every check; its grants are irrelevant.
SUPPORT (level 10) reads across the organizations it is allowed to reach.

Revision ID: 002_platform_roles
Revises: 001_authz
Create Date: 2026-10-19

Rollback: delete the two seeded roles (grants cascade)
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "002_platform_roles"
down_revision = "001_authz"
branch_labels = None
depends_on = None

_SUPPORT_GRANTS = (
    ("platform.view_all_orgs", "any"),
    ("org.read", "any"),
    ("user.read", "any"),
    ("event.read", "any"),
    ("attendee.read", "any"),
    ("registration.read", "any"),
    ("analytics.view", "any"),
)


def upgrade() -> None:
    conn = op.get_bind()
    conn.execute(
        sa.text(
            "INSERT INTO roles (code, name, level, is_platform, is_root) VALUES "
            "('ROOT', 'Root', 0, true, true), "
            "('SUPPORT', 'Support', 10, true, false)"
        )
    )
    support_id = conn.execute(
        sa.text("SELECT id FROM roles WHERE code = 'SUPPORT' AND org_id IS NULL")
    ).scalar_one()
    for key, scope in _SUPPORT_GRANTS:
        conn.execute(
            sa.text(
                "INSERT INTO role_permissions (role_id, permission_key, scope) "
                "VALUES (:role_id, :key, :scope)"
            ),
            {"role_id": support_id, "key": key, "scope": scope},
        )


def downgrade() -> None:
    op.execute(
        "DELETE FROM roles WHERE org_id IS NULL AND code IN ('ROOT', 'SUPPORT')"
    )
