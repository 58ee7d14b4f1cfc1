"""Tests for the development seed rows."""

from __future__ import annotations

import pytest

from scripts.seed_dev_user import build_seed_objects
from src.authz.permissions import PERMISSIONS
from src.infra.models import (
    Organization,
    OrgMember,
    Role,
    RolePermission,
    TenantUserRole,
    User,
)
from src.infra.stores import verify_password


def _only(objects: list[object], cls: type) -> object:
    matches = [o for o in objects if isinstance(o, cls)]
    assert len(matches) == 1
    return matches[0]


@pytest.mark.unit
class TestBuildSeedObjects:
    def test_admin_member_wiring(self) -> None:
        objects = build_seed_objects("dev@orgguard.dev", "devpass123")
        org = _only(objects, Organization)
        user = _only(objects, User)
        role = _only(objects, Role)
        member = _only(objects, OrgMember)
        assignment = _only(objects, TenantUserRole)

        assert role.org_id == org.id
        assert role.level == 1
        assert member.org_id == org.id
        assert member.user_id == user.id
        assert (assignment.org_id, assignment.user_id, assignment.role_id) == (
            org.id,
            user.id,
            role.id,
        )

    def test_password_is_hashed(self) -> None:
        user = _only(build_seed_objects("dev@orgguard.dev", "devpass123"), User)
        assert user.password_hash != "devpass123"
        assert verify_password("devpass123", user.password_hash)

    def test_grants_exclude_platform_permissions(self) -> None:
        objects = build_seed_objects("dev@orgguard.dev", "devpass123")
        keys = {o.permission_key for o in objects if isinstance(o, RolePermission)}
        assert "event.create" in keys
        assert "user.manage" in keys
        assert not any(key.startswith("platform.") for key in keys)
        assert len(keys) == len(PERMISSIONS) - 3
        assert {o.scope for o in objects if isinstance(o, RolePermission)} == {"org"}

    def test_parents_before_children(self) -> None:
        objects = build_seed_objects("dev@orgguard.dev", "devpass123")
        order = [type(o) for o in objects]
        assert order.index(Organization) < order.index(OrgMember)
        assert order.index(User) < order.index(OrgMember)
        assert order.index(Role) < order.index(RolePermission)
        assert order[-1] is TenantUserRole
