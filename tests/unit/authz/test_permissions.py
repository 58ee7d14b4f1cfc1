"""Permission registry tests."""

from __future__ import annotations

import pytest

from src.authz.permissions import (
    MODULES,
    PERMISSIONS,
    Action,
    Resource,
    get_permission,
    get_permissions_by_module,
    is_valid_permission_key,
    module_for,
    permission_key,
)
from src.shared.types import Scope


@pytest.mark.unit
class TestRegistry:
    def test_size(self) -> None:
        assert len(PERMISSIONS) == 35

    def test_keys_match_definitions(self) -> None:
        for key, definition in PERMISSIONS.items():
            assert key == definition.key
            assert definition.module in MODULES

    def test_read_only(self) -> None:
        with pytest.raises(TypeError):
            PERMISSIONS["event.fly"] = PERMISSIONS["event.read"]  # type: ignore[index]

    def test_permission_key(self) -> None:
        assert permission_key(Resource.EVENT, Action.UPDATE) == "event.update"

    def test_lookup(self) -> None:
        definition = get_permission("event.update")
        assert definition is not None
        assert definition.module == "events"
        assert get_permission("event.fly") is None

    def test_platform_permissions_default_to_any(self) -> None:
        for definition in get_permissions_by_module("platform"):
            assert definition.default_scope is Scope.ANY

    def test_validation(self) -> None:
        assert is_valid_permission_key("user.manage")
        assert not is_valid_permission_key("user.*")
        assert not is_valid_permission_key("")

    def test_module_for(self) -> None:
        assert module_for("badge.print") == "badges"
        assert module_for("nope.nope") is None
