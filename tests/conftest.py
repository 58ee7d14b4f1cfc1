"""Root conftest - shared fixtures for all test layers.

Markers:
    @pytest.mark.unit        - No external deps
    @pytest.mark.smoke       - Fast subset
    @pytest.mark.integration - Full app over ASGI, fake stores
"""

from __future__ import annotations

import pytest

from src.authz.resolver import PermissionResolver
from src.authz.service import AuthorizationService
from tests.fakes.stores import (
    FakeAuthzData,
    FakeGrantStore,
    FakeMembershipStore,
    FakeModuleGate,
    FakeRoleStore,
)


@pytest.fixture
def authz_data() -> FakeAuthzData:
    return FakeAuthzData()


@pytest.fixture
def resolver(authz_data: FakeAuthzData) -> PermissionResolver:
    return PermissionResolver(
        role_store=FakeRoleStore(authz_data),
        grant_store=FakeGrantStore(authz_data),
    )


@pytest.fixture
def authz(authz_data: FakeAuthzData, resolver: PermissionResolver) -> AuthorizationService:
    return AuthorizationService(
        resolver=resolver,
        membership_store=FakeMembershipStore(authz_data),
        role_store=FakeRoleStore(authz_data),
        module_gate=FakeModuleGate(authz_data),
    )
