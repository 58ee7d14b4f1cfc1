"""Port schema assertion tests.

Verifies Port interfaces maintain expected method signatures and that
both the PostgreSQL adapters and the in-memory fakes implement them.
These tests catch accidental breaking changes to Port contracts.
"""

from __future__ import annotations

import inspect

import pytest

from src.infra.stores import (
    PgCredentialStore,
    PgGrantStore,
    PgMembershipStore,
    PgModuleGate,
    PgOrgDirectory,
    PgRoleAssignmentStore,
    PgRoleStore,
)
from src.ports import (
    CredentialStore,
    GrantStore,
    MembershipStore,
    ModuleGate,
    OrgDirectory,
    RoleAssignmentStore,
    RoleStore,
)
from tests.fakes.stores import (
    FakeCredentialStore,
    FakeGrantStore,
    FakeMembershipStore,
    FakeModuleGate,
    FakeOrgDirectory,
    FakeRoleAssignmentStore,
    FakeRoleStore,
)

_CONTRACTS: dict[type, dict[str, list[str]]] = {
    MembershipStore: {
        "is_member": ["identity_id", "org_id"],
        "get_platform_org_access": ["identity_id"],
        "list_memberships": ["identity_id"],
    },
    RoleStore: {
        "get_tenant_role": ["identity_id", "org_id"],
        "get_platform_role": ["identity_id"],
    },
    GrantStore: {"get_grants": ["role_id"]},
    OrgDirectory: {"list_organizations": ["org_ids"]},
    ModuleGate: {
        "is_module_enabled": ["org_id", "module_key"],
        "list_enabled_modules": ["org_id"],
    },
    CredentialStore: {"verify_credentials": ["email", "password"]},
    RoleAssignmentStore: {
        "get_org_role": ["org_id", "role_id"],
        "assign_tenant_role": ["org_id", "identity_id", "role_id"],
    },
}

_IMPLEMENTATIONS = [
    (MembershipStore, PgMembershipStore, FakeMembershipStore),
    (RoleStore, PgRoleStore, FakeRoleStore),
    (GrantStore, PgGrantStore, FakeGrantStore),
    (OrgDirectory, PgOrgDirectory, FakeOrgDirectory),
    (ModuleGate, PgModuleGate, FakeModuleGate),
    (CredentialStore, PgCredentialStore, FakeCredentialStore),
    (RoleAssignmentStore, PgRoleAssignmentStore, FakeRoleAssignmentStore),
]


@pytest.mark.unit
class TestPortSignatures:
    @pytest.mark.parametrize("port", list(_CONTRACTS), ids=lambda p: p.__name__)
    def test_methods_and_parameters(self, port: type) -> None:
        for method_name, expected in _CONTRACTS[port].items():
            method = getattr(port, method_name)
            assert inspect.iscoroutinefunction(method), method_name
            params = list(inspect.signature(method).parameters)
            assert params[1:] == expected, method_name

    @pytest.mark.parametrize("port", list(_CONTRACTS), ids=lambda p: p.__name__)
    def test_is_abstract(self, port: type) -> None:
        assert inspect.isabstract(port)
        assert set(port.__abstractmethods__) == set(_CONTRACTS[port])

    def test_org_directory_filter_is_optional(self) -> None:
        sig = inspect.signature(OrgDirectory.list_organizations)
        assert sig.parameters["org_ids"].default is None


@pytest.mark.unit
class TestImplementations:
    @pytest.mark.parametrize(
        ("port", "adapter", "fake"),
        _IMPLEMENTATIONS,
        ids=lambda c: c.__name__,
    )
    def test_adapters_and_fakes_implement_port(
        self, port: type, adapter: type, fake: type
    ) -> None:
        assert issubclass(adapter, port)
        assert issubclass(fake, port)
        assert not inspect.isabstract(adapter)
        assert not inspect.isabstract(fake)

    @pytest.mark.parametrize(
        ("port", "adapter", "fake"),
        _IMPLEMENTATIONS,
        ids=lambda c: c.__name__,
    )
    def test_fault_labels_match(self, port: type, adapter: type, fake: type) -> None:
        assert adapter.port_name == fake.port_name
