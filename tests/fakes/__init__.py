"""Shared Fake adapters for testing without unittest.mock.

All Fake implementations follow the Port DI adapter pattern:
real Python classes with preset return values, no AsyncMock/MagicMock.
"""

from tests.fakes.session import (
    FakeAsyncSession,
    FakeOrmRow,
    FakeResult,
    FakeScalarsResult,
    FakeSessionFactory,
)
from tests.fakes.stores import (
    FakeAuthzData,
    FakeCredentialStore,
    FakeGrantStore,
    FakeMembershipStore,
    FakeModuleGate,
    FakeOrgDirectory,
    FakeRoleAssignmentStore,
    FakeRoleStore,
)

__all__ = [
    "FakeAsyncSession",
    "FakeAuthzData",
    "FakeCredentialStore",
    "FakeGrantStore",
    "FakeMembershipStore",
    "FakeModuleGate",
    "FakeOrgDirectory",
    "FakeOrmRow",
    "FakeResult",
    "FakeRoleAssignmentStore",
    "FakeRoleStore",
    "FakeScalarsResult",
    "FakeSessionFactory",
]
