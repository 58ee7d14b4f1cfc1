"""Scope evaluation tests."""

from __future__ import annotations

from uuid import uuid4

import pytest

from src.authz.scope import evaluate
from src.shared.types import AuthContext, AuthMode, ResourceContext, Scope


@pytest.fixture
def ctx() -> AuthContext:
    return AuthContext(identity_id=uuid4(), mode=AuthMode.TENANT, current_org_id=uuid4())


@pytest.mark.unit
class TestEvaluate:
    def test_any_and_org_always_pass(self, ctx: AuthContext) -> None:
        assert evaluate(Scope.ANY, ctx, ResourceContext())
        assert evaluate(Scope.ORG, ctx, ResourceContext(resource_owner_id=uuid4()))

    def test_own_matches_owner(self, ctx: AuthContext) -> None:
        assert evaluate(Scope.OWN, ctx, ResourceContext(resource_owner_id=ctx.identity_id))

    def test_own_rejects_other_owner(self, ctx: AuthContext) -> None:
        assert not evaluate(Scope.OWN, ctx, ResourceContext(resource_owner_id=uuid4()))

    def test_own_rejects_missing_owner(self, ctx: AuthContext) -> None:
        assert not evaluate(Scope.OWN, ctx, ResourceContext())

    def test_assigned(self, ctx: AuthContext) -> None:
        assigned = frozenset({ctx.identity_id})
        assert evaluate(Scope.ASSIGNED, ctx, ResourceContext(assigned_identity_ids=assigned))
        assert not evaluate(Scope.ASSIGNED, ctx, ResourceContext())

    def test_accepts_raw_string(self, ctx: AuthContext) -> None:
        assert evaluate("any", ctx, ResourceContext())

    def test_unknown_scope_fails_closed(self, ctx: AuthContext) -> None:
        assert not evaluate("tenant", ctx, ResourceContext())
