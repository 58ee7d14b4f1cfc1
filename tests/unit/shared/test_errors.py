"""Tests for unified error hierarchy."""

from __future__ import annotations

import pytest

from src.shared.errors import (
    AuthenticationError,
    AuthorizationError,
    HierarchyViolationError,
    NotFoundError,
    OnboardingRequiredError,
    OrgAccessDeniedError,
    OrgGuardError,
    PortUnavailableError,
    ServiceUnavailableError,
    ValidationError,
)


class TestOrgGuardError:
    """Test suite for OrgGuardError base class."""

    def test_instantiation(self) -> None:
        error = OrgGuardError("Test error")
        assert str(error) == "Test error"
        assert error.code == "ORGGUARD_ERROR"

    def test_custom_code(self) -> None:
        error = OrgGuardError("Custom error", code="CUSTOM_CODE")
        assert error.code == "CUSTOM_CODE"

    @pytest.mark.parametrize(
        "error",
        [
            PortUnavailableError("role_store"),
            ServiceUnavailableError("authorization"),
            AuthenticationError(),
            AuthorizationError("event.read"),
            OnboardingRequiredError(),
            OrgAccessDeniedError("org-1"),
            HierarchyViolationError(2, 1),
            NotFoundError("role", "r-1"),
            ValidationError("bad"),
        ],
    )
    def test_all_inherit_from_base(self, error: OrgGuardError) -> None:
        assert isinstance(error, OrgGuardError)


class TestPortUnavailableError:
    def test_default_message(self) -> None:
        error = PortUnavailableError(port_name="grant_store")
        assert str(error) == "Port grant_store is unavailable"
        assert error.code == "PORT_UNAVAILABLE"
        assert error.port_name == "grant_store"

    def test_custom_message(self) -> None:
        error = PortUnavailableError("grant_store", "get_grants failed")
        assert str(error) == "get_grants failed"


class TestServiceUnavailableError:
    def test_default_message(self) -> None:
        error = ServiceUnavailableError("authorization")
        assert str(error) == "Service authorization is unavailable"
        assert error.code == "SERVICE_UNAVAILABLE"
        assert error.service == "authorization"


class TestAuthenticationError:
    def test_default_message(self) -> None:
        error = AuthenticationError()
        assert str(error) == "Authentication failed"
        assert error.code == "AUTH_FAILED"


class TestAuthorizationError:
    def test_message_from_permission(self) -> None:
        error = AuthorizationError("event.update")
        assert str(error) == "Permission denied: event.update"
        assert error.code == "AUTH_DENIED"
        assert error.details == {}

    def test_without_permission(self) -> None:
        assert str(AuthorizationError()) == "Permission denied"

    def test_carries_decision(self) -> None:
        error = AuthorizationError(
            "event.update",
            decision_code="SCOPE_DENIED",
            reason="Scope 'own' does not cover this resource",
            details={"granted_scope": "own"},
        )
        assert error.code == "SCOPE_DENIED"
        assert str(error) == "Scope 'own' does not cover this resource"
        assert error.required_permission == "event.update"
        assert error.details == {"granted_scope": "own"}


class TestSessionErrors:
    def test_onboarding_required(self) -> None:
        error = OnboardingRequiredError("u-1")
        assert error.code == "ONBOARDING_REQUIRED"
        assert error.identity_id == "u-1"

    def test_org_access_denied_default(self) -> None:
        error = OrgAccessDeniedError("org-1")
        assert error.code == "ORG_ACCESS_DENIED"
        assert "org-1" in str(error)

    def test_org_access_denied_reason(self) -> None:
        error = OrgAccessDeniedError("org-1", "Not a member of this organization")
        assert str(error) == "Not a member of this organization"
        assert error.org_id == "org-1"


class TestHierarchyViolationError:
    def test_levels(self) -> None:
        error = HierarchyViolationError(acting_level=2, target_level=1)
        assert error.code == "HIERARCHY_VIOLATION"
        assert error.acting_level == 2
        assert error.target_level == 1
        assert str(error) == "Cannot manage role level 1 from level 2"


class TestDomainErrors:
    def test_not_found(self) -> None:
        error = NotFoundError("role", "r-1")
        assert str(error) == "role not found: r-1"
        assert error.code == "NOT_FOUND"
        assert error.resource_type == "role"

    def test_validation(self) -> None:
        error = ValidationError("bad scope", field="scope")
        assert error.code == "VALIDATION"
        assert error.field == "scope"
