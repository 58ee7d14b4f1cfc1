"""Unified error hierarchy for OrgGuard.

All domain errors inherit from OrgGuardError. "Not authorized" inside the
decision engine is a Decision value, not an exception; the errors below are
raised by the session flow, the store adapters and the HTTP boundary.
"""

from __future__ import annotations

from typing import Any


class OrgGuardError(Exception):
    """Base error for all OrgGuard exceptions."""

    def __init__(self, message: str, code: str = "ORGGUARD_ERROR") -> None:
        self.code = code
        super().__init__(message)


# -- Port errors (raised by Port implementations) --


class PortUnavailableError(OrgGuardError):
    """A Port dependency is temporarily unavailable."""

    def __init__(self, port_name: str, message: str = "") -> None:
        self.port_name = port_name
        super().__init__(
            message or f"Port {port_name} is unavailable",
            code="PORT_UNAVAILABLE",
        )


class ServiceUnavailableError(OrgGuardError):
    """A backing service failed; callers must treat the request as denied."""

    def __init__(self, service: str, message: str = "") -> None:
        self.service = service
        super().__init__(
            message or f"Service {service} is unavailable",
            code="SERVICE_UNAVAILABLE",
        )


# -- Auth / Org errors --


class AuthenticationError(OrgGuardError):
    """Authentication failed (invalid token, expired, bad credentials)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, code="AUTH_FAILED")


class AuthorizationError(OrgGuardError):
    """Authorization denied at the HTTP boundary.

    Carries the deny code and structured details of the Decision that
    caused it so the response can report the precise reason.
    """

    def __init__(
        self,
        required_permission: str = "",
        *,
        decision_code: str = "AUTH_DENIED",
        reason: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        msg = reason or (
            f"Permission denied: {required_permission}"
            if required_permission
            else "Permission denied"
        )
        self.required_permission = required_permission
        self.details = details or {}
        super().__init__(msg, code=decision_code)


class OnboardingRequiredError(OrgGuardError):
    """Identity has neither an org membership nor a platform role."""

    def __init__(self, identity_id: str = "") -> None:
        self.identity_id = identity_id
        super().__init__(
            "Onboarding required: identity belongs to no organization",
            code="ONBOARDING_REQUIRED",
        )


class OrgAccessDeniedError(OrgGuardError):
    """Identity may not bind its session to the requested organization."""

    def __init__(self, org_id: str, reason: str = "") -> None:
        self.org_id = org_id
        super().__init__(
            reason or f"Access to organization {org_id} denied",
            code="ORG_ACCESS_DENIED",
        )


class HierarchyViolationError(OrgGuardError):
    """Role mutation targets a role equal to or stronger than the actor's."""

    def __init__(self, acting_level: int, target_level: int) -> None:
        self.acting_level = acting_level
        self.target_level = target_level
        super().__init__(
            f"Cannot manage role level {target_level} from level {acting_level}",
            code="HIERARCHY_VIOLATION",
        )


# -- Domain errors --


class NotFoundError(OrgGuardError):
    """Requested resource not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            code="NOT_FOUND",
        )


class ValidationError(OrgGuardError):
    """Input validation failed."""

    def __init__(self, message: str, field: str = "") -> None:
        self.field = field
        super().__init__(message, code="VALIDATION")


__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "HierarchyViolationError",
    "NotFoundError",
    "OnboardingRequiredError",
    "OrgAccessDeniedError",
    "OrgGuardError",
    "PortUnavailableError",
    "ServiceUnavailableError",
    "ValidationError",
]
