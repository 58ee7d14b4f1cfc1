"""Decision value and deny-code taxonomy.

"Not authorized" is never an exception inside the engine: every outcome is
a Decision. Allow decisions record whether they came from the root bypass
or from an ordinary grant match so audit consumers can tell them apart.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, unique
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from uuid import UUID

    from src.shared.types import Scope


@unique
class DecisionCode(str, Enum):
    """Classified outcome of an authorization check."""

    OK = "OK"

    # Context
    NO_TENANT_CONTEXT = "NO_TENANT_CONTEXT"
    NOT_TENANT_MEMBER = "NOT_TENANT_MEMBER"
    PLATFORM_TENANT_ACCESS_DENIED = "PLATFORM_TENANT_ACCESS_DENIED"

    # Permission
    MISSING_PERMISSION = "MISSING_PERMISSION"
    SCOPE_DENIED = "SCOPE_DENIED"

    # Module gating
    MODULE_DISABLED = "MODULE_DISABLED"

    # Hierarchy (role mutations)
    HIERARCHY_VIOLATION = "HIERARCHY_VIOLATION"


@unique
class DecisionVia(str, Enum):
    """Which rule produced an allow."""

    ROOT = "root"
    GRANT = "grant"
    CONTEXT = "context"


@dataclass(frozen=True)
class Decision:
    """Result of an authorization check."""

    allowed: bool
    code: DecisionCode
    reason: str = ""
    details: dict[str, Any] = field(default_factory=dict)
    via: DecisionVia | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for HTTP responses and structured logs."""
        return {
            "allowed": self.allowed,
            "code": self.code.value,
            "reason": self.reason,
            "details": dict(self.details),
            "via": self.via.value if self.via else None,
        }


class Decisions:
    """Factory for the canonical Decision values."""

    @staticmethod
    def allow(via: DecisionVia = DecisionVia.GRANT) -> Decision:
        return Decision(allowed=True, code=DecisionCode.OK, via=via)

    @staticmethod
    def allow_root() -> Decision:
        return Decision(
            allowed=True,
            code=DecisionCode.OK,
            reason="Root bypass",
            via=DecisionVia.ROOT,
        )

    @staticmethod
    def deny(code: DecisionCode, reason: str, **details: Any) -> Decision:
        return Decision(allowed=False, code=code, reason=reason, details=details)

    @staticmethod
    def for_permission(decision: Decision, permission_key: str) -> Decision:
        """Copy of ``decision`` whose details name the checked permission.

        The copy owns a fresh details dict, so per-key batch results never
        share state.
        """
        return replace(
            decision,
            details={**decision.details, "required_permission": permission_key},
        )

    @classmethod
    def no_tenant_context(cls) -> Decision:
        return cls.deny(
            DecisionCode.NO_TENANT_CONTEXT,
            "No organization selected for this session",
        )

    @classmethod
    def not_tenant_member(cls, org_id: UUID) -> Decision:
        return cls.deny(
            DecisionCode.NOT_TENANT_MEMBER,
            f"Not a member of organization {org_id}",
            org_id=str(org_id),
        )

    @classmethod
    def platform_access_denied(cls, org_id: UUID) -> Decision:
        return cls.deny(
            DecisionCode.PLATFORM_TENANT_ACCESS_DENIED,
            f"Platform access to organization {org_id} not granted",
            org_id=str(org_id),
        )

    @classmethod
    def missing_permission(cls, permission_key: str) -> Decision:
        return cls.deny(
            DecisionCode.MISSING_PERMISSION,
            f"Missing permission {permission_key}",
            required_permission=permission_key,
        )

    @classmethod
    def scope_denied(cls, permission_key: str, required_scope: Scope) -> Decision:
        return cls.deny(
            DecisionCode.SCOPE_DENIED,
            f"Scope '{required_scope.value}' of {permission_key} not satisfied",
            required_permission=permission_key,
            required_scope=required_scope.value,
        )

    @classmethod
    def module_disabled(cls, module_key: str, org_id: UUID) -> Decision:
        return cls.deny(
            DecisionCode.MODULE_DISABLED,
            f"Module {module_key} is disabled for organization {org_id}",
            module=module_key,
            org_id=str(org_id),
        )

    @classmethod
    def hierarchy_violation(cls, acting_level: int, target_level: int) -> Decision:
        return cls.deny(
            DecisionCode.HIERARCHY_VIOLATION,
            f"Role level {target_level} is not below acting level {acting_level}",
            acting_level=acting_level,
            target_level=target_level,
        )
