"""Role hierarchy: who may assign or mutate which role.

Canonical direction: a numerically LOWER level carries MORE authority
(level 1 administrator outranks level 2 manager). An actor may only
assign or mutate roles strictly weaker than its own, i.e. with a strictly
greater level number. Equal-or-stronger targets are always rejected,
whatever grants the actor holds; only root bypasses the comparison.

Used by the member role change route (src/gateway/api/rbac.py), which
checks both the role being assigned and the member's current role.
"""

from __future__ import annotations

from src.authz.decision import Decision, Decisions, DecisionVia
from src.shared.errors import HierarchyViolationError


def outranks(acting_level: int, target_level: int) -> bool:
    """Return True if ``acting_level`` is strictly stronger than ``target_level``."""
    return acting_level < target_level


def assert_lower_level(
    acting_level: int | None,
    target_level: int | None,
    *,
    is_root: bool = False,
) -> Decision:
    """Check that the target role is strictly weaker than the actor's role.

    A missing level on either side (no role, unknown role) fails closed.
    """
    if is_root:
        return Decisions.allow_root()
    if acting_level is None or target_level is None:
        return Decisions.hierarchy_violation(
            acting_level if acting_level is not None else -1,
            target_level if target_level is not None else -1,
        )
    if not outranks(acting_level, target_level):
        return Decisions.hierarchy_violation(acting_level, target_level)
    return Decisions.allow(via=DecisionVia.GRANT)


def enforce_lower_level(
    acting_level: int | None,
    target_level: int | None,
    *,
    is_root: bool = False,
) -> None:
    """Raise HierarchyViolationError unless assert_lower_level allows."""
    decision = assert_lower_level(acting_level, target_level, is_root=is_root)
    if not decision.allowed:
        raise HierarchyViolationError(
            decision.details["acting_level"],
            decision.details["target_level"],
        )
