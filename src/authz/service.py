"""AuthorizationService - the decision engine.

Evaluation order for ``can`` (short-circuiting):
  1. Root identity          -> allow (via root)
  2. Context check          -> NO_TENANT_CONTEXT / NOT_TENANT_MEMBER /
                               PLATFORM_TENANT_ACCESS_DENIED
  3. Grant lookup by key    -> MISSING_PERMISSION
  4. Scope evaluation       -> SCOPE_DENIED
  5. allow (via grant)

The engine performs no writes and never raises for "not authorized".
Store faults propagate unchanged; callers must treat them as deny.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.authz import scope as scope_evaluator
from src.authz.decision import Decision, DecisionCode, Decisions, DecisionVia
from src.authz.permissions import module_for
from src.shared.types import AuthMode, ResourceContext

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from src.authz.resolver import PermissionResolver
    from src.ports.membership_store import MembershipStore
    from src.ports.module_gate import ModuleGate
    from src.ports.role_store import RoleStore
    from src.shared.types import AuthContext, ResolvedPermissions

logger = logging.getLogger(__name__)

_NO_RESOURCE = ResourceContext()


class AuthorizationService:
    """Stateless decision engine over injected store ports."""

    def __init__(
        self,
        *,
        resolver: PermissionResolver,
        membership_store: MembershipStore,
        role_store: RoleStore,
        module_gate: ModuleGate | None = None,
    ) -> None:
        self._resolver = resolver
        self._membership = membership_store
        self._roles = role_store
        self._module_gate = module_gate

    # -- Single permission --

    async def can(
        self,
        permission_key: str,
        ctx: AuthContext,
        resource_ctx: ResourceContext | None = None,
    ) -> Decision:
        resource_ctx = resource_ctx or _NO_RESOURCE

        if ctx.is_root:
            logger.info(
                "Root bypass: identity=%s permission=%s", ctx.identity_id, permission_key
            )
            return Decisions.allow_root()

        context_decision = await self.check_context(ctx, resource_ctx)
        if not context_decision.allowed:
            denied = Decisions.for_permission(context_decision, permission_key)
            self._log_deny(permission_key, ctx, denied)
            return denied

        resolved = await self._resolver.resolve(ctx)
        return self._evaluate(permission_key, ctx, resource_ctx, resolved)

    # -- Batches --

    async def can_all(
        self,
        permission_keys: Sequence[str],
        ctx: AuthContext,
        resource_ctx: ResourceContext | None = None,
    ) -> dict[str, Decision]:
        """Independent Decision per key; no AND aggregation.

        The context is checked once and the grant set resolved once, then
        evaluated against every key.
        """
        resource_ctx = resource_ctx or _NO_RESOURCE

        if ctx.is_root:
            return {key: Decisions.allow_root() for key in permission_keys}

        context_decision = await self.check_context(ctx, resource_ctx)
        if not context_decision.allowed:
            return {
                key: Decisions.for_permission(context_decision, key) for key in permission_keys
            }

        resolved = await self._resolver.resolve(ctx)
        return {
            key: self._evaluate(key, ctx, resource_ctx, resolved) for key in permission_keys
        }

    async def can_any(
        self,
        permission_keys: Sequence[str],
        ctx: AuthContext,
        resource_ctx: ResourceContext | None = None,
    ) -> Decision:
        """First allowing Decision in key order (logical OR)."""
        decisions = await self.can_all(permission_keys, ctx, resource_ctx)
        for key in permission_keys:
            if decisions[key].allowed:
                return decisions[key]

        joined = " OR ".join(permission_keys)
        return Decisions.deny(
            DecisionCode.MISSING_PERMISSION,
            f"Missing permission {joined}",
            required_permission=joined,
            required_permissions=list(permission_keys),
        )

    # -- Module gating wrapper --

    async def can_with_module(
        self,
        permission_key: str,
        ctx: AuthContext,
        resource_ctx: ResourceContext | None = None,
        *,
        module_key: str | None = None,
    ) -> Decision:
        """``can`` followed by a ModuleGate consult for the target org.

        The module defaults to the one that owns ``permission_key`` in the
        registry. Without a gate, a module, or an org to check against,
        the plain ``can`` decision is returned.
        """
        decision = await self.can(permission_key, ctx, resource_ctx)
        if not decision.allowed or decision.via is DecisionVia.ROOT:
            return decision

        module = module_key or module_for(permission_key)
        org_id = ctx.current_org_id or (resource_ctx.resource_org_id if resource_ctx else None)
        if self._module_gate is None or module is None or org_id is None:
            return decision

        if not await self._module_gate.is_module_enabled(org_id, module):
            denied = Decisions.for_permission(
                Decisions.module_disabled(module, org_id), permission_key
            )
            self._log_deny(permission_key, ctx, denied)
            return denied
        return decision

    # -- Context checks --

    async def check_context(self, ctx: AuthContext, resource_ctx: ResourceContext) -> Decision:
        """Step 2 of ``can``: org binding and platform reach."""
        if ctx.mode == AuthMode.TENANT:
            if ctx.current_org_id is None:
                return Decisions.no_tenant_context()
            if not await self._membership.is_member(ctx.identity_id, ctx.current_org_id):
                return Decisions.not_tenant_member(ctx.current_org_id)
            return Decisions.allow(via=DecisionVia.CONTEXT)

        target_org = resource_ctx.resource_org_id
        if target_org is not None:
            allowed_orgs = await self._membership.get_platform_org_access(ctx.identity_id)
            if allowed_orgs is not None and target_org not in allowed_orgs:
                return Decisions.platform_access_denied(target_org)
        return Decisions.allow(via=DecisionVia.CONTEXT)

    async def check_org_access(self, identity_id: UUID, org_id: UUID) -> Decision:
        """Membership OR platform access to ``org_id``.

        Shares the membership and allow-list reads with ``check_context``;
        used when binding a session to an organization.
        """
        if await self._membership.is_member(identity_id, org_id):
            return Decisions.allow(via=DecisionVia.CONTEXT)

        platform_role = await self._roles.get_platform_role(identity_id)
        if platform_role is None:
            return Decisions.not_tenant_member(org_id)
        if platform_role.is_root:
            return Decisions.allow_root()

        allowed_orgs = await self._membership.get_platform_org_access(identity_id)
        if allowed_orgs is not None and org_id not in allowed_orgs:
            return Decisions.platform_access_denied(org_id)
        return Decisions.allow(via=DecisionVia.CONTEXT)

    # -- Internals --

    def _evaluate(
        self,
        permission_key: str,
        ctx: AuthContext,
        resource_ctx: ResourceContext,
        resolved: ResolvedPermissions,
    ) -> Decision:
        grant = self._resolver.find_grant(resolved.grants, permission_key)
        if grant is None:
            decision = Decisions.missing_permission(permission_key)
        elif not scope_evaluator.evaluate(grant.scope, ctx, resource_ctx):
            decision = Decisions.scope_denied(permission_key, grant.scope)
        else:
            return Decisions.allow(via=DecisionVia.GRANT)

        self._log_deny(permission_key, ctx, decision)
        return decision

    @staticmethod
    def _log_deny(permission_key: str, ctx: AuthContext, decision: Decision) -> None:
        logger.debug(
            "Deny %s: identity=%s mode=%s org=%s permission=%s",
            decision.code.value,
            ctx.identity_id,
            ctx.mode,
            ctx.current_org_id,
            permission_key,
        )
