"""Permission resolution: AuthContext -> applicable role + grants."""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.shared.types import AuthMode, ResolvedPermissions

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from src.ports.grant_store import GrantStore
    from src.ports.role_store import RoleStore
    from src.shared.types import AuthContext, Grant

_EMPTY = ResolvedPermissions()


class PermissionResolver:
    """Fetch the role that applies to a context and its grant list.

    Tenant mode without a selected org resolves to nothing; rejecting
    that case is the context check's job, not the resolver's.
    """

    def __init__(self, *, role_store: RoleStore, grant_store: GrantStore) -> None:
        self._roles = role_store
        self._grants = grant_store

    async def resolve(self, ctx: AuthContext) -> ResolvedPermissions:
        if ctx.mode == AuthMode.PLATFORM:
            return await self.resolve_platform(ctx.identity_id)

        if ctx.current_org_id is None:
            return _EMPTY

        return await self.resolve_tenant(ctx.identity_id, ctx.current_org_id)

    async def resolve_tenant(self, identity_id: UUID, org_id: UUID) -> ResolvedPermissions:
        role = await self._roles.get_tenant_role(identity_id, org_id)
        if role is None:
            return _EMPTY
        grants = await self._grants.get_grants(role.role_id)
        return ResolvedPermissions(grants=tuple(grants), role=role)

    async def resolve_platform(self, identity_id: UUID) -> ResolvedPermissions:
        role = await self._roles.get_platform_role(identity_id)
        if role is None:
            return _EMPTY
        grants = await self._grants.get_grants(role.role_id)
        return ResolvedPermissions(grants=tuple(grants), role=role)

    @staticmethod
    def find_grant(grants: Iterable[Grant], key: str) -> Grant | None:
        """Exact key match; the first matching grant wins."""
        for grant in grants:
            if grant.key == key:
                return grant
        return None
