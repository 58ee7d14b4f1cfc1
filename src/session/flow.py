"""Session / mode flow: login mode selection, org switching, org picker.

A login lands either in platform mode (identity holds a PlatformRole) or
in tenant mode. Tenant sessions are bound to an org right away when the
identity belongs to exactly one; with several memberships the token is
issued unbound and the client must call switch_org before any
tenant-scoped permission can pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from src.session.tokens import encode_token
from src.shared.errors import OnboardingRequiredError, OrgAccessDeniedError
from src.shared.types import (
    AccessLevel,
    AuthMode,
    AvailableOrg,
    RoleSummary,
    UserAbility,
)

if TYPE_CHECKING:
    from uuid import UUID

    from src.authz.resolver import PermissionResolver
    from src.authz.service import AuthorizationService
    from src.ports.membership_store import MembershipStore
    from src.ports.module_gate import ModuleGate
    from src.ports.org_directory import OrgDirectory
    from src.ports.role_store import RoleStore
    from src.shared.types import AuthContext, Organization, PlatformRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    """Token issued by login or switch_org."""

    access_token: str
    mode: AuthMode
    current_org_id: UUID | None = None
    requires_org_selection: bool = False


class SessionService:
    """Issue mode-aware session tokens and list reachable organizations."""

    def __init__(
        self,
        *,
        authz: AuthorizationService,
        resolver: PermissionResolver,
        membership_store: MembershipStore,
        role_store: RoleStore,
        org_directory: OrgDirectory,
        jwt_secret: str,
        module_gate: ModuleGate | None = None,
        ttl_seconds: int = 3600,
    ) -> None:
        self._authz = authz
        self._resolver = resolver
        self._membership = membership_store
        self._roles = role_store
        self._orgs = org_directory
        self._module_gate = module_gate
        self._secret = jwt_secret
        self._ttl = ttl_seconds

    async def login(self, identity_id: UUID) -> LoginResult:
        """Pick the session mode for an identity whose credentials are verified.

        Raises:
            OnboardingRequiredError: Tenant identity without any membership.
        """
        platform_role = await self._roles.get_platform_role(identity_id)
        if platform_role is not None:
            logger.info(
                "Login: identity=%s mode=platform role=%s", identity_id, platform_role.code
            )
            return LoginResult(
                access_token=self._issue(identity_id, AuthMode.PLATFORM),
                mode=AuthMode.PLATFORM,
            )

        memberships = await self._membership.list_memberships(identity_id)
        if not memberships:
            logger.info("Login refused: identity=%s has no organization", identity_id)
            raise OnboardingRequiredError(str(identity_id))

        if len(memberships) == 1:
            org_id = memberships[0].organization.org_id
            logger.info("Login: identity=%s mode=tenant org=%s", identity_id, org_id)
            return LoginResult(
                access_token=self._issue(identity_id, AuthMode.TENANT, org_id),
                mode=AuthMode.TENANT,
                current_org_id=org_id,
            )

        logger.info(
            "Login: identity=%s mode=tenant org selection required (%d orgs)",
            identity_id,
            len(memberships),
        )
        return LoginResult(
            access_token=self._issue(identity_id, AuthMode.TENANT),
            mode=AuthMode.TENANT,
            requires_org_selection=True,
        )

    async def switch_org(self, identity_id: UUID, target_org_id: UUID) -> LoginResult:
        """Bind a new tenant-mode session to ``target_org_id``.

        Raises:
            OrgAccessDeniedError: Neither a member nor platform-reachable.
        """
        decision = await self._authz.check_org_access(identity_id, target_org_id)
        if not decision.allowed:
            logger.info(
                "Switch-org denied: identity=%s org=%s code=%s",
                identity_id,
                target_org_id,
                decision.code.value,
            )
            raise OrgAccessDeniedError(str(target_org_id), decision.reason)

        logger.info("Switch-org: identity=%s org=%s", identity_id, target_org_id)
        return LoginResult(
            access_token=self._issue(identity_id, AuthMode.TENANT, target_org_id),
            mode=AuthMode.TENANT,
            current_org_id=target_org_id,
        )

    async def available_orgs(self, identity_id: UUID) -> list[AvailableOrg]:
        """Orgs the identity may switch into, membership entries first.

        Only memberships holding a tenant role are listed. Deduplicated by
        org id (a membership wins over platform reach) and sorted by org name.
        """
        entries: dict[UUID, AvailableOrg] = {}

        for membership in await self._membership.list_memberships(identity_id):
            role = membership.role
            if role is None:
                continue
            org = membership.organization
            entries[org.org_id] = AvailableOrg(
                org_id=org.org_id,
                org_name=org.name,
                org_slug=org.slug,
                role=role.name,
                role_level=role.level,
                is_platform=False,
            )

        platform_role = await self._roles.get_platform_role(identity_id)
        if platform_role is not None:
            for org in await self._platform_reachable(identity_id, platform_role):
                entries.setdefault(
                    org.org_id,
                    AvailableOrg(
                        org_id=org.org_id,
                        org_name=org.name,
                        org_slug=org.slug,
                        role=platform_role.name,
                        role_level=platform_role.level,
                        is_platform=True,
                    ),
                )

        return sorted(entries.values(), key=lambda o: (o.org_name.casefold(), str(o.org_id)))

    async def ability(self, ctx: AuthContext) -> UserAbility:
        """Resolved role, grants and enabled modules for the caller."""
        resolved = await self._resolver.resolve(ctx)
        role = resolved.role

        modules: tuple[str, ...] = ()
        if self._module_gate is not None and ctx.current_org_id is not None:
            modules = tuple(await self._module_gate.list_enabled_modules(ctx.current_org_id))

        return UserAbility(
            org_id=ctx.current_org_id,
            mode=ctx.mode,
            role=RoleSummary(
                code=role.code if role else "NONE",
                name=role.name if role else "No Role",
                is_platform=ctx.is_platform,
                is_root=ctx.is_root,
                level=role.level if role else None,
            ),
            grants=resolved.grants,
            modules=modules,
        )

    async def _platform_reachable(
        self, identity_id: UUID, platform_role: PlatformRole
    ) -> list[Organization]:
        if platform_role.is_root or platform_role.access_level == AccessLevel.GLOBAL:
            return await self._orgs.list_organizations()

        allowed = await self._membership.get_platform_org_access(identity_id)
        if not allowed:
            return []
        return await self._orgs.list_organizations(allowed)

    def _issue(self, identity_id: UUID, mode: AuthMode, org_id: UUID | None = None) -> str:
        return encode_token(
            subject_id=identity_id,
            mode=mode,
            secret=self._secret,
            current_org_id=org_id,
            ttl_seconds=self._ttl,
        )
