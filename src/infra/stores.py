"""PostgreSQL adapters implementing the store ports via SQLAlchemy.

- One short-lived session per port call, from async_sessionmaker
- Read-only except PgRoleAssignmentStore
- Any SQLAlchemyError is logged as a structured error and re-raised as
  PortUnavailableError; callers treat it as deny
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import bcrypt
import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError

from src.authz.permissions import MODULES
from src.infra.models import (
    OrgMember,
    OrgModule,
    PlatformUserOrgAccess,
    PlatformUserRole,
    Role,
    RolePermission,
    TenantUserRole,
    User,
)
from src.infra.models import Organization as OrganizationModel
from src.ports.credential_store import CredentialStore
from src.ports.grant_store import GrantStore
from src.ports.membership_store import MembershipStore
from src.ports.module_gate import ModuleGate
from src.ports.org_directory import OrgDirectory
from src.ports.role_assignment import RoleAssignmentStore
from src.ports.role_store import RoleStore
from src.shared.errors import NotFoundError, PortUnavailableError
from src.shared.logging.error_handler import log_structured_error
from src.shared.types import (
    AccessLevel,
    Grant,
    MembershipEntry,
    Organization,
    PlatformRole,
    Scope,
    TenantRole,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


class _PgStore:
    """Session handling and fault translation shared by every adapter."""

    port_name = "store"

    def __init__(self, *, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            log_structured_error(
                logger,
                exc,
                error_code="PORT_UNAVAILABLE",
                context={"port": self.port_name, "operation": operation},
            )
            raise PortUnavailableError(self.port_name, f"{operation} failed") from exc


class PgMembershipStore(_PgStore, MembershipStore):
    port_name = "membership_store"

    async def is_member(self, identity_id: UUID, org_id: UUID) -> bool:
        stmt = (
            sa.select(OrgMember.id)
            .where(
                OrgMember.user_id == identity_id,
                OrgMember.org_id == org_id,
                OrgMember.is_active == True,  # noqa: E712
            )
            .limit(1)
        )
        async with self._session("is_member") as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none() is not None

    async def get_platform_org_access(self, identity_id: UUID) -> list[UUID] | None:
        role_stmt = (
            sa.select(PlatformUserRole.access_level, Role.is_root)
            .join(Role, Role.id == PlatformUserRole.role_id)
            .where(PlatformUserRole.user_id == identity_id)
        )
        access_stmt = sa.select(PlatformUserOrgAccess.org_id).where(
            PlatformUserOrgAccess.user_id == identity_id
        )
        async with self._session("get_platform_org_access") as session:
            rows = (await session.execute(role_stmt)).fetchall()
            if not rows:
                return None
            assignment = rows[0]
            if assignment.is_root or assignment.access_level == AccessLevel.GLOBAL.value:
                return None
            access_rows = (await session.execute(access_stmt)).fetchall()

        return [row.org_id for row in access_rows]

    async def list_memberships(self, identity_id: UUID) -> list[MembershipEntry]:
        stmt = (
            sa.select(
                OrganizationModel.id.label("org_id"),
                OrganizationModel.name.label("org_name"),
                OrganizationModel.slug.label("org_slug"),
                Role.id.label("role_id"),
                Role.code.label("role_code"),
                Role.name.label("role_name"),
                Role.level.label("role_level"),
            )
            .select_from(OrgMember)
            .join(OrganizationModel, OrganizationModel.id == OrgMember.org_id)
            .outerjoin(
                TenantUserRole,
                sa.and_(
                    TenantUserRole.org_id == OrgMember.org_id,
                    TenantUserRole.user_id == OrgMember.user_id,
                ),
            )
            .outerjoin(Role, Role.id == TenantUserRole.role_id)
            .where(
                OrgMember.user_id == identity_id,
                OrgMember.is_active == True,  # noqa: E712
                OrganizationModel.is_active == True,  # noqa: E712
            )
            .order_by(OrganizationModel.name)
        )
        async with self._session("list_memberships") as session:
            rows = (await session.execute(stmt)).fetchall()

        entries: list[MembershipEntry] = []
        for row in rows:
            role = None
            if row.role_id is not None:
                role = TenantRole(
                    role_id=row.role_id,
                    org_id=row.org_id,
                    code=row.role_code,
                    name=row.role_name,
                    level=row.role_level,
                )
            entries.append(
                MembershipEntry(
                    organization=Organization(
                        org_id=row.org_id, name=row.org_name, slug=row.org_slug
                    ),
                    role=role,
                )
            )
        return entries


class PgRoleStore(_PgStore, RoleStore):
    port_name = "role_store"

    async def get_tenant_role(self, identity_id: UUID, org_id: UUID) -> TenantRole | None:
        stmt = (
            sa.select(Role.id, Role.org_id, Role.code, Role.name, Role.level)
            .join(TenantUserRole, TenantUserRole.role_id == Role.id)
            .where(
                TenantUserRole.user_id == identity_id,
                TenantUserRole.org_id == org_id,
                Role.org_id == org_id,
            )
            .limit(1)
        )
        async with self._session("get_tenant_role") as session:
            rows = (await session.execute(stmt)).fetchall()

        if not rows:
            return None
        row = rows[0]
        return TenantRole(
            role_id=row.id, org_id=row.org_id, code=row.code, name=row.name, level=row.level
        )

    async def get_platform_role(self, identity_id: UUID) -> PlatformRole | None:
        stmt = (
            sa.select(
                Role.id,
                Role.code,
                Role.name,
                Role.is_root,
                Role.level,
                PlatformUserRole.access_level,
            )
            .join(PlatformUserRole, PlatformUserRole.role_id == Role.id)
            .where(
                PlatformUserRole.user_id == identity_id,
                Role.is_platform == True,  # noqa: E712
            )
            .limit(1)
        )
        async with self._session("get_platform_role") as session:
            rows = (await session.execute(stmt)).fetchall()

        if not rows:
            return None
        row = rows[0]
        return PlatformRole(
            role_id=row.id,
            code=row.code,
            name=row.name,
            is_root=bool(row.is_root),
            access_level=AccessLevel(row.access_level),
            level=row.level,
        )


class PgGrantStore(_PgStore, GrantStore):
    port_name = "grant_store"

    async def get_grants(self, role_id: UUID) -> list[Grant]:
        stmt = (
            sa.select(RolePermission.permission_key, RolePermission.scope)
            .where(RolePermission.role_id == role_id)
            .order_by(RolePermission.permission_key)
        )
        async with self._session("get_grants") as session:
            rows = (await session.execute(stmt)).fetchall()

        grants: list[Grant] = []
        for row in rows:
            try:
                scope = Scope(row.scope)
            except ValueError:
                logger.warning(
                    "Skipping grant with unknown scope: role=%s key=%s scope=%r",
                    role_id,
                    row.permission_key,
                    row.scope,
                )
                continue
            grants.append(Grant(key=row.permission_key, scope=scope))
        return grants


class PgOrgDirectory(_PgStore, OrgDirectory):
    port_name = "org_directory"

    async def list_organizations(
        self,
        org_ids: Iterable[UUID] | None = None,
    ) -> list[Organization]:
        stmt = (
            sa.select(OrganizationModel)
            .where(OrganizationModel.is_active == True)  # noqa: E712
            .order_by(OrganizationModel.name)
        )
        if org_ids is not None:
            ids = list(org_ids)
            if not ids:
                return []
            stmt = stmt.where(OrganizationModel.id.in_(ids))

        async with self._session("list_organizations") as session:
            result = await session.scalars(stmt)
            rows = result.all()

        return [Organization(org_id=row.id, name=row.name, slug=row.slug) for row in rows]


class PgModuleGate(_PgStore, ModuleGate):
    """Modules without an org_modules row are enabled."""

    port_name = "module_gate"

    async def is_module_enabled(self, org_id: UUID, module_key: str) -> bool:
        stmt = sa.select(OrgModule.is_enabled).where(
            OrgModule.org_id == org_id,
            OrgModule.module_key == module_key,
        )
        async with self._session("is_module_enabled") as session:
            result = await session.execute(stmt)
            enabled = result.scalar_one_or_none()
        return True if enabled is None else bool(enabled)

    async def list_enabled_modules(self, org_id: UUID) -> list[str]:
        stmt = sa.select(OrgModule.module_key, OrgModule.is_enabled).where(
            OrgModule.org_id == org_id
        )
        async with self._session("list_enabled_modules") as session:
            rows = (await session.execute(stmt)).fetchall()

        switches = {row.module_key: bool(row.is_enabled) for row in rows}
        return sorted(module for module in MODULES if switches.get(module, True))


class PgCredentialStore(_PgStore, CredentialStore):
    port_name = "credential_store"

    async def verify_credentials(self, email: str, password: str) -> UUID | None:
        stmt = sa.select(User).where(User.email == email)
        async with self._session("verify_credentials") as session:
            result = await session.execute(stmt)
            user = result.scalar_one_or_none()

        if user is None or user.password_hash is None:
            return None
        if not verify_password(password, user.password_hash):
            return None
        if not user.is_active:
            logger.info("Login attempt on disabled account: user_id=%s", user.id)
            return None
        return user.id


class PgRoleAssignmentStore(_PgStore, RoleAssignmentStore):
    port_name = "role_assignment_store"

    async def get_org_role(self, org_id: UUID, role_id: UUID) -> TenantRole | None:
        stmt = sa.select(Role).where(
            Role.id == role_id,
            Role.org_id == org_id,
            Role.is_platform == False,  # noqa: E712
        )
        async with self._session("get_org_role") as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()

        if row is None:
            return None
        return TenantRole(
            role_id=row.id, org_id=row.org_id, code=row.code, name=row.name, level=row.level
        )

    async def assign_tenant_role(
        self,
        org_id: UUID,
        identity_id: UUID,
        role_id: UUID,
    ) -> TenantRole:
        role = await self.get_org_role(org_id, role_id)
        if role is None:
            raise NotFoundError("role", str(role_id))

        stmt = (
            sa.update(TenantUserRole)
            .where(TenantUserRole.org_id == org_id, TenantUserRole.user_id == identity_id)
            .values(role_id=role_id, updated_at=sa.func.now())
        )
        async with self._session("assign_tenant_role") as session:
            result = await session.execute(stmt)
            if result.rowcount == 0:
                session.add(TenantUserRole(org_id=org_id, user_id=identity_id, role_id=role_id))
            await session.commit()

        logger.info(
            "Tenant role assigned: org=%s user=%s role=%s", org_id, identity_id, role.code
        )
        return role
