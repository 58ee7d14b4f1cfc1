"""Role assignment endpoint.

PUT /api/v1/rbac/orgs/{org_id}/members/{user_id}/role

Guarded by ``user.manage``; the actor must additionally outrank both the
role being assigned and the member's current role (root excepted).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003 - needed at runtime by FastAPI

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from src.authz.decision import DecisionCode
from src.authz.hierarchy import enforce_lower_level
from src.authz.permissions import Action, Resource, permission_key
from src.gateway.guards import require_permission
from src.shared.errors import AuthorizationError, NotFoundError, ValidationError
from src.shared.types import AuthContext, AuthMode, ResourceContext

if TYPE_CHECKING:
    from src.ports.membership_store import MembershipStore
    from src.ports.role_assignment import RoleAssignmentStore
    from src.ports.role_store import RoleStore

logger = logging.getLogger(__name__)

_USER_MANAGE = permission_key(Resource.USER, Action.MANAGE)


class AssignRoleRequest(BaseModel):
    role_id: UUID


class AssignedRoleResponse(BaseModel):
    org_id: UUID
    user_id: UUID
    role_id: UUID
    role_code: str
    role_name: str
    role_level: int


def _target_org(request: Request) -> ResourceContext:
    # Runs inside the guard, before FastAPI validates the path parameter.
    raw = request.path_params["org_id"]
    try:
        org_id = UUID(raw)
    except ValueError as exc:
        raise ValidationError(f"Invalid organization id: {raw}", field="org_id") from exc
    return ResourceContext(resource_org_id=org_id)


def create_rbac_router(
    *,
    role_store: RoleStore,
    membership_store: MembershipStore,
    assignment_store: RoleAssignmentStore,
) -> APIRouter:
    """Create role administration router."""
    router = APIRouter(prefix="/api/v1/rbac", tags=["rbac"])

    async def _acting_level(ctx: AuthContext, org_id: UUID) -> int | None:
        if ctx.mode == AuthMode.PLATFORM:
            platform_role = await role_store.get_platform_role(ctx.identity_id)
            return platform_role.level if platform_role else None
        tenant_role = await role_store.get_tenant_role(ctx.identity_id, org_id)
        return tenant_role.level if tenant_role else None

    @router.put(
        "/orgs/{org_id}/members/{user_id}/role",
        response_model=AssignedRoleResponse,
    )
    async def assign_role(
        org_id: UUID,
        user_id: UUID,
        body: AssignRoleRequest,
        ctx: AuthContext = Depends(require_permission(_USER_MANAGE, resource=_target_org)),
    ) -> AssignedRoleResponse:
        if ctx.mode == AuthMode.TENANT and ctx.current_org_id != org_id:
            raise AuthorizationError(
                _USER_MANAGE,
                decision_code=DecisionCode.NOT_TENANT_MEMBER.value,
                reason="Session is bound to a different organization",
                details={"org_id": str(org_id)},
            )

        if not await membership_store.is_member(user_id, org_id):
            raise NotFoundError("member", str(user_id))

        new_role = await assignment_store.get_org_role(org_id, body.role_id)
        if new_role is None:
            raise NotFoundError("role", str(body.role_id))

        acting_level = None if ctx.is_root else await _acting_level(ctx, org_id)
        enforce_lower_level(acting_level, new_role.level, is_root=ctx.is_root)

        current_role = await role_store.get_tenant_role(user_id, org_id)
        if current_role is not None:
            enforce_lower_level(acting_level, current_role.level, is_root=ctx.is_root)

        assigned = await assignment_store.assign_tenant_role(org_id, user_id, body.role_id)
        logger.info(
            "Role change: actor=%s org=%s user=%s role=%s",
            ctx.identity_id,
            org_id,
            user_id,
            assigned.code,
        )
        return AssignedRoleResponse(
            org_id=org_id,
            user_id=user_id,
            role_id=assigned.role_id,
            role_code=assigned.code,
            role_name=assigned.name,
            role_level=assigned.level,
        )

    return router
