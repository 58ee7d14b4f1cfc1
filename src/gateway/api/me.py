"""Caller introspection endpoints.

- GET /api/v1/me/ability  resolved role, grants and enabled modules
- GET /api/v1/me/orgs     current org and the orgs the caller may switch into
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003 - needed at runtime by FastAPI

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.gateway.guards import get_auth_context
from src.shared.types import AuthContext  # noqa: TC001 - needed at runtime by FastAPI

if TYPE_CHECKING:
    from src.session.flow import SessionService


class GrantResponse(BaseModel):
    key: str
    scope: str


class RoleResponse(BaseModel):
    code: str
    name: str
    is_platform: bool
    is_root: bool
    level: int | None = None


class AbilityResponse(BaseModel):
    org_id: UUID | None
    mode: str
    role: RoleResponse
    grants: list[GrantResponse]
    modules: list[str]


class AvailableOrgResponse(BaseModel):
    org_id: UUID
    org_name: str
    org_slug: str
    role: str
    role_level: int | None = None
    is_platform: bool


class OrgsResponse(BaseModel):
    current: UUID | None
    available: list[AvailableOrgResponse]


def create_me_router(*, session_service: SessionService) -> APIRouter:
    """Create caller introspection router."""
    router = APIRouter(prefix="/api/v1/me", tags=["me"])

    @router.get("/ability", response_model=AbilityResponse)
    async def get_ability(ctx: AuthContext = Depends(get_auth_context)) -> AbilityResponse:
        ability = await session_service.ability(ctx)
        return AbilityResponse(
            org_id=ability.org_id,
            mode=ability.mode.value,
            role=RoleResponse(
                code=ability.role.code,
                name=ability.role.name,
                is_platform=ability.role.is_platform,
                is_root=ability.role.is_root,
                level=ability.role.level,
            ),
            grants=[GrantResponse(key=g.key, scope=g.scope.value) for g in ability.grants],
            modules=list(ability.modules),
        )

    @router.get("/orgs", response_model=OrgsResponse)
    async def get_orgs(ctx: AuthContext = Depends(get_auth_context)) -> OrgsResponse:
        available = await session_service.available_orgs(ctx.identity_id)
        return OrgsResponse(
            current=ctx.current_org_id,
            available=[
                AvailableOrgResponse(
                    org_id=org.org_id,
                    org_name=org.org_name,
                    org_slug=org.org_slug,
                    role=org.role,
                    role_level=org.role_level,
                    is_platform=org.is_platform,
                )
                for org in available
            ],
        )

    return router
