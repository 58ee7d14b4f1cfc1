"""Authentication endpoints (login / switch-org).

- POST /api/v1/auth/login       exempt from JWT middleware
- POST /api/v1/auth/switch-org  requires a valid token of either mode

Both return a fresh access token; the mode and bound org are decided by
SessionService, never by the client.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003 - needed at runtime by FastAPI

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr

from src.gateway.guards import get_token
from src.session.tokens import TokenPayload  # noqa: TC001 - needed at runtime by FastAPI
from src.shared.errors import AuthenticationError

if TYPE_CHECKING:
    from src.ports.credential_store import CredentialStore
    from src.session.flow import LoginResult, SessionService

logger = logging.getLogger(__name__)


# -- Request / Response models --


class LoginRequest(BaseModel):
    """Login credentials."""

    email: EmailStr
    password: str


class SwitchOrgRequest(BaseModel):
    org_id: UUID


class TokenResponse(BaseModel):
    """Access token plus the session mode it carries."""

    access_token: str
    token_type: str = "bearer"
    mode: str
    current_org_id: UUID | None = None
    requires_org_selection: bool = False


def _to_response(result: LoginResult) -> TokenResponse:
    return TokenResponse(
        access_token=result.access_token,
        mode=result.mode.value,
        current_org_id=result.current_org_id,
        requires_org_selection=result.requires_org_selection,
    )


# -- Router factory --


def create_auth_router(
    *,
    session_service: SessionService,
    credential_store: CredentialStore,
) -> APIRouter:
    """Create auth API router."""
    router = APIRouter(prefix="/api/v1/auth", tags=["auth"])

    @router.post("/login", response_model=TokenResponse)
    async def login(body: LoginRequest) -> TokenResponse:
        """Authenticate with email + password, return a mode-aware JWT."""
        identity_id = await credential_store.verify_credentials(body.email, body.password)
        if identity_id is None:
            logger.info("Login failed: email=%s", body.email)
            raise AuthenticationError("Invalid email or password")

        result = await session_service.login(identity_id)
        return _to_response(result)

    @router.post("/switch-org", response_model=TokenResponse)
    async def switch_org(
        body: SwitchOrgRequest,
        token: TokenPayload = Depends(get_token),
    ) -> TokenResponse:
        """Re-issue a tenant-mode token bound to ``org_id``."""
        result = await session_service.switch_org(token.subject_id, body.org_id)
        return _to_response(result)

    return router
