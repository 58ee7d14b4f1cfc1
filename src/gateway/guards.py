"""FastAPI dependencies for authentication context and permission guards.

Usage::

    @router.get("/events/{event_id}")
    async def get_event(ctx: AuthContext = Depends(require_permission("event.read"))):
        ...

A deny Decision becomes AuthorizationError (403) carrying the deny code and
details. A store fault during the check becomes ServiceUnavailableError
(503); the guard never lets a request through on error.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from fastapi import Depends, Request

from src.authz.permissions import is_valid_permission_key
from src.gateway.metrics.authz_signals import record_decision, record_store_fault
from src.shared.errors import (
    AuthenticationError,
    AuthorizationError,
    PortUnavailableError,
    ServiceUnavailableError,
)
from src.shared.logging.error_handler import log_structured_error
from src.shared.types import AuthContext, ResourceContext  # noqa: TC001 - needed at runtime by FastAPI

if TYPE_CHECKING:
    from src.authz.context import AuthContextBuilder
    from src.authz.service import AuthorizationService
    from src.session.tokens import TokenPayload

logger = logging.getLogger(__name__)

ResourceResolver = Callable[[Request], ResourceContext | Awaitable[ResourceContext]]


def get_token(request: Request) -> TokenPayload:
    """The decoded token set by the JWT middleware."""
    token = getattr(request.state, "token", None)
    if token is None:
        raise AuthenticationError("Missing authentication token")
    return token


async def get_auth_context(request: Request) -> AuthContext:
    """Build (once per request) the AuthContext for the caller."""
    cached = getattr(request.state, "auth_ctx", None)
    if cached is not None:
        return cached

    builder: AuthContextBuilder = request.app.state.context_builder
    try:
        ctx = await builder.build(get_token(request))
    except PortUnavailableError as exc:
        record_store_fault(exc.port_name)
        log_structured_error(logger, exc, context={"stage": "build_context"})
        raise ServiceUnavailableError("authorization", "Authorization unavailable") from exc

    request.state.auth_ctx = ctx
    return ctx


def require_permission(
    permission_key: str,
    *,
    resource: ResourceResolver | None = None,
) -> Callable[..., Awaitable[AuthContext]]:
    """Dependency factory: allow the request only if ``can`` allows.

    Args:
        permission_key: Registered "<resource>.<action>" key.
        resource: Optional callable building the ResourceContext from the
            request (path params, loaded resource, ...).

    Raises:
        ValueError: ``permission_key`` is not in the permission registry.
    """
    if not is_valid_permission_key(permission_key):
        msg = f"Unknown permission key: {permission_key}"
        raise ValueError(msg)

    async def _guard(
        request: Request,
        ctx: AuthContext = Depends(get_auth_context),
    ) -> AuthContext:
        authz: AuthorizationService = request.app.state.authz

        resource_ctx = None
        if resource is not None:
            resource_ctx = resource(request)
            if isinstance(resource_ctx, Awaitable):
                resource_ctx = await resource_ctx

        try:
            decision = await authz.can(permission_key, ctx, resource_ctx)
        except PortUnavailableError as exc:
            record_store_fault(exc.port_name)
            log_structured_error(
                logger,
                exc,
                identity_id=str(ctx.identity_id),
                org_id=str(ctx.current_org_id or ""),
                context={"permission": permission_key},
            )
            raise ServiceUnavailableError("authorization", "Authorization unavailable") from exc

        record_decision(decision)
        if not decision.allowed:
            raise AuthorizationError(
                permission_key,
                decision_code=decision.code.value,
                reason=decision.reason,
                details=decision.details,
            )
        return ctx

    return _guard
