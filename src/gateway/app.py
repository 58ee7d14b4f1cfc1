"""FastAPI application factory.

- JWT middleware decodes the bearer token into request.state.token
- Every request runs inside a trace context (X-Trace-ID echoed back)
- OrgGuardError subclasses map to a uniform {error, message} body
- healthz / metrics / docs / login are exempt from auth

Services (context builder, authorization service, session service, stores)
are attached to app.state and routers are mounted by the composition root
in src/main.py.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import Match

from src.session.tokens import decode_token
from src.shared.errors import (
    AuthenticationError,
    AuthorizationError,
    HierarchyViolationError,
    NotFoundError,
    OnboardingRequiredError,
    OrgAccessDeniedError,
    OrgGuardError,
    PortUnavailableError,
    ServiceUnavailableError,
    ValidationError,
)
from src.shared.trace_context import TRACE_HEADER, trace_context

if TYPE_CHECKING:
    from contextlib import AbstractAsyncContextManager

logger = logging.getLogger(__name__)

_EXEMPT_PATHS = frozenset(
    {
        "/healthz",
        "/metrics",
        "/docs",
        "/openapi.json",
        "/redoc",
        "/api/v1/auth/login",
    }
)

# OrgGuardError subclass -> HTTP status. Most specific classes first.
_STATUS_MAP: tuple[tuple[type[OrgGuardError], int], ...] = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (OrgAccessDeniedError, 403),
    (HierarchyViolationError, 403),
    (OnboardingRequiredError, 403),
    (NotFoundError, 404),
    (ValidationError, 422),
    (PortUnavailableError, 503),
    (ServiceUnavailableError, 503),
)


def _error_body(exc: OrgGuardError) -> dict[str, Any]:
    body: dict[str, Any] = {"error": exc.code, "message": str(exc)}
    if isinstance(exc, AuthorizationError) and exc.details:
        body["details"] = exc.details
    return body


def create_app(
    *,
    jwt_secret: str | None = None,
    cors_origins: list[str] | None = None,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[None]] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        jwt_secret: JWT signing secret. Falls back to JWT_SECRET_KEY env var.
        cors_origins: Allowed CORS origins. Falls back to CORS_ORIGINS env var.
        lifespan: Async context manager factory for startup/shutdown lifecycle.
    """
    secret = jwt_secret or os.environ.get("JWT_SECRET_KEY", "")
    if not secret:
        msg = "JWT_SECRET_KEY must be provided via argument or environment variable"
        raise ValueError(msg)

    origins = cors_origins or [
        o.strip() for o in os.environ.get("CORS_ORIGINS", "").split(",") if o.strip()
    ]

    app = FastAPI(
        title="OrgGuard API",
        description="Multi-tenant authorization decisions",
        version="0.1.0",
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.jwt_secret = secret

    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["Authorization", "Content-Type", TRACE_HEADER],
        )

    # -- Error handlers --

    @app.exception_handler(OrgGuardError)
    async def _orgguard_error(_: Request, exc: OrgGuardError) -> JSONResponse:
        status = next((code for cls, code in _STATUS_MAP if isinstance(exc, cls)), 500)
        if status == 500:
            logger.error("Unmapped error %s: %s", exc.code, exc)
        return JSONResponse(status_code=status, content=_error_body(exc))

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        code_map = {
            404: "NOT_FOUND",
            405: "METHOD_NOT_ALLOWED",
        }
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": code_map.get(exc.status_code, "HTTP_ERROR"),
                "message": exc.detail or f"HTTP {exc.status_code}",
            },
        )

    # -- Trace + auth middleware --

    @app.middleware("http")
    async def jwt_auth_middleware(request: Request, call_next: Any) -> Response:
        with trace_context(request.headers.get(TRACE_HEADER)) as trace_id:
            response = await _authenticate(request, call_next)
            response.headers[TRACE_HEADER] = trace_id
            return response

    async def _authenticate(request: Request, call_next: Any) -> Response:
        if request.method == "OPTIONS" or request.url.path in _EXEMPT_PATHS:
            return await call_next(request)

        # Unknown paths return 404, not 401.
        route_matched = any(route.matches(request.scope)[0] != Match.NONE for route in app.routes)
        if not route_matched:
            return await call_next(request)

        auth_header = request.headers.get("authorization", "")
        if not auth_header.startswith("Bearer "):
            return JSONResponse(
                status_code=401,
                content={
                    "error": "AUTH_FAILED",
                    "message": "Missing or malformed Authorization header",
                },
            )
        try:
            request.state.token = decode_token(auth_header[7:], secret=secret)
        except AuthenticationError as exc:
            return JSONResponse(status_code=401, content=_error_body(exc))

        return await call_next(request)

    # -- Exempt routes --

    @app.get("/healthz", tags=["system"])
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/metrics", tags=["system"], include_in_schema=False)
    async def metrics() -> Response:
        from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST,
        )

    return app
