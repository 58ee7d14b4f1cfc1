"""Session tokens: HS256 JWT carrying identity, mode and selected org.

Uses PyJWT (HS256). Secret must come from environment, never hardcoded.
Role and root flags are deliberately absent from the claims; they are
re-read from the stores when the AuthContext is built.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from uuid import UUID

import jwt

from src.shared.errors import AuthenticationError
from src.shared.types import AuthMode

_ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenPayload:
    """Decoded JWT payload."""

    subject_id: UUID
    mode: AuthMode
    current_org_id: UUID | None = None


def encode_token(
    *,
    subject_id: UUID,
    mode: AuthMode,
    secret: str,
    current_org_id: UUID | None = None,
    ttl_seconds: int = 3600,
) -> str:
    """Create a signed JWT containing sub, mode and (optionally) org."""
    now = int(time.time())
    payload: dict[str, object] = {
        "sub": str(subject_id),
        "mode": AuthMode(mode).value,
        "iat": now,
        "exp": now + ttl_seconds,
    }
    if current_org_id is not None:
        payload["org"] = str(current_org_id)
    return jwt.encode(payload, secret, algorithm=_ALGORITHM)


def decode_token(token: str, *, secret: str) -> TokenPayload:
    """Decode and validate a JWT. Raises AuthenticationError on failure."""
    try:
        data = jwt.decode(token, secret, algorithms=[_ALGORITHM])
        org = data.get("org")
        payload = TokenPayload(
            subject_id=UUID(data["sub"]),
            mode=AuthMode(data["mode"]),
            current_org_id=UUID(org) if org else None,
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token expired") from exc
    except (jwt.InvalidTokenError, KeyError, ValueError) as exc:
        raise AuthenticationError(f"Invalid token: {exc}") from exc

    if payload.mode == AuthMode.PLATFORM and payload.current_org_id is not None:
        raise AuthenticationError("Invalid token: platform tokens carry no org")
    return payload
