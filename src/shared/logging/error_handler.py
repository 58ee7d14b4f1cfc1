"""Structured error logging.

- Error logs carry error_code, stack_trace and context
- trace_id defaults to the one bound by the gateway for the current request
- Sensitive fields (passwords, tokens, secrets) are redacted, also inside
  nested dicts and lists
"""

from __future__ import annotations

import logging
import traceback
from dataclasses import asdict, dataclass, field
from typing import Any

from src.shared.trace_context import get_trace_id

_REDACTED = "[REDACTED]"

_SENSITIVE_KEYS = frozenset(
    {
        "password",
        "password_hash",
        "token",
        "access_token",
        "secret",
        "jwt_secret",
        "authorization",
        "cookie",
        "jwt",
        "credential",
    }
)


@dataclass(frozen=True)
class StructuredError:
    """Structured representation of an error for logging."""

    error_code: str
    message: str
    stack_trace: str
    context: dict[str, Any] = field(default_factory=dict)
    trace_id: str = ""
    org_id: str = ""
    identity_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict suitable for JSON logging, redacted."""
        d = asdict(self)
        d["context"] = redact(d["context"])
        return d


def redact(value: Any) -> Any:
    """Return a copy of ``value`` with sensitive keys masked."""
    if isinstance(value, dict):
        return {
            key: _REDACTED if str(key).lower() in _SENSITIVE_KEYS else redact(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact(item) for item in value]
    return value


def create_structured_error(
    exc: Exception,
    *,
    error_code: str = "",
    trace_id: str = "",
    org_id: str = "",
    identity_id: str = "",
    context: dict[str, Any] | None = None,
) -> StructuredError:
    """Create a StructuredError from an exception.

    If the exception has a `.code` attribute (OrgGuardError subclasses),
    it is used as the error_code unless overridden.
    """
    code = error_code or getattr(exc, "code", type(exc).__name__)
    stack = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return StructuredError(
        error_code=code,
        message=str(exc),
        stack_trace="".join(stack),
        context=context or {},
        trace_id=trace_id or get_trace_id(),
        org_id=org_id,
        identity_id=identity_id,
    )


def log_structured_error(
    logger: logging.Logger,
    exc: Exception,
    *,
    error_code: str = "",
    trace_id: str = "",
    org_id: str = "",
    identity_id: str = "",
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> StructuredError:
    """Log an exception as a structured error and return it."""
    structured = create_structured_error(
        exc,
        error_code=error_code,
        trace_id=trace_id,
        org_id=org_id,
        identity_id=identity_id,
        context=context,
    )
    logger.log(
        level,
        "structured_error code=%s trace_id=%s",
        structured.error_code,
        structured.trace_id,
        extra={"structured_error": structured.to_dict()},
    )
    return structured
