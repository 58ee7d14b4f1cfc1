"""Trace-id propagation via contextvars.

The gateway binds a trace id on request entry (taken from the
``X-Trace-ID`` header when the client sends a usable one) and every layer
reads it through get_trace_id() for structured logging.
"""

from __future__ import annotations

import re
from collections.abc import Generator  # noqa: TC003 -- used at runtime by contextmanager
from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4

TRACE_HEADER = "X-Trace-ID"

_MAX_LEN = 128
_VALID = re.compile(r"^[A-Za-z0-9._:-]+$")

current_trace_id: ContextVar[str] = ContextVar("current_trace_id", default="")


def get_trace_id() -> str:
    """Return the current trace_id (empty string if not set)."""
    return current_trace_id.get()


def accept_trace_id(candidate: str | None) -> str | None:
    """Return ``candidate`` if it is safe to log and echo back, else None."""
    if not candidate or len(candidate) > _MAX_LEN or not _VALID.match(candidate):
        return None
    return candidate


@contextmanager
def trace_context(trace_id: str | None = None) -> Generator[str, None, None]:
    """Bind a trace_id for the duration of the block.

    A missing or unusable ``trace_id`` is replaced by a fresh UUID4; the
    previous value is restored on exit.
    """
    effective_id = accept_trace_id(trace_id) or str(uuid4())
    token = current_trace_id.set(effective_id)
    try:
        yield effective_id
    finally:
        current_trace_id.reset(token)
