"""Tests for structured error logging.

Verifies: error_code, stack_trace, context and redaction in structured logs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.shared.errors import OrgGuardError, PortUnavailableError
from src.shared.logging.error_handler import (
    StructuredError,
    create_structured_error,
    log_structured_error,
    redact,
)
from src.shared.trace_context import trace_context

if TYPE_CHECKING:
    import pytest

_REDACTED = "[REDACTED]"


class TestRedact:
    def test_redacts_password(self) -> None:
        result = redact({"password": "secret123", "user": "alice"})
        assert result["password"] == _REDACTED
        assert result["user"] == "alice"

    def test_case_insensitive(self) -> None:
        assert redact({"Authorization": "Bearer x"}) == {"Authorization": _REDACTED}

    def test_redacts_nested(self) -> None:
        result = redact({"outer": {"jwt_secret": "s"}})
        assert result["outer"]["jwt_secret"] == _REDACTED

    def test_redacts_inside_lists(self) -> None:
        result = redact({"attempts": [{"access_token": "t"}, {"org": "acme"}]})
        assert result["attempts"] == [{"access_token": _REDACTED}, {"org": "acme"}]

    def test_preserves_non_sensitive(self) -> None:
        assert redact({"port": "role_store", "count": 2}) == {"port": "role_store", "count": 2}

    def test_scalars_pass_through(self) -> None:
        assert redact("plain") == "plain"


class TestCreateStructuredError:
    def test_from_generic_exception(self) -> None:
        exc = ValueError("bad value")
        try:
            raise exc
        except ValueError:
            result = create_structured_error(exc)
        assert result.error_code == "ValueError"
        assert result.message == "bad value"
        assert "bad value" in result.stack_trace

    def test_from_orgguard_error(self) -> None:
        exc = PortUnavailableError("membership_store")
        try:
            raise exc
        except OrgGuardError:
            result = create_structured_error(exc)
        assert result.error_code == "PORT_UNAVAILABLE"
        assert "membership_store" in result.message

    def test_custom_error_code_overrides(self) -> None:
        result = create_structured_error(ValueError("x"), error_code="CUSTOM_CODE")
        assert result.error_code == "CUSTOM_CODE"

    def test_picks_up_bound_trace_id(self) -> None:
        with trace_context("trace-42"):
            result = create_structured_error(RuntimeError("fail"))
        assert result.trace_id == "trace-42"

    def test_explicit_ids(self) -> None:
        result = create_structured_error(
            RuntimeError("fail"),
            trace_id="t-1",
            org_id="org-1",
            identity_id="user-1",
            context={"port": "role_store"},
        )
        assert result.trace_id == "t-1"
        assert result.org_id == "org-1"
        assert result.identity_id == "user-1"
        assert result.context == {"port": "role_store"}


class TestStructuredErrorToDict:
    def test_redacts_context(self) -> None:
        error = StructuredError(
            error_code="E",
            message="m",
            stack_trace="",
            context={"password": "p", "operation": "verify_credentials"},
        )
        d = error.to_dict()
        assert d["context"] == {"password": _REDACTED, "operation": "verify_credentials"}
        assert d["error_code"] == "E"


class TestLogStructuredError:
    def test_logs_with_extra(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = logging.getLogger("test.error_handler")
        with caplog.at_level(logging.ERROR, logger="test.error_handler"):
            structured = log_structured_error(
                logger,
                PortUnavailableError("grant_store"),
                context={"operation": "get_grants"},
            )
        assert structured.error_code == "PORT_UNAVAILABLE"
        assert len(caplog.records) == 1
        record = caplog.records[0]
        assert "PORT_UNAVAILABLE" in record.getMessage()
        assert record.structured_error["context"] == {"operation": "get_grants"}

    def test_custom_level(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = logging.getLogger("test.error_handler")
        with caplog.at_level(logging.WARNING, logger="test.error_handler"):
            log_structured_error(logger, RuntimeError("x"), level=logging.WARNING)
        assert caplog.records[0].levelno == logging.WARNING
