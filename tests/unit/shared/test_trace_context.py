"""Tests for trace_id propagation via contextvars.

- trace_id bound at gateway entry, read by every layer for logging
- Client-supplied ids are accepted only when short and log-safe
- Auto-generates UUID4 trace_id if not provided
"""

from __future__ import annotations

import asyncio
from uuid import UUID

import pytest

from src.shared.trace_context import (
    TRACE_HEADER,
    accept_trace_id,
    current_trace_id,
    get_trace_id,
    trace_context,
)


@pytest.mark.unit
class TestAcceptTraceId:
    def test_accepts_plain_ids(self) -> None:
        assert accept_trace_id("req-123.abc:9_Z") == "req-123.abc:9_Z"

    @pytest.mark.parametrize(
        "candidate",
        [None, "", "has space", "new\nline", "<script>", "x" * 129],
    )
    def test_rejects_unsafe(self, candidate: str | None) -> None:
        assert accept_trace_id(candidate) is None

    def test_max_length_accepted(self) -> None:
        assert accept_trace_id("x" * 128) == "x" * 128

    def test_header_name(self) -> None:
        assert TRACE_HEADER == "X-Trace-ID"


@pytest.mark.unit
class TestTraceContextManager:
    def test_default_is_empty(self) -> None:
        assert get_trace_id() == ""

    def test_sets_trace_id_within_scope(self) -> None:
        with trace_context("scope-1"):
            assert get_trace_id() == "scope-1"
        assert get_trace_id() == ""

    def test_auto_generates_uuid_when_none(self) -> None:
        with trace_context() as tid:
            UUID(tid, version=4)
            assert get_trace_id() == tid

    def test_replaces_unsafe_id(self) -> None:
        with trace_context("bad id with spaces") as tid:
            assert tid != "bad id with spaces"
            UUID(tid, version=4)

    def test_nested_contexts(self) -> None:
        with trace_context("level-1"):
            with trace_context("level-2"):
                assert get_trace_id() == "level-2"
            assert get_trace_id() == "level-1"

    def test_restored_after_exception(self) -> None:
        with pytest.raises(RuntimeError), trace_context("boom"):
            raise RuntimeError
        assert get_trace_id() == ""

    def test_context_var_is_shared(self) -> None:
        with trace_context("shared"):
            assert current_trace_id.get() == "shared"


class TestAsyncIsolation:
    async def test_concurrent_tasks_keep_their_own_id(self) -> None:
        async def worker(tid: str) -> str:
            with trace_context(tid):
                await asyncio.sleep(0)
                return get_trace_id()

        results = await asyncio.gather(worker("task-a"), worker("task-b"))
        assert results == ["task-a", "task-b"]
