"""Tests for the async DB engine and session factory.

Verifies that:
- create_db_engine() returns an AsyncEngine configured for asyncpg
- create_session_factory() keeps attributes readable after commit
"""

from __future__ import annotations

import pytest

from src.infra.db import create_db_engine, create_session_factory

_URL = "postgresql+asyncpg://u:p@localhost/test"


@pytest.mark.unit
class TestCreateDbEngine:
    def test_returns_async_engine(self) -> None:
        engine = create_db_engine(_URL)
        assert hasattr(engine, "begin")
        assert hasattr(engine, "dispose")
        assert "asyncpg" in str(engine.url)

    def test_pool_size_configurable(self) -> None:
        engine = create_db_engine(_URL, pool_size=5, max_overflow=10)
        assert engine.pool.size() == 5

    def test_echo_defaults_to_false(self) -> None:
        assert create_db_engine(_URL).echo is False


@pytest.mark.unit
class TestCreateSessionFactory:
    def test_returns_callable_factory(self) -> None:
        factory = create_session_factory(create_db_engine(_URL))
        assert callable(factory)

    def test_session_expire_on_commit_false(self) -> None:
        factory = create_session_factory(create_db_engine(_URL))
        assert factory.kw.get("expire_on_commit") is False
