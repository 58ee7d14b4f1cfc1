"""Fake SQLAlchemy async session and session factory for testing.

Real Python classes instead of AsyncMock/MagicMock. Supports the calls the
store adapters in src/infra/stores.py make:
- session.execute() -> FakeResult with scalar_one_or_none / fetchall / rowcount
- session.scalars() -> FakeScalarsResult with all()
- session.add() (sync) / commit() (async)
- async context manager protocol (__aenter__ / __aexit__)
- fault injection: ``fail_with`` makes execute()/scalars() raise

Usage:
    session = FakeAsyncSession()
    session.set_execute_results([FakeResult(fetchall_rows=[FakeOrmRow(level=2)])])
    store = PgRoleStore(session_factory=FakeSessionFactory(session))
"""

from __future__ import annotations

from typing import Any

_UNSET = object()


class FakeResult:
    """Fake result from session.execute()."""

    def __init__(
        self,
        *,
        scalar_one_or_none_value: Any = _UNSET,
        rowcount: int = 0,
        fetchall_rows: list[Any] | None = None,
    ) -> None:
        self._scalar_one_or_none_value = scalar_one_or_none_value
        self.rowcount = rowcount
        self._fetchall_rows = fetchall_rows or []

    def scalar_one_or_none(self) -> Any:
        if self._scalar_one_or_none_value is _UNSET:
            return None
        return self._scalar_one_or_none_value

    def fetchall(self) -> list[Any]:
        return list(self._fetchall_rows)


class FakeScalarsResult:
    """Fake result from session.scalars()."""

    def __init__(self, rows: list[Any] | None = None) -> None:
        self._rows = rows or []

    def all(self) -> list[Any]:
        return list(self._rows)


class FakeAsyncSession:
    """Fake AsyncSession recording statements and returning queued results."""

    def __init__(self, *, fail_with: Exception | None = None) -> None:
        self.added: list[Any] = []
        self.commit_count: int = 0
        self.statements: list[Any] = []
        self.fail_with = fail_with

        self._execute_results: list[FakeResult] = []
        self._scalars_result: FakeScalarsResult | None = None

    # -- Configuration methods (call before exercising SUT) --

    def set_execute_results(self, results: list[FakeResult]) -> None:
        """Queue execute() results, consumed in call order."""
        self._execute_results = list(results)

    def set_scalars_result(self, rows: list[Any]) -> None:
        """Configure what session.scalars() returns."""
        self._scalars_result = FakeScalarsResult(rows)

    # -- SQLAlchemy AsyncSession interface --

    def add(self, obj: Any) -> None:
        self.added.append(obj)

    async def commit(self) -> None:
        self.commit_count += 1

    async def execute(self, statement: Any, params: Any = None) -> FakeResult:
        self.statements.append(statement)
        if self.fail_with is not None:
            raise self.fail_with
        if self._execute_results:
            return self._execute_results.pop(0)
        return FakeResult()

    async def scalars(self, statement: Any) -> FakeScalarsResult:
        self.statements.append(statement)
        if self.fail_with is not None:
            raise self.fail_with
        return self._scalars_result or FakeScalarsResult()

    # -- Async context manager protocol --

    async def __aenter__(self) -> FakeAsyncSession:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        pass


class FakeSessionFactory:
    """Fake async_sessionmaker returning one preconfigured FakeAsyncSession."""

    def __init__(self, session: FakeAsyncSession) -> None:
        self.session = session
        self.calls = 0

    def __call__(self) -> FakeAsyncSession:
        self.calls += 1
        return self.session


class FakeOrmRow:
    """Attribute bag standing in for ORM instances and Row objects.

    Usage:
        row = FakeOrmRow(id=uuid4(), code="ADMIN", level=1)
    """

    def __init__(self, **kwargs: Any) -> None:
        for k, v in kwargs.items():
            setattr(self, k, v)
