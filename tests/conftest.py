"""Root conftest: shared fixtures and markers."""

from __future__ import annotations

import os
from typing import Any

import pytest
from pymysql.converters import escape_string

from sqlstencil.adapters._base import ConnectionConfig
from sqlstencil.errors import SqlExecutionError


def pytest_configure(config):
    config.addinivalue_line("markers", "mysql: requires a running MySQL server")


def pytest_collection_modifyitems(config, items):
    if os.environ.get("SQLSTENCIL_TEST_MYSQL"):
        return

    skip_mysql = pytest.mark.skip(reason="MySQL not available (set SQLSTENCIL_TEST_MYSQL=1)")
    for item in items:
        if "mysql" in item.keywords:
            item.add_marker(skip_mysql)


class FakeCursor:
    def __init__(self, rows: list[dict[str, Any]] | None, rowcount: int = 0) -> None:
        self._rows = list(rows) if rows is not None else []
        self.description = [(k,) for k in self._rows[0]] if rows else (() if rows is not None else None)
        self.rowcount = len(self._rows) if rows is not None else rowcount
        self.closed = False

    def fetchone(self) -> dict[str, Any] | None:
        return self._rows.pop(0) if self._rows else None

    def fetchall(self) -> list[dict[str, Any]]:
        rows, self._rows = self._rows, []
        return rows

    def close(self) -> None:
        self.closed = True


class FakeDriver:
    """In-memory stand-in for MySqlDriver.

    Queue results with add_result(); every executed statement is recorded
    in .executed. Escaping is PyMySQL's own, so literals match a real server.
    """

    def __init__(self) -> None:
        self.executed: list[str] = []
        self.streamed: list[bool] = []
        self.cursors: list[FakeCursor] = []
        self.connects = 0
        self.closes = 0
        self.insert_id = 0
        self._open = False
        self._results: list[FakeCursor | SqlExecutionError] = []

    def add_result(self, rows: list[dict[str, Any]] | None = None, rowcount: int = 0) -> None:
        """rows=None queues a statement without a result set (INSERT/UPDATE/DELETE)."""
        self._results.append(FakeCursor(rows, rowcount))

    def add_error(self, message: str, code: int = 1064) -> None:
        self._results.append(SqlExecutionError(message, None, code))

    def connect(self, config: ConnectionConfig) -> None:
        self.connects += 1
        self._open = True

    def close(self) -> None:
        self.closes += 1
        self._open = False

    def is_open(self) -> bool:
        return self._open

    def execute(self, sql: str, *, stream: bool = False) -> FakeCursor:
        if not self._open:
            raise SqlExecutionError("Cannot execute query as connection not open")
        self.executed.append(sql)
        self.streamed.append(stream)
        result = self._results.pop(0) if self._results else FakeCursor(None)
        if isinstance(result, SqlExecutionError):
            raise SqlExecutionError(result.message, sql, result.code)
        self.cursors.append(result)
        return result

    def escape(self, value: str) -> str:
        return escape_string(value)

    def last_insert_id(self) -> int:
        return self.insert_id


@pytest.fixture
def credentials() -> dict[str, str]:
    return {
        "hostname": "localhost",
        "username": "app",
        "password": "secret",
        "database": "shop",
    }


@pytest.fixture
def fake_driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def db(credentials, fake_driver):
    """MySqlClient wired to a FakeDriver."""
    from sqlstencil.client import MySqlClient

    client = MySqlClient(credentials, driver=fake_driver)
    yield client
    client.close()
