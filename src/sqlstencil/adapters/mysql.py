"""MySQL driver using PyMySQL (blocking)."""

from __future__ import annotations

import contextlib

import pymysql
import pymysql.cursors

from sqlstencil.adapters._base import ConnectionConfig, DriverCursor
from sqlstencil.errors import SqlExecutionError


def _error_parts(e: pymysql.MySQLError) -> tuple[str, int]:
    """Split a PyMySQL error into (message, errno). Unknown codes are -1."""
    args = e.args
    if len(args) >= 2 and isinstance(args[0], int):
        return str(args[1]), args[0]
    if args:
        return str(args[0]), -1
    return type(e).__name__, -1


class MySqlDriver:
    """MySQL driver. One live connection, autocommit on."""

    def __init__(self) -> None:
        self._conn: pymysql.connections.Connection | None = None

    def connect(self, config: ConnectionConfig) -> None:
        # A session the server dropped is still held here; release it first.
        self.close()
        try:
            self._conn = pymysql.connect(
                host=config.hostname,
                user=config.username,
                password=config.password,
                database=config.database,
                port=config.port,
                charset=config.charset,
                autocommit=True,
                cursorclass=pymysql.cursors.DictCursor,
            )
        except pymysql.MySQLError as e:
            message, code = _error_parts(e)
            raise SqlExecutionError(f"MySQL connection failed: {message}", "", code) from e

    def close(self) -> None:
        if self._conn is not None:
            # The server may already have dropped the session.
            with contextlib.suppress(pymysql.err.Error):
                self._conn.close()
            self._conn = None

    def is_open(self) -> bool:
        return self._conn is not None and self._conn.open

    def _ensure_conn(self) -> pymysql.connections.Connection:
        if self._conn is None:
            raise SqlExecutionError("Cannot execute query as connection not open")
        return self._conn

    def execute(self, sql: str, *, stream: bool = False) -> DriverCursor:
        conn = self._ensure_conn()
        cursor = None
        try:
            # Reconnects a dropped session before running anything.
            conn.ping(reconnect=True)
            cursor_class = pymysql.cursors.SSDictCursor if stream else pymysql.cursors.DictCursor
            cursor = conn.cursor(cursor_class)
            cursor.execute(sql)
        except pymysql.MySQLError as e:
            if cursor is not None:
                cursor.close()
            message, code = _error_parts(e)
            raise SqlExecutionError(message, sql, code) from e
        return cursor

    def escape(self, value: str) -> str:
        return self._ensure_conn().escape_string(value)

    def last_insert_id(self) -> int:
        return int(self._ensure_conn().insert_id())
