"""Driver protocol: the abstraction boundary between the client and a SQL driver."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from sqlstencil.errors import ArgumentError

TOKEN_CHARACTER = "?"  # must be one character


class SqlDataType(enum.Enum):
    STRING = "string"  # fixed-size string (VARCHAR)
    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"  # large text block, markup preserved
    TIMESTAMP = "timestamp"  # date and time, stored as GMT
    BOOL = "bool"
    DATA = "data"  # binary blob


@dataclass
class ConnectionConfig:
    name: str
    hostname: str
    username: str
    password: str
    database: str
    port: int = 3306
    charset: str = "utf8mb4"

    _REQUIRED = ("hostname", "username", "password", "database")

    @classmethod
    def from_params(cls, name: str, params: Mapping[str, Any]) -> ConnectionConfig:
        """Build a config from loose key/value credentials.

        Raises ArgumentError when any of hostname, username, password or
        database is absent.
        """
        if not params:
            raise ArgumentError("Missing SQL credentials")
        missing = [key for key in cls._REQUIRED if key not in params]
        if missing:
            raise ArgumentError(f"Missing SQL credentials: {', '.join(missing)}")

        try:
            port = int(params.get("port", 3306))
        except (TypeError, ValueError) as e:
            raise ArgumentError(f"Invalid port '{params.get('port')}'") from e

        return cls(
            name=name,
            hostname=str(params["hostname"]),
            username=str(params["username"]),
            password=str(params["password"]),
            database=str(params["database"]),
            port=port,
            charset=str(params.get("charset", "utf8mb4")),
        )


@runtime_checkable
class DriverCursor(Protocol):
    """DB-API style cursor yielding rows as column-name -> value dicts."""

    @property
    def description(self) -> Any: ...
    @property
    def rowcount(self) -> int: ...
    def fetchone(self) -> dict[str, Any] | None: ...
    def fetchall(self) -> list[dict[str, Any]]: ...
    def close(self) -> None: ...


@runtime_checkable
class DataDriver(Protocol):
    def connect(self, config: ConnectionConfig) -> None: ...
    def close(self) -> None: ...
    def is_open(self) -> bool: ...
    def execute(self, sql: str, *, stream: bool = False) -> DriverCursor:
        """Run one statement.

        Buffered cursors hold the whole result set; with stream=True the
        result is read from the server one row per fetchone(). Raises
        SqlExecutionError carrying the driver message, code and SQL text.
        """
        ...
    def escape(self, value: str) -> str: ...
    def last_insert_id(self) -> int: ...
