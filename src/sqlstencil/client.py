"""MySQL client: one blocking connection, pending parameters, `?` substitution.

Usage::

    with MySqlClient(config) as db:
        db.add_parameter(SqlDataType.STRING, "foo")
        db.add_parameter(SqlDataType.INTEGER, 12345)
        rows = db.query("select * from Users where Username=? and Type=?")
        # runs: select * from Users where Username='foo' and Type=12345

Not safe for concurrent use: pending parameters and the open cursor are
per-instance session state.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlstencil.adapters._base import ConnectionConfig, DataDriver, DriverCursor, SqlDataType
from sqlstencil.errors import ArgumentError, ConfigurationError
from sqlstencil.template import Parameter, build_call, coerce_parameter, substitute


def _default_driver() -> DataDriver:
    from sqlstencil.adapters.mysql import MySqlDriver

    return MySqlDriver()


class MySqlClient:
    def __init__(
        self,
        credentials: ConnectionConfig | Mapping[str, Any],
        driver: DataDriver | None = None,
    ) -> None:
        if isinstance(credentials, ConnectionConfig):
            self._config = credentials
        else:
            self._config = ConnectionConfig.from_params("mysql", credentials or {})
        self._driver = driver if driver is not None else _default_driver()
        self._params: list[Parameter] = []
        self._cursor: DriverCursor | None = None
        self._last_row_count = 0
        self._last_sql: str | None = None

    def __enter__(self) -> MySqlClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- Connection state -------------------------------------------------------

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    @property
    def has_connection(self) -> bool:
        return self._driver.is_open()

    def open(self) -> None:
        """Connect and select the schema/charset. No-op when already open."""
        if self.has_connection:
            return
        self._driver.connect(self._config)

    def close(self) -> None:
        """Release any open cursor and the connection. Safe to call when closed."""
        self._close_cursor()
        self._driver.close()

    def _close_cursor(self) -> None:
        if self._cursor is not None:
            cursor, self._cursor = self._cursor, None
            cursor.close()

    # -- Parameters -------------------------------------------------------------

    def add_parameter(self, data_type: SqlDataType, value: object) -> None:
        """Coerce value to data_type and queue it for the next query."""
        self._params.append(coerce_parameter(data_type, value))

    def new_query(self) -> None:
        """Reset parameters, open cursor and row count before an unrelated query."""
        self._params = []
        self._close_cursor()
        self._last_row_count = 0

    @property
    def pending_parameters(self) -> tuple[Parameter, ...]:
        return tuple(self._params)

    # -- Execution --------------------------------------------------------------

    def _take_parameters(self) -> list[Parameter]:
        params, self._params = self._params, []
        return params

    def _prepare(self, sql: str, skip_parameters: bool) -> str:
        params = self._take_parameters()
        self.open()
        self._close_cursor()
        if skip_parameters:
            return sql
        return substitute(sql, params, self._driver.escape)

    def _prepare_call(self, name: str) -> str:
        if not name:
            raise ArgumentError("Procedure name must be set")
        params = self._take_parameters()
        self.open()
        self._close_cursor()
        return build_call(name, params, self._driver.escape)

    def _execute(self, sql: str) -> list[dict[str, Any]]:
        self._last_sql = sql
        cursor = self._driver.execute(sql)
        try:
            if cursor.description is None:
                # INSERT/UPDATE/DELETE: no result set.
                self._last_row_count = cursor.rowcount
                return []
            rows = list(cursor.fetchall())
            self._last_row_count = len(rows)
            return rows
        finally:
            cursor.close()

    def _begin(self, sql: str) -> None:
        self._last_sql = sql
        self._cursor = self._driver.execute(sql, stream=True)
        self._last_row_count = 0

    def query(self, sql: str, skip_parameters: bool = False) -> list[dict[str, Any]]:
        """Run sql after substituting pending parameters; return all rows.

        Statements without a result set return [] and record the affected
        row count. Pending parameters are consumed whether or not the
        statement succeeds.
        """
        return self._execute(self._prepare(sql, skip_parameters))

    def begin_query(self, sql: str, skip_parameters: bool = False) -> None:
        """Like query(), but leaves the result open for next_row()."""
        self._begin(self._prepare(sql, skip_parameters))

    def next_row(self) -> dict[str, Any] | None:
        """Next row of the open result, or None once exhausted (the cursor is then released)."""
        if self._cursor is None:
            return None
        row = self._cursor.fetchone()
        if row is None:
            self._close_cursor()
            return None
        self._last_row_count += 1
        return row

    def procedure(self, name: str) -> list[dict[str, Any]]:
        """Call a stored procedure with the pending parameters as its arguments."""
        return self._execute(self._prepare_call(name))

    def begin_procedure(self, name: str) -> None:
        self._begin(self._prepare_call(name))

    # -- Session info -----------------------------------------------------------

    def last_id(self) -> int:
        """Auto-increment value generated by the last insert on this connection."""
        if not self.has_connection:
            raise ConfigurationError("Cannot read last insert id as connection not open")
        return self._driver.last_insert_id()

    @property
    def affected_row_count(self) -> int:
        return self._last_row_count

    @property
    def last_sql(self) -> str | None:
        return self._last_sql

    def escape_variable(self, value: str) -> str:
        """Driver-level escaping for hand-built SQL outside the parameter system."""
        if not self.has_connection:
            raise ConfigurationError("Cannot escape input as connection not open")
        return self._driver.escape(value)
