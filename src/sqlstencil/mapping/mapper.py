"""RowMapper: typed columns <-> query parameters and result rows.

Entities hold a RowMapper rather than inheriting from one::

    class Widget:
        def __init__(self) -> None:
            self.row = RowMapper.for_entity(self)

        def table_name(self) -> str:
            return "widgets"

        def columns(self) -> list[Column]:
            return [
                IntegerColumn("Id"),
                StringColumn("Name", is_required=True, max_length=50),
                IntegerColumn("Age"),
            ]

        def create(self, db: MySqlClient) -> int:
            self.row.query_insert_into(db)
            return db.last_id()

A column named "Id" (any case) is the identity column: never written by
INSERT/UPDATE and never validated.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from datetime import datetime
from typing import Any, Protocol

from sqlstencil.adapters._base import TOKEN_CHARACTER, SqlDataType
from sqlstencil.coerce import (
    EPOCH,
    as_bool,
    as_bytes,
    as_datetime,
    as_float,
    as_int,
    as_string_safe,
)
from sqlstencil.errors import ArgumentError, ConfigurationError, TypeMismatchError
from sqlstencil.mapping.columns import Column
from sqlstencil.mapping.validation import ValidationError, ValidationErrorCode
from sqlstencil.mapping.where import OrderClause, Where, as_order, as_where
from sqlstencil.template import quote_identifier

_STRING_TYPES = (SqlDataType.STRING, SqlDataType.TEXT, SqlDataType.DATA)
_NUMBER_TYPES = (SqlDataType.INTEGER, SqlDataType.FLOAT)

_ZERO_VALUES: dict[SqlDataType, object] = {
    SqlDataType.STRING: "",
    SqlDataType.TEXT: "",
    SqlDataType.DATA: b"",
    SqlDataType.INTEGER: 0,
    SqlDataType.FLOAT: 0.0,
    SqlDataType.BOOL: False,
    SqlDataType.TIMESTAMP: EPOCH,
}


class QueryTarget(Protocol):
    """What the query builders need from a connection (MySqlClient satisfies it)."""

    def add_parameter(self, data_type: SqlDataType, value: object) -> None: ...
    def query(self, sql: str, skip_parameters: bool = False) -> list[dict[str, Any]]: ...


class Entity(Protocol):
    def table_name(self) -> str | None: ...
    def columns(self) -> Sequence[Column]: ...


LocalValidation = Callable[["RowMapper"], None]


class RowMapper:
    def __init__(
        self,
        columns: Iterable[Column] = (),
        table_name: str | None = None,
        local_validation: LocalValidation | None = None,
    ) -> None:
        self._columns: list[Column] = []
        self._table_name = table_name
        self._local_validation = local_validation
        self._validation_errors: list[ValidationError] | None = None
        self.add_columns(*columns)

    @classmethod
    def for_entity(cls, entity: Entity) -> RowMapper:
        """Wire a mapper from an entity's table_name(), columns() and optional local_validation()."""
        return cls(
            entity.columns(),
            entity.table_name(),
            getattr(entity, "local_validation", None),
        )

    # -- Columns ----------------------------------------------------------------

    def add_columns(self, *columns: Column) -> None:
        """Append columns. Declaration order drives the column order of generated SQL."""
        for col in columns:
            if not isinstance(col, Column):
                raise ArgumentError(f"Expected a Column, got {type(col).__name__}")
            if self.find_column(col.name) is not None:
                raise ArgumentError(f"Column '{col.name}' already declared")
            self._columns.append(col)

    @property
    def columns(self) -> tuple[Column, ...]:
        return tuple(self._columns)

    @property
    def table_name(self) -> str | None:
        return self._table_name

    @table_name.setter
    def table_name(self, name: str | None) -> None:
        self._table_name = name

    def find_column(self, key: str | None) -> Column | None:
        if key is None:
            return None
        for col in self._columns:
            if col.name == key:
                return col
        return None

    # -- Setters: unknown keys are ignored so optional columns can be skipped ---

    def set_string(
        self, key: str, value: object, strip_markup: bool = True, allow_null: bool = False
    ) -> None:
        col = self.find_column(key)
        if col is None:
            return
        col.set_value(None if allow_null and value is None else as_string_safe(value, strip_markup))

    def set_integer(self, key: str, value: object, allow_null: bool = False) -> None:
        col = self.find_column(key)
        if col is None:
            return
        col.set_value(None if allow_null and value is None else as_int(value))

    def set_float(self, key: str, value: object, allow_null: bool = False) -> None:
        col = self.find_column(key)
        if col is None:
            return
        col.set_value(None if allow_null and value is None else as_float(value))

    def set_boolean(self, key: str, value: object, allow_null: bool = False) -> None:
        col = self.find_column(key)
        if col is None:
            return
        col.set_value(None if allow_null and value is None else as_bool(value))

    def set_datetime(self, key: str, value: object, allow_null: bool = False) -> None:
        col = self.find_column(key)
        if col is None or col.data_type is not SqlDataType.TIMESTAMP:
            return
        col.set_value(None if allow_null and value is None else as_datetime(value))

    def set_data(self, key: str, value: object, allow_null: bool = False) -> None:
        col = self.find_column(key)
        if col is None or col.data_type is not SqlDataType.DATA:
            return
        col.set_value(None if allow_null and value is None else as_bytes(value))

    # -- Getters ----------------------------------------------------------------

    def _get_value(self, key: str, allow_null: bool) -> tuple[Column, object]:
        col = self.find_column(key)
        if col is None:
            raise ArgumentError(f"Column '{key}' does not exist")
        value = col.value
        if value is None and not allow_null:
            value = _ZERO_VALUES[col.data_type]
        return col, value

    def _get_typed(self, key: str, allow_null: bool, kind: type, label: str) -> Any:
        _, value = self._get_value(key, allow_null)
        if value is not None and (not isinstance(value, kind) or (kind is int and isinstance(value, bool))):
            raise TypeMismatchError(key, f"Column is not {label}")
        return value

    def get_string(self, key: str, allow_null: bool = False) -> str | None:
        return self._get_typed(key, allow_null, str, "a string")

    def get_integer(self, key: str, allow_null: bool = False) -> int | None:
        return self._get_typed(key, allow_null, int, "an integer")

    def get_float(self, key: str, allow_null: bool = False) -> float | None:
        return self._get_typed(key, allow_null, float, "a float")

    def get_boolean(self, key: str, allow_null: bool = False) -> bool | None:
        return self._get_typed(key, allow_null, bool, "a boolean")

    def get_datetime(self, key: str, allow_null: bool = False) -> datetime | None:
        return self._get_typed(key, allow_null, datetime, "a timestamp")

    def get_data(self, key: str, allow_null: bool = False) -> bytes | None:
        return self._get_typed(key, allow_null, bytes, "binary data")

    # -- Rows and parameters ----------------------------------------------------

    def add_columns_to_parameters(
        self, db: QueryTarget, keys: Iterable[str] | None = None, include: bool = False
    ) -> int:
        """Bind every column's (type, value) on db in declaration order, skipping the identity column.

        With keys, include=True binds only those columns; include=False skips them.
        Returns the number of parameters added.
        """
        selected = set(keys) if keys is not None else None
        added = 0
        for col in self._columns:
            if col.is_identity:
                continue
            if selected is not None and (col.name in selected) != include:
                continue
            db.add_parameter(col.data_type, col.value)
            added += 1
        return added

    def load_column_values(self, row: Mapping[str, object] | None) -> bool:
        """Copy values from a result row into matching columns through the typed setters.

        Returns False for an empty or missing row. Columns absent from the row
        keep their current value.
        """
        if not row:
            return False
        for col in self._columns:
            if col.name not in row:
                continue
            value = row[col.name]
            match col.data_type:
                case SqlDataType.STRING | SqlDataType.TEXT:
                    self.set_string(col.name, value, strip_markup=False, allow_null=True)
                case SqlDataType.INTEGER:
                    self.set_integer(col.name, value, allow_null=True)
                case SqlDataType.FLOAT:
                    self.set_float(col.name, value, allow_null=True)
                case SqlDataType.BOOL:
                    self.set_boolean(col.name, value, allow_null=True)
                case SqlDataType.TIMESTAMP:
                    self.set_datetime(col.name, value, allow_null=True)
                case SqlDataType.DATA:
                    self.set_data(col.name, value, allow_null=True)
        return True

    # -- Validation -------------------------------------------------------------

    def do_validation(
        self, column_filter: Iterable[str] | None = None, stop_on_first_error: bool = False
    ) -> bool:
        """Check every declared column against its options, then run local validation.

        The identity column and columns outside column_filter are skipped.
        With stop_on_first_error the pass ends at the first finding and local
        validation does not run. Returns True if any error was found.
        """
        self._validation_errors = []
        if not self._columns:
            raise ConfigurationError("No columns to validate")

        wanted = set(column_filter) if column_filter is not None else None
        for col in self._columns:
            if col.is_identity:
                continue
            if wanted is not None and col.name not in wanted:
                continue
            for code in _column_findings(col):
                self._add_validation_error(col.name, code)
                if stop_on_first_error:
                    return True

        if self._local_validation is not None:
            self._local_validation(self)
        return self.has_validation_errors

    def _add_validation_error(
        self, key: str, code: ValidationErrorCode, message: str | None = None
    ) -> None:
        if self._validation_errors is None:
            raise ConfigurationError("Initial validation not performed first")
        self._validation_errors.append(ValidationError(key, code, message))

    def add_custom_validation_error(self, column: str, message: str) -> None:
        """Record an object-specific finding. Only valid during or after do_validation()."""
        self._add_validation_error(column, ValidationErrorCode.CUSTOM_ERROR, message)

    @property
    def has_validation_errors(self) -> bool:
        return bool(self._validation_errors)

    @property
    def validation_errors(self) -> tuple[ValidationError, ...]:
        return tuple(self._validation_errors or ())

    # -- SQL building -----------------------------------------------------------

    def column_names(
        self,
        skip_keys: Iterable[str] | None = None,
        skip_identity: bool = True,
        ticks: bool = True,
    ) -> list[str]:
        skipped = set(skip_keys) if skip_keys is not None else set()
        names = []
        for col in self._columns:
            if (skip_identity and col.is_identity) or col.name in skipped:
                continue
            names.append(quote_identifier(col.name) if ticks else col.name)
        return names

    def all_column_names(self, ticks: bool = True) -> list[str]:
        """Every declared column, identity included, e.g. for a hand-written SELECT list."""
        return self.column_names(skip_identity=False, ticks=ticks)

    def _require_table_name(self, table_name: str | None) -> str:
        if table_name:
            return table_name
        if not self._table_name:
            raise ConfigurationError("Table name not set")
        return self._table_name

    def query_insert_into(
        self, db: QueryTarget, table_name: str | None = None, skip_keys: Iterable[str] | None = None
    ) -> list[dict[str, Any]]:
        """insert into `table` (`A`,`B`) values (?,?) with the columns bound in order."""
        table = self._require_table_name(table_name)
        skip = list(skip_keys) if skip_keys is not None else None
        names = self.column_names(skip)
        values = ",".join(TOKEN_CHARACTER * len(names))
        sql = f"insert into {quote_identifier(table)} ({','.join(names)}) values ({values})"
        self.add_columns_to_parameters(db, skip, include=False)
        return db.query(sql)

    def query_update(
        self,
        db: QueryTarget,
        table_name: str | None = None,
        where_column: str | None = None,
        skip_keys: Iterable[str] | None = None,
    ) -> list[dict[str, Any]]:
        """update `table` set `A`=?,`B`=? [where `key`=?]. No where_column updates every row."""
        table = self._require_table_name(table_name)
        where = None
        if where_column is not None:
            where = self.find_column(where_column)
            if where is None:
                raise ArgumentError(f"Invalid where column '{where_column}'")

        skip = list(skip_keys) if skip_keys is not None else None
        sets = [f"{name}={TOKEN_CHARACTER}" for name in self.column_names(skip)]
        sql = f"update {quote_identifier(table)} set {','.join(sets)}"
        self.add_columns_to_parameters(db, skip, include=False)
        if where is not None:
            db.add_parameter(where.data_type, where.value)
            sql += f" where {quote_identifier(where.name)}={TOKEN_CHARACTER}"
        return db.query(sql)

    def _where_sql(self, db: QueryTarget, where: Where | Mapping[str, object] | None, table: str) -> str:
        clauses = as_where(where)
        if not clauses:
            return ""

        separator = f" {clauses.group.value} "
        fragments: list[str] = []
        bound: list[tuple[SqlDataType, object]] = []
        for clause in clauses.clauses:
            col = self.find_column(clause.column)
            if col is None:
                # Querying our own table with an unknown key is a programming error.
                if table == self._table_name:
                    raise ArgumentError(f"Invalid where key '{clause.column}'")
                data_type = SqlDataType.STRING
            else:
                data_type = col.data_type

            name = quote_identifier(clause.column)
            predicates = []
            for value in clause.values:
                if value is None:
                    predicates.append(f"{name} is NULL")
                else:
                    bound.append((data_type, value))
                    predicates.append(f"{name}={TOKEN_CHARACTER}")
            if len(predicates) > 1:
                fragments.append(f"({separator.join(predicates)})")
            else:
                fragments.append(predicates[0])

        for data_type, value in bound:
            db.add_parameter(data_type, value)
        return " where " + " and ".join(fragments)

    def query_select(
        self,
        db: QueryTarget,
        where: Where | Mapping[str, object] | None = None,
        order: Iterable[OrderClause] | Mapping[str, bool] | None = None,
        table_name: str | None = None,
        skip_keys: Iterable[str] | None = None,
    ) -> list[dict[str, Any]]:
        """select * from `table` [where ...] [order by ...].

        With skip_keys the remaining columns (identity included) are listed
        instead of *. Intended for simple queries only.
        """
        table = self._require_table_name(table_name)
        if skip_keys is not None:
            select_list = ",".join(self.column_names(skip_keys, skip_identity=False))
        else:
            select_list = "*"

        sql = f"select {select_list} from {quote_identifier(table)}"
        sql += self._where_sql(db, where, table)

        orders = [
            f"{quote_identifier(o.column)} {'ASC' if o.ascending else 'DESC'}"
            for o in as_order(order)
        ]
        if orders:
            sql += " order by " + ", ".join(orders)
        return db.query(sql)

    def query_delete(
        self,
        db: QueryTarget,
        where: Where | Mapping[str, object] | None = None,
        table_name: str | None = None,
    ) -> list[dict[str, Any]]:
        """delete from `table` [where ...]. No where clause deletes every row."""
        table = self._require_table_name(table_name)
        sql = f"delete from {quote_identifier(table)}" + self._where_sql(db, where, table)
        return db.query(sql)


def _column_findings(col: Column) -> Iterator[ValidationErrorCode]:
    """Yield each failed check for one column, in check order."""
    opts = col.options
    value = col.value
    data_type = col.data_type

    if opts.not_null and value is None:
        yield ValidationErrorCode.VALUE_CANNOT_BE_NULL
        return

    if opts.is_required:
        if data_type in (SqlDataType.STRING, SqlDataType.TEXT) and not value:
            yield ValidationErrorCode.VALUE_IS_NOT_SET
        elif data_type is SqlDataType.TIMESTAMP and as_datetime(value) == EPOCH:
            yield ValidationErrorCode.VALUE_IS_NOT_SET

    if data_type in _STRING_TYPES:
        length = len(value) if value is not None else 0  # type: ignore[arg-type]
        if opts.max_length > 0 and length > opts.max_length:
            yield ValidationErrorCode.VALUE_LENGTH_TOO_LONG
        # Empty values are the required check's business, not a length failure.
        if opts.min_length > 0 and 0 < length < opts.min_length:
            yield ValidationErrorCode.VALUE_LENGTH_TOO_SHORT

    if data_type in _NUMBER_TYPES:
        yield from _range_findings(col, float(value) if value is not None else 0.0)  # type: ignore[arg-type]
    elif data_type is SqlDataType.TIMESTAMP:
        moment = value.timestamp() if isinstance(value, datetime) else 0.0
        yield from _range_findings(col, moment)


def _range_findings(col: Column, number: float) -> Iterator[ValidationErrorCode]:
    low, high = col.options.min_range, col.options.max_range
    if low == 0 and high == 0:
        return
    if high != 0 and number > high:
        yield ValidationErrorCode.VALUE_OUT_OF_RANGE
    if number < low:
        yield ValidationErrorCode.VALUE_OUT_OF_RANGE
