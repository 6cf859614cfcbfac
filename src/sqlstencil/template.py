"""Positional SQL templating: typed parameters, literal formatting, `?` substitution.

A template such as ``select * from Users where Username=? and Type=?`` is
expanded by formatting each bound parameter as a SQL literal and splicing it
over the next ``?``, strictly left to right. The number of placeholders and
parameters must match exactly.

Placeholder characters inside string values are swapped for a private
sentinel byte while the template is being expanded and swapped back at the
end, so a ``?`` in data is never mistaken for an unresolved token. Known
limitation: a sentinel byte present in the template itself comes back as
``?``. Data values are safe as long as the escape function does not pass the
sentinel through unchanged (MySQL escaping rewrites it as ``\\Z``).
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlstencil.adapters._base import TOKEN_CHARACTER, SqlDataType
from sqlstencil.coerce import (
    EPOCH,
    as_bool,
    as_bytes,
    as_datetime,
    as_float,
    as_int,
    as_string,
    as_string_safe,
)
from sqlstencil.errors import ArgumentError, ConfigurationError, ParameterCountError

SENTINEL = "\x1a"

Escape = Callable[[str], str]


@dataclass(frozen=True)
class Parameter:
    data_type: SqlDataType
    value: object


def coerce_parameter(data_type: SqlDataType, value: object) -> Parameter:
    """Coerce value to the Python carrier of data_type. None stays None (SQL NULL)."""
    if not isinstance(data_type, SqlDataType):
        raise ArgumentError(f"Invalid data type: {data_type!r}")
    if value is None:
        return Parameter(data_type, None)

    match data_type:
        case SqlDataType.STRING:
            value = as_string_safe(value)
        case SqlDataType.TEXT:
            value = as_string_safe(value, strip_markup=False)  # keep markup in text blocks
        case SqlDataType.INTEGER:
            value = as_int(value)
        case SqlDataType.FLOAT:
            value = as_float(value)
        case SqlDataType.BOOL:
            value = as_bool(value)
        case SqlDataType.TIMESTAMP:
            value = as_datetime(value)
        case SqlDataType.DATA:
            value = as_bytes(value)
    return Parameter(data_type, value)


def quote_identifier(name: str) -> str:
    return "`" + name.replace("`", "``") + "`"


def format_value(data_type: SqlDataType, value: object, escape: Escape) -> str:
    """Format one value as a SQL literal fragment for the declared type."""
    if not isinstance(data_type, SqlDataType):
        raise ConfigurationError(f"Unknown data type in parameter build: {data_type!r}")
    if value is None:
        return "NULL"

    match data_type:
        case SqlDataType.STRING | SqlDataType.TEXT:
            literal = "'" + escape(as_string(value)) + "'"
            return literal.replace(TOKEN_CHARACTER, SENTINEL)
        case SqlDataType.DATA:
            # Hex literal: binary-safe regardless of connection charset.
            return "X'" + as_bytes(value).hex().upper() + "'"
        case SqlDataType.INTEGER:
            return str(as_int(value))
        case SqlDataType.FLOAT:
            number = as_float(value)
            if not math.isfinite(number):
                raise ArgumentError(f"Cannot format non-finite float {number!r}")
            return f"{number:f}"
        case SqlDataType.BOOL:
            return "1" if as_bool(value) else "0"
        case SqlDataType.TIMESTAMP:
            moment = as_datetime(value, UTC)
            if moment == EPOCH:
                return "NULL"
            return "'" + render_datetime(moment) + "'"

    raise ConfigurationError(f"Unknown data type in parameter build: {data_type!r}")


def substitute(sql: str, parameters: Sequence[Parameter], escape: Escape) -> str:
    """Replace every placeholder in sql with the next parameter, left to right.

    Raises ParameterCountError before touching the template if the counts differ.
    """
    expected = sql.count(TOKEN_CHARACTER)
    if expected > len(parameters):
        raise ParameterCountError(
            f"Not enough parameters passed to query (expecting {expected}, got {len(parameters)})",
            sql,
        )
    if expected < len(parameters):
        raise ParameterCountError(
            f"Too many parameters passed to query (expecting {expected}, got {len(parameters)})",
            sql,
        )

    result = sql
    position = 0
    for param in parameters:
        position = result.find(TOKEN_CHARACTER, position)
        fragment = format_value(param.data_type, param.value, escape)
        result = result[:position] + fragment + result[position + 1 :]
        position += len(fragment)

    return result.replace(SENTINEL, TOKEN_CHARACTER)


def build_call(name: str, parameters: Sequence[Parameter], escape: Escape) -> str:
    """Build ``call `name`(v1, v2)`` with parameters appended positionally."""
    parts = [format_value(p.data_type, p.value, escape) for p in parameters]
    sql = f"call {quote_identifier(name)}({', '.join(parts)})"
    return sql.replace(SENTINEL, TOKEN_CHARACTER)


def render_datetime(moment: datetime) -> str:
    """GMT wall-clock text used for timestamp literals."""
    return moment.astimezone(UTC).strftime("%Y-%m-%d %H:%M:%S")
