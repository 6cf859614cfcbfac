"""Shared helpers for the query, call and render commands."""

from __future__ import annotations

import sys

import click

from sqlstencil.adapters._base import ConnectionConfig, SqlDataType
from sqlstencil.connections import get_connection
from sqlstencil.errors import ArgumentError

NULL_VALUE = "\\N"

Params = list[tuple[SqlDataType, str | None]]

_TYPE_ALIASES = {
    "int": SqlDataType.INTEGER,
    "str": SqlDataType.STRING,
    "bool": SqlDataType.BOOL,
}


def resolve_sql_stdin(sql: str | None, from_stdin: bool) -> str:
    """Resolve SQL from positional argument or stdin. Exactly one source required."""
    if sql and from_stdin:
        raise click.UsageError("Provide SQL as an argument or --from-stdin, not both.")
    if from_stdin:
        if sys.stdin.isatty():
            raise click.UsageError("--from-stdin requires piped input (stdin is a terminal).")
        text = sys.stdin.read().strip()
        if not text:
            raise click.UsageError("--from-stdin: stdin was empty.")
        return text
    if not sql:
        raise click.UsageError("Missing argument 'SQL'. Provide SQL or use --from-stdin.")
    return sql


def parse_db(value: str) -> ConnectionConfig:
    """Resolve --db value: try named connection first, fall back to 'mysql:key=val,...'."""
    config = get_connection(value)
    if config is not None:
        return config

    if not value.startswith("mysql:"):
        raise click.BadParameter(
            f"Connection '{value}' not found in ~/.sqlstencil/connections.toml "
            f"and not in 'mysql:key=val,...' format.\n"
            f"  Add it: sqlstencil connect add {value} hostname=... username=... "
            f"password=... database=...",
            param_hint="'--db'",
        )

    params: dict[str, str] = {}
    params_str = value.split(":", 1)[1]
    if params_str:
        for part in params_str.split(","):
            if "=" not in part:
                raise click.BadParameter(
                    f"Expected key=value pair, got '{part}'",
                    param_hint="'--db'",
                )
            k, v = part.split("=", 1)
            params[k.strip()] = v.strip()

    try:
        return ConnectionConfig.from_params("mysql", params)
    except ArgumentError as e:
        raise click.BadParameter(str(e), param_hint="'--db'") from e


def parse_param(text: str) -> tuple[SqlDataType, str | None]:
    """Parse one TYPE:VALUE parameter. The value \\N binds SQL NULL."""
    if ":" not in text:
        raise click.BadParameter(f"Expected TYPE:VALUE, got '{text}'", param_hint="'-p'")
    type_name, value = text.split(":", 1)
    type_name = type_name.strip().lower()

    data_type = _TYPE_ALIASES.get(type_name)
    if data_type is None:
        try:
            data_type = SqlDataType(type_name)
        except ValueError as e:
            valid = ", ".join([t.value for t in SqlDataType] + list(_TYPE_ALIASES))
            raise click.BadParameter(
                f"Unknown parameter type '{type_name}'. Valid: {valid}",
                param_hint="'-p'",
            ) from e

    return data_type, None if value == NULL_VALUE else value


def parse_params(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]) -> Params:
    """Click callback for the repeatable -p/--param option."""
    return [parse_param(v) for v in values]


param_option = click.option(
    "-p",
    "--param",
    "params",
    multiple=True,
    callback=parse_params,
    metavar="TYPE:VALUE",
    help="Bind the next ? placeholder (repeatable). TYPE is string, integer, float, "
    "text, timestamp, bool or data; \\N binds NULL.",
)

format_option = click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"]),
    default="json",
    help="Output format.",
)
