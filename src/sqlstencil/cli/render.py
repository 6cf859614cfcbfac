"""The `render` command: expand a template locally, without a server."""

from __future__ import annotations

import click
from pymysql.converters import escape_string

from sqlstencil.cli._shared import Params, param_option, resolve_sql_stdin
from sqlstencil.errors import SqlStencilError
from sqlstencil.template import coerce_parameter, substitute


@click.command()
@click.argument("sql", required=False, default=None)
@click.option("--from-stdin", is_flag=True, help="Read SQL from stdin instead of argument.")
@param_option
def render(sql: str | None, from_stdin: bool, params: Params) -> None:
    """Print SQL with each ? replaced by the next -p TYPE:VALUE literal.

    Uses MySQL's default (backslash) escaping, so the output matches what
    `query` would send to a server without NO_BACKSLASH_ESCAPES.
    """
    sql = resolve_sql_stdin(sql, from_stdin)
    try:
        bound = [coerce_parameter(data_type, value) for data_type, value in params]
        click.echo(substitute(sql, bound, escape_string))
    except SqlStencilError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1) from e
