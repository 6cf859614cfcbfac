"""The `query` and `call` commands: classify, bind parameters, execute.

Reads run directly. Writes (DML/DDL) are refused unless --allow-write is
given; anything sqlglot cannot parse or classify is refused outright.
"""

from __future__ import annotations

import time
from typing import NoReturn

import click

from sqlstencil.adapters._base import ConnectionConfig
from sqlstencil.adapters.mysql import MySqlDriver
from sqlstencil.classify import StatementType, classify_sql
from sqlstencil.cli._output import format_error, format_rows
from sqlstencil.cli._shared import (
    Params,
    format_option,
    param_option,
    parse_db,
    resolve_sql_stdin,
)
from sqlstencil.client import MySqlClient
from sqlstencil.errors import ArgumentError, SqlStencilError
from sqlstencil.querylog import cleanup_old_logs, log_query

_WRITE_TYPES = {StatementType.DML, StatementType.DDL}
_REFUSED_TYPES = {StatementType.ADMIN, StatementType.UNKNOWN}


def _describe(params: Params) -> list[str]:
    return [f"{t.value}:{'NULL' if v is None else v}" for t, v in params]


def _resolve_config(db: str, output_format: str) -> ConnectionConfig:
    try:
        return parse_db(db)
    except click.BadParameter as e:
        click.echo(format_error(e.format_message(), output_format=output_format), err=True)
        raise SystemExit(1) from e


def _deny(sql: str, db: str, params: Params, reason: str, output_format: str,
          classification: StatementType | None = None) -> NoReturn:
    label = classification.value if classification else None
    click.echo(format_error(reason, output_format=output_format, classification=label))
    log_query(
        sql=sql,
        db=db,
        parameters=_describe(params),
        classification=label,
        blocked=True,
        error=reason,
    )
    raise SystemExit(1)


def _execute(
    config: ConnectionConfig,
    sql: str,
    params: Params,
    *,
    raw: bool,
    procedure: bool,
    classification: StatementType | None,
    output_format: str,
) -> int:
    """Run one statement or procedure call, print the result and log it. Returns exit code."""
    label = classification.value if classification else None
    effective_sql = None
    start = time.perf_counter()
    try:
        with MySqlClient(config, driver=MySqlDriver()) as db:
            for data_type, value in params:
                db.add_parameter(data_type, value)
            try:
                rows = db.procedure(sql) if procedure else db.query(sql, skip_parameters=raw)
            finally:
                effective_sql = db.last_sql
            row_count = db.affected_row_count
    except SqlStencilError as e:
        click.echo(format_error(str(e), output_format=output_format, classification=label),
                   err=output_format != "json")
        log_query(
            sql=sql,
            effective_sql=effective_sql,
            db=config.name,
            parameters=_describe(params),
            classification=label,
            error=str(e),
        )
        return 1

    duration_ms = (time.perf_counter() - start) * 1000
    click.echo(format_rows(
        rows,
        row_count=row_count,
        duration_ms=duration_ms,
        output_format=output_format,
        extra={"classification": label, "sql": effective_sql},
    ))
    log_query(
        sql=sql,
        effective_sql=effective_sql,
        db=config.name,
        parameters=_describe(params),
        classification=label,
        row_count=row_count,
        duration_ms=duration_ms,
    )
    return 0


@click.command()
@click.argument("sql", required=False, default=None)
@click.option("--from-stdin", is_flag=True, help="Read SQL from stdin instead of argument.")
@click.option("--db", required=True, envvar="SQLSTENCIL_DB",
              help="Connection name or mysql:key=val,...")
@param_option
@click.option("--raw", is_flag=True, help="Send the SQL as written, without substitution.")
@click.option("--allow-write", is_flag=True, help="Permit INSERT/UPDATE/DELETE and DDL.")
@format_option
def query(
    sql: str | None,
    from_stdin: bool,
    db: str,
    params: Params,
    raw: bool,
    allow_write: bool,
    output_format: str,
) -> None:
    """Run a SQL template against MySQL.

    Each ? is replaced, in order, by the next -p TYPE:VALUE as a correctly
    quoted and escaped literal.

    \b
    Example:
      sqlstencil query "select * from Users where Username=? and Type=?" \\
          --db shop -p string:foo -p integer:12345
    """
    cleanup_old_logs()
    sql = resolve_sql_stdin(sql, from_stdin)
    if raw and params:
        raise click.UsageError("--raw cannot be combined with -p/--param.")
    config = _resolve_config(db, output_format)

    try:
        classification = classify_sql(sql)
    except ArgumentError as e:
        _deny(sql, config.name, params, str(e), output_format)
    if classification in _REFUSED_TYPES:
        _deny(sql, config.name, params,
              f"{classification.value} statements are not supported", output_format,
              classification)
    if classification in _WRITE_TYPES and not allow_write:
        _deny(sql, config.name, params,
              f"{classification.value} statement refused; pass --allow-write to run it",
              output_format, classification)

    exit_code = _execute(
        config, sql, params,
        raw=raw, procedure=False, classification=classification, output_format=output_format,
    )
    if exit_code != 0:
        raise SystemExit(exit_code)


@click.command()
@click.argument("name")
@click.option("--db", required=True, envvar="SQLSTENCIL_DB",
              help="Connection name or mysql:key=val,...")
@param_option
@format_option
def call(name: str, db: str, params: Params, output_format: str) -> None:
    """Call stored procedure NAME with the -p parameters as its arguments."""
    cleanup_old_logs()
    config = _resolve_config(db, output_format)
    exit_code = _execute(
        config, name, params,
        raw=False, procedure=True, classification=None, output_format=output_format,
    )
    if exit_code != 0:
        raise SystemExit(exit_code)
