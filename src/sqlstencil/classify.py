"""Classify SQL templates by statement type (READ, DML, DDL) before they run."""

from __future__ import annotations

import enum

import sqlglot
from sqlglot import exp
from sqlglot.errors import ParseError

from sqlstencil.errors import ArgumentError

DIALECT = "mysql"


class StatementType(enum.Enum):
    READ = "read"
    DML = "dml"
    DDL = "ddl"
    ADMIN = "admin"  # GRANT, CALL, SET, raw commands
    UNKNOWN = "unknown"


_READ_TYPES = (exp.Select, exp.Union, exp.Intersect, exp.Except, exp.Show, exp.Describe)
_DML_TYPES = (exp.Insert, exp.Update, exp.Delete, exp.Merge)
_DDL_TYPES = (exp.Create, exp.Drop, exp.Alter, exp.TruncateTable)
_ADMIN_TYPES = (exp.Grant, exp.Copy, exp.Command)


def _has_dml_in_cte(statement: exp.Expression) -> bool:
    return any(isinstance(cte.this, _DML_TYPES) for cte in statement.find_all(exp.CTE))


def _has_into(statement: exp.Expression) -> bool:
    """SELECT ... INTO creates a table despite being a SELECT."""
    return isinstance(statement, exp.Select) and statement.find(exp.Into) is not None


def classify(statement: exp.Expression) -> StatementType:
    """Classify one parsed statement. Anything not positively a READ is a write or UNKNOWN."""
    if isinstance(statement, _ADMIN_TYPES):
        return StatementType.ADMIN
    if isinstance(statement, _READ_TYPES):
        if _has_dml_in_cte(statement):
            return StatementType.DML
        if _has_into(statement):
            return StatementType.DDL
        return StatementType.READ
    if isinstance(statement, _DML_TYPES):
        return StatementType.DML
    if isinstance(statement, _DDL_TYPES):
        return StatementType.DDL
    return StatementType.UNKNOWN


def classify_sql(sql: str) -> StatementType:
    """Parse a template (``?`` placeholders allowed) and classify it.

    Raises ArgumentError when sqlglot cannot parse the text or finds more
    than one statement.
    """
    try:
        statements = [s for s in sqlglot.parse(sql, read=DIALECT) if s is not None]
    except ParseError as e:
        raise ArgumentError(f"Cannot parse SQL: {e}") from e
    if not statements:
        raise ArgumentError("No SQL statement given")
    if len(statements) > 1:
        raise ArgumentError(f"Expected one statement, got {len(statements)}")
    return classify(statements[0])
