"""Typed columns, validation findings and the RowMapper query builders."""

from sqlstencil.mapping.columns import (
    IDENTITY_COLUMN,
    BoolColumn,
    Column,
    ColumnOptions,
    DataColumn,
    FloatColumn,
    IntegerColumn,
    StringColumn,
    TextColumn,
    TimestampColumn,
)
from sqlstencil.mapping.mapper import Entity, QueryTarget, RowMapper
from sqlstencil.mapping.validation import ValidationError, ValidationErrorCode
from sqlstencil.mapping.where import (
    WHERE_AND,
    WHERE_GROUP_KEY,
    WHERE_OR,
    OrderClause,
    Where,
    WhereClause,
    WhereGroup,
)

__all__ = [
    "IDENTITY_COLUMN",
    "WHERE_AND",
    "WHERE_GROUP_KEY",
    "WHERE_OR",
    "BoolColumn",
    "Column",
    "ColumnOptions",
    "DataColumn",
    "Entity",
    "FloatColumn",
    "IntegerColumn",
    "OrderClause",
    "QueryTarget",
    "RowMapper",
    "StringColumn",
    "TextColumn",
    "TimestampColumn",
    "ValidationError",
    "ValidationErrorCode",
    "Where",
    "WhereClause",
    "WhereGroup",
]
