"""Typed columns: one field's value plus its validation constraints."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from datetime import datetime

from sqlstencil.adapters._base import SqlDataType
from sqlstencil.coerce import as_datetime
from sqlstencil.errors import ArgumentError, TypeMismatchError

IDENTITY_COLUMN = "Id"


def is_identity_name(name: str) -> bool:
    return name.lower() == IDENTITY_COLUMN.lower()


@dataclass(frozen=True)
class ColumnOptions:
    not_null: bool = False  # value may not be None
    is_required: bool = False  # value must be set (strings, timestamps)
    min_length: int = 0  # string, text, data
    max_length: int = 0
    min_range: float = 0  # integer, float, timestamp (Unix seconds)
    max_range: float = 0


class Column(abc.ABC):
    """Base column. Subclasses pin data_type and enforce the value's runtime type."""

    data_type: SqlDataType

    def __init__(
        self,
        name: str,
        value: object = None,
        *,
        not_null: bool = False,
        is_required: bool = False,
        min_length: int = 0,
        max_length: int = 0,
        min_range: float | datetime = 0,
        max_range: float | datetime = 0,
    ) -> None:
        if not isinstance(name, str) or not name:
            raise ArgumentError("Column name must be a non-empty string")
        self._name = name
        self._value: object = None
        self.options = ColumnOptions(
            not_null=not_null,
            is_required=is_required,
            min_length=min_length,
            max_length=max_length,
            min_range=_range_number(min_range),
            max_range=_range_number(max_range),
        )
        if value is not None:
            self.set_value(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r}, {self._value!r})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def value(self) -> object:
        return self._value

    @property
    def is_identity(self) -> bool:
        return is_identity_name(self._name)

    def set_value(self, value: object) -> None:
        if value is not None:
            self._check(value)
        self._value = value

    @abc.abstractmethod
    def _check(self, value: object) -> None:
        """Raise TypeMismatchError unless value suits this column."""


def _range_number(value: float | datetime) -> float:
    if isinstance(value, datetime):
        return as_datetime(value).timestamp()
    return value


class _StringColumnBase(Column):
    def _check(self, value: object) -> None:
        if not isinstance(value, str):
            raise TypeMismatchError(self.name, "Value is not string")


class StringColumn(_StringColumnBase):
    """VARCHAR and friends."""

    data_type = SqlDataType.STRING


class TextColumn(_StringColumnBase):
    """TEXT: large blocks, markup preserved."""

    data_type = SqlDataType.TEXT


class DataColumn(Column):
    """BLOB/BINARY."""

    data_type = SqlDataType.DATA

    def _check(self, value: object) -> None:
        if not isinstance(value, bytes):
            raise TypeMismatchError(self.name, "Value is not binary data")


class IntegerColumn(Column):
    data_type = SqlDataType.INTEGER

    def _check(self, value: object) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeMismatchError(self.name, "Column is not integer")


class FloatColumn(Column):
    data_type = SqlDataType.FLOAT

    def _check(self, value: object) -> None:
        if not isinstance(value, float):
            raise TypeMismatchError(self.name, "Column is not float")


class BoolColumn(Column):
    """BIT/TINYINT(1)."""

    data_type = SqlDataType.BOOL

    def _check(self, value: object) -> None:
        if not isinstance(value, bool):
            raise TypeMismatchError(self.name, "Column is not boolean")


class TimestampColumn(Column):
    """DATETIME/TIMESTAMP. Any non-None input goes through as_datetime."""

    data_type = SqlDataType.TIMESTAMP

    def _check(self, value: object) -> None:
        if not isinstance(value, datetime):
            raise TypeMismatchError(self.name, "Column is not timestamp")

    def set_value(self, value: object) -> None:
        super().set_value(None if value is None else as_datetime(value))
