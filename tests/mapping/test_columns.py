"""Test typed columns and their runtime type checks."""

from datetime import UTC, datetime

import pytest

from sqlstencil.adapters._base import SqlDataType
from sqlstencil.errors import ArgumentError, TypeMismatchError
from sqlstencil.mapping.columns import (
    BoolColumn,
    Column,
    DataColumn,
    FloatColumn,
    IntegerColumn,
    StringColumn,
    TextColumn,
    TimestampColumn,
)


@pytest.mark.parametrize(
    "column,good,bad",
    [
        (StringColumn("c"), "x", 1),
        (TextColumn("c"), "<p>x</p>", b"x"),
        (DataColumn("c"), b"\x00", "x"),
        (IntegerColumn("c"), 5, "5"),
        (FloatColumn("c"), 1.5, 1),
        (BoolColumn("c"), True, 1),
    ],
)
def test_value_type_enforced(column, good, bad):
    column.set_value(good)
    assert column.value == good
    with pytest.raises(TypeMismatchError) as info:
        column.set_value(bad)
    assert info.value.column_key == "c"
    assert column.value == good


def test_bool_is_not_an_integer():
    with pytest.raises(TypeMismatchError):
        IntegerColumn("c", True)


def test_none_always_allowed():
    column = IntegerColumn("c", 3, not_null=True)
    column.set_value(None)
    assert column.value is None


def test_initial_value_checked():
    with pytest.raises(TypeMismatchError):
        StringColumn("c", 12)


def test_timestamp_coerces_input():
    column = TimestampColumn("Created", "2024-03-01 12:30:00")
    assert column.value == datetime(2024, 3, 1, 12, 30, tzinfo=UTC)
    column.set_value(None)
    assert column.value is None


def test_timestamp_range_accepts_datetimes():
    column = TimestampColumn("Created", min_range=datetime(2000, 1, 1, tzinfo=UTC))
    assert column.options.min_range == 946684800


def test_data_types():
    assert StringColumn("c").data_type is SqlDataType.STRING
    assert TextColumn("c").data_type is SqlDataType.TEXT
    assert DataColumn("c").data_type is SqlDataType.DATA
    assert IntegerColumn("c").data_type is SqlDataType.INTEGER
    assert FloatColumn("c").data_type is SqlDataType.FLOAT
    assert BoolColumn("c").data_type is SqlDataType.BOOL
    assert TimestampColumn("c").data_type is SqlDataType.TIMESTAMP


def test_options_stored_for_every_type():
    column = IntegerColumn("Age", not_null=True, min_range=1, max_range=120)
    assert column.options.not_null
    assert (column.options.min_range, column.options.max_range) == (1, 120)


@pytest.mark.parametrize("name,identity", [("Id", True), ("ID", True), ("id", True), ("UserId", False)])
def test_identity_column(name, identity):
    assert IntegerColumn(name).is_identity is identity


def test_name_required():
    with pytest.raises(ArgumentError):
        StringColumn("")


def test_base_column_is_abstract():
    with pytest.raises(TypeError):
        Column("c")
