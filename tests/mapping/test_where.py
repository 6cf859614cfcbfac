"""Test where/order clause construction."""

import pytest

from sqlstencil.errors import ArgumentError
from sqlstencil.mapping.where import (
    WHERE_AND,
    WHERE_GROUP_KEY,
    OrderClause,
    Where,
    WhereClause,
    WhereGroup,
    as_order,
    as_where,
)


def test_from_mapping_groups_values():
    where = Where.from_mapping({"Colour": ["Red", "Blue"], "Size": 3})
    assert where.clauses == (
        WhereClause("Colour", ("Red", "Blue")),
        WhereClause("Size", (3,)),
    )
    assert where.group is WhereGroup.OR


def test_group_control_key():
    where = Where.from_mapping({WHERE_GROUP_KEY: WHERE_AND, "Colour": ["Red", "Blue"]})
    assert where.group is WhereGroup.AND
    assert [c.column for c in where.clauses] == ["Colour"]


def test_unsupported_group():
    with pytest.raises(ArgumentError, match="Unsupported where clause comparison"):
        Where.from_mapping({WHERE_GROUP_KEY: "!xor", "A": 1})


def test_from_pairs_repeats_collect():
    where = Where.from_pairs(["Colour", "Red", "Colour", "Blue", "Size", 3])
    assert where.clauses[0] == WhereClause("Colour", ("Red", "Blue"))
    assert where.clauses[1] == WhereClause("Size", (3,))


def test_from_pairs_odd_length():
    with pytest.raises(ArgumentError, match="Missing value"):
        Where.from_pairs(["Colour", "Red", "Size"])


def test_non_string_key():
    with pytest.raises(ArgumentError):
        Where.from_mapping({1: "x"})


def test_empty_where_is_falsy():
    assert not Where()
    assert not as_where(None)
    assert not Where.from_mapping({"A": []})


def test_as_where_rejects_other_shapes():
    with pytest.raises(ArgumentError):
        as_where(["A", 1])


def test_order_from_mapping():
    assert as_order({"Name": True, "Age": False}) == (
        OrderClause("Name", True),
        OrderClause("Age", False),
    )


def test_order_rejects_strings():
    with pytest.raises(ArgumentError):
        as_order(["Name"])
