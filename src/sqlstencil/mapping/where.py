"""Where and order clauses for RowMapper.query_select() / query_delete().

The canonical shape is an ordered sequence of WhereClause values plus one
group operator. Values under a single column are joined with the group
operator (OR unless told otherwise); distinct columns are always joined
with AND. One call cannot mix AND and OR groups.

    Where.from_mapping({"Colour": ["Red", "Blue"], "Size": 3})
    => (`Colour`=? or `Colour`=?) and `Size`=?

    Where.from_mapping({WHERE_GROUP_KEY: WHERE_AND, "Colour": ["Red", "Blue"]})
    => (`Colour`=? and `Colour`=?)
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from sqlstencil.errors import ArgumentError

WHERE_GROUP_KEY = "!where"
WHERE_AND = "!and"
WHERE_OR = "!or"


class WhereGroup(enum.Enum):
    AND = "and"
    OR = "or"


_GROUP_VALUES = {WHERE_AND: WhereGroup.AND, WHERE_OR: WhereGroup.OR}


@dataclass(frozen=True)
class WhereClause:
    column: str
    values: tuple[object, ...]


@dataclass(frozen=True)
class Where:
    clauses: tuple[WhereClause, ...] = ()
    group: WhereGroup = WhereGroup.OR

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, object]) -> Where:
        """Build from {column: value | [values]}, honouring the WHERE_GROUP_KEY control key."""
        group = WhereGroup.OR
        grouped: dict[str, list[object]] = {}
        for key, value in mapping.items():
            if not isinstance(key, str):
                raise ArgumentError(f"Where key must be a string, got {key!r}")
            if key == WHERE_GROUP_KEY:
                group = _parse_group(value)
                continue
            if isinstance(value, (list, tuple)):
                grouped.setdefault(key, []).extend(value)
            else:
                grouped.setdefault(key, []).append(value)
        return cls(_to_clauses(grouped), group)

    @classmethod
    def from_pairs(cls, pairs: Sequence[object]) -> Where:
        """Build from an alternating [column, value, column, value, ...] sequence.

        Repeating a column adds another value under it.
        """
        if len(pairs) % 2 != 0:
            raise ArgumentError(f"Missing value for key {pairs[-1]!r}")
        group = WhereGroup.OR
        grouped: dict[str, list[object]] = {}
        for key, value in zip(pairs[::2], pairs[1::2], strict=True):
            if not isinstance(key, str):
                raise ArgumentError(f"Where key must be a string, got {key!r}")
            if key == WHERE_GROUP_KEY:
                group = _parse_group(value)
                continue
            grouped.setdefault(key, []).append(value)
        return cls(_to_clauses(grouped), group)

    def __bool__(self) -> bool:
        return bool(self.clauses)


def _parse_group(value: object) -> WhereGroup:
    if isinstance(value, WhereGroup):
        return value
    group = _GROUP_VALUES.get(value) if isinstance(value, str) else None
    if group is None:
        raise ArgumentError(f"Unsupported where clause comparison {value!r}")
    return group


def _to_clauses(grouped: dict[str, list[object]]) -> tuple[WhereClause, ...]:
    return tuple(WhereClause(key, tuple(values)) for key, values in grouped.items() if values)


def as_where(where: Where | Mapping[str, object] | None) -> Where:
    if where is None:
        return Where()
    if isinstance(where, Where):
        return where
    if isinstance(where, Mapping):
        return Where.from_mapping(where)
    raise ArgumentError(f"Unsupported where clause shape: {type(where).__name__}")


@dataclass(frozen=True)
class OrderClause:
    column: str
    ascending: bool = True


def order_from_mapping(mapping: Mapping[str, bool]) -> tuple[OrderClause, ...]:
    """{column: ascending} -> order clauses, in mapping order."""
    return tuple(OrderClause(column, bool(ascending)) for column, ascending in mapping.items())


def as_order(
    order: Iterable[OrderClause] | Mapping[str, bool] | None,
) -> tuple[OrderClause, ...]:
    if order is None:
        return ()
    if isinstance(order, Mapping):
        return order_from_mapping(order)
    clauses = tuple(order)
    for clause in clauses:
        if not isinstance(clause, OrderClause):
            raise ArgumentError(f"Unsupported order clause: {clause!r}")
    return clauses
