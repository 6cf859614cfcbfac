"""Coercion helpers: turn loosely-typed input into guaranteed primitive values.

Every helper is best-effort and never raises for primitive input. Only
composite objects that have no sensible conversion raise ArgumentError.
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from email.utils import parsedate_to_datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlstencil.errors import ArgumentError
from sqlstencil.formatting import float_to_string, int_to_string

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

_TRUE_STRINGS = frozenset({"1", "true", "on", "yes"})
_MARKUP_RE = re.compile(r"<[^>]*>")
# Leading numeric prefix, as permissive numeric parsing reads "12abc" as 12.
_NUMBER_PREFIX_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _has_own_str(value: object) -> bool:
    return type(value).__str__ is not object.__str__


def as_string(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, float):
        return float_to_string(value)
    if isinstance(value, int):
        return int_to_string(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if not _has_own_str(value):
        raise ArgumentError(f"Cannot convert {type(value).__name__} to string")
    return str(value).strip()


def as_string_safe(value: object, strip_markup: bool = True) -> str:
    """Like as_string, but string input is trimmed and optionally stripped of <...> markup."""
    if value is None:
        return ""
    if not isinstance(value, str):
        return as_string(value)
    if strip_markup:
        value = _MARKUP_RE.sub("", value)
    return value.strip()


def _number_prefix(text: str) -> str | None:
    match = _NUMBER_PREFIX_RE.match(text.strip())
    return match.group(0) if match else None


def as_float(value: object) -> float:
    if isinstance(value, float):
        return value
    if value is None:
        return 0.0
    if isinstance(value, str):
        prefix = _number_prefix(value)
        return float(prefix) if prefix else 0.0
    if isinstance(value, (int, Decimal)):
        return float(value)
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise ArgumentError(f"Cannot convert {type(value).__name__} to float") from e


def as_int(value: object) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if value is None:
        return 0
    if isinstance(value, str):
        prefix = _number_prefix(value)
        if prefix is None:
            return 0
        try:
            return int(Decimal(prefix))
        except (InvalidOperation, OverflowError):
            return 0
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return 0
        return int(value)
    if isinstance(value, Decimal):
        return int(value) if value.is_finite() else 0
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError) as e:
        raise ArgumentError(f"Cannot convert {type(value).__name__} to integer") from e


def as_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if isinstance(value, (bytes, bytearray)):
        # BIT(n) columns arrive as big-endian bytes.
        return int.from_bytes(value, "big") != 0
    return bool(value)


def price_to_integer(price: object) -> int:
    """Convert a price such as "19.99" to whole minor units (1999).

    Goes through Decimal so 19.99 * 100 cannot come out as 1998.
    """
    amount = Decimal(repr(as_float(price))).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return int(amount * 100)


def as_bytes(value: object) -> bytes:
    if value is None:
        return b""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return as_string(value).encode("utf-8")


def resolve_timezone(name: str | tzinfo) -> tzinfo:
    """Map a timezone name to a tzinfo. GMT and UTC never need the tz database."""
    if isinstance(name, tzinfo):
        return name
    if name.upper() in ("GMT", "UTC", "Z"):
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ArgumentError(f"Unknown timezone '{name}'") from e


def _parse_datetime_text(text: str) -> datetime | None:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None


def as_datetime(value: object, timezone: str | tzinfo = "GMT") -> datetime:
    """Return value as an aware datetime in `timezone`. Anything unparseable is the epoch."""
    tz = resolve_timezone(timezone)

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=tz)
        return value.astimezone(tz)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=tz)
    if value is None or (isinstance(value, str) and not value.strip()):
        return EPOCH.astimezone(tz)

    if isinstance(value, str) and _NUMBER_PREFIX_RE.fullmatch(value.strip()):
        value = as_float(value)
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(int(value), tz=tz)
        except (OverflowError, OSError, ValueError):
            return EPOCH.astimezone(tz)

    if isinstance(value, str):
        parsed = _parse_datetime_text(value.strip())
        if parsed is None:
            return EPOCH.astimezone(tz)
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=tz)
        return parsed.astimezone(tz)

    return EPOCH.astimezone(tz)


def has_datetime(value: object) -> bool:
    """True if value is a datetime strictly after the epoch."""
    if not isinstance(value, datetime):
        return False
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value > EPOCH
