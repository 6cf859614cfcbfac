"""Number and currency formatting for display strings."""

from __future__ import annotations


def float_to_string(number: float) -> str:
    return f"{number:,.4f}"


def int_to_string(number: int) -> str:
    return f"{number:,}"


def currency_to_string(number: float, currency: str) -> str:
    return f"{currency} {number:,.2f}"

