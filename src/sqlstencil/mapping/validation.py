"""Validation findings produced by RowMapper.do_validation().

Findings are data, never raised.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class ValidationErrorCode(enum.IntEnum):
    UNDEFINED = 0
    COLUMN_NOT_SPECIFIED = 1
    VALUE_CANNOT_BE_NULL = 2
    VALUE_IS_NOT_SET = 3
    VALUE_OUT_OF_RANGE = 4
    VALUE_LENGTH_TOO_SHORT = 5
    VALUE_LENGTH_TOO_LONG = 6
    CUSTOM_ERROR = 666


_DESCRIPTIONS: dict[ValidationErrorCode, str] = {
    ValidationErrorCode.COLUMN_NOT_SPECIFIED: "The specified column has not been defined.",
    ValidationErrorCode.VALUE_CANNOT_BE_NULL: "Value must be set.",
    ValidationErrorCode.VALUE_IS_NOT_SET: "Value has not been specified.",
    ValidationErrorCode.VALUE_OUT_OF_RANGE: "Value is out of the allowed range.",
    ValidationErrorCode.VALUE_LENGTH_TOO_SHORT: "Value is too short.",
    ValidationErrorCode.VALUE_LENGTH_TOO_LONG: "Value has too many characters.",
}


@dataclass(frozen=True)
class ValidationError:
    column_key: str
    code: ValidationErrorCode
    custom_message: str | None = None

    @property
    def message(self) -> str:
        if self.custom_message is not None:
            return self.custom_message
        return _DESCRIPTIONS.get(self.code, "Undefined validation error.")

    def __str__(self) -> str:
        return f"{self.column_key}: {self.message}"
