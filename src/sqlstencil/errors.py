"""Exception hierarchy shared by every sqlstencil module."""

from __future__ import annotations


class SqlStencilError(Exception):
    """Base class for all sqlstencil errors."""


class ArgumentError(SqlStencilError):
    """Raised for malformed caller input (bad enum constant, bad clause shape, etc)."""


class ConfigurationError(SqlStencilError):
    """Raised when an operation needs state that has not been established yet."""


class TypeMismatchError(SqlStencilError):
    """Raised when a value's runtime type disagrees with its declared SqlDataType."""

    def __init__(self, column_key: str, message: str) -> None:
        super().__init__(f"{column_key}: {message}")
        self.column_key = column_key


class SqlExecutionError(SqlStencilError):
    """Raised for driver-reported failures. Carries the SQL text and driver error code."""

    def __init__(self, message: str, sql: str | None = None, code: int = -1) -> None:
        super().__init__(message)
        self.message = message
        self.sql = sql
        self.code = code

    def __str__(self) -> str:
        return f"{self.message} ({self.sql if self.sql is not None else '???'})"


class ParameterCountError(SqlStencilError):
    """Raised when placeholders and bound parameters do not pair up one to one."""

    def __init__(self, message: str, sql: str) -> None:
        super().__init__(message)
        self.sql = sql


class CacheError(SqlStencilError):
    """Raised by the disk cache for unreadable or corrupt entries."""


class MailMessageError(SqlStencilError):
    """Raised when a mail message is missing data required to send it."""
