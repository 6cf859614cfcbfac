"""sqlstencil: MySQL query templates with typed `?` parameters, and a small row mapper."""

from sqlstencil.adapters._base import ConnectionConfig, SqlDataType
from sqlstencil.client import MySqlClient
from sqlstencil.errors import (
    ArgumentError,
    ConfigurationError,
    ParameterCountError,
    SqlExecutionError,
    SqlStencilError,
    TypeMismatchError,
)

__all__ = [
    "ArgumentError",
    "ConfigurationError",
    "ConnectionConfig",
    "MySqlClient",
    "ParameterCountError",
    "SqlDataType",
    "SqlExecutionError",
    "SqlStencilError",
    "TypeMismatchError",
]
