"""Driver boundary: data types, connection credentials and the driver protocol."""

from sqlstencil.adapters._base import (
    TOKEN_CHARACTER,
    ConnectionConfig,
    DataDriver,
    DriverCursor,
    SqlDataType,
)

__all__ = [
    "TOKEN_CHARACTER",
    "ConnectionConfig",
    "DataDriver",
    "DriverCursor",
    "SqlDataType",
]
