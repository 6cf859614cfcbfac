"""Named MySQL connections, kept in ~/.sqlstencil/connections.toml."""

from __future__ import annotations

import os
import stat
import tomllib
from pathlib import Path

from sqlstencil.adapters._base import ConnectionConfig
from sqlstencil.errors import ArgumentError

_CONNECTIONS_FILE = Path.home() / ".sqlstencil" / "connections.toml"


def _escape_toml_value(v: str) -> str:
    """Escape a string for safe inclusion in a TOML double-quoted value."""
    return v.replace("\\", "\\\\").replace('"', '\\"')


def _write_toml(data: dict[str, dict]) -> None:
    """Serialize connections to TOML; the file holds passwords so it is written 0600."""
    lines: list[str] = []
    for conn_name, entry in data.items():
        lines.append(f'["{_escape_toml_value(conn_name)}"]')
        for k, v in entry.items():
            if isinstance(v, int) and not isinstance(v, bool):
                lines.append(f"{k} = {v}")
            else:
                lines.append(f'{k} = "{_escape_toml_value(str(v))}"')
        lines.append("")

    _CONNECTIONS_FILE.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
    _CONNECTIONS_FILE.write_text("\n".join(lines))
    os.chmod(_CONNECTIONS_FILE, stat.S_IRUSR | stat.S_IWUSR)  # 0600


def _load_file() -> dict:
    if not _CONNECTIONS_FILE.exists():
        return {}
    return tomllib.loads(_CONNECTIONS_FILE.read_text())


def list_connections() -> dict[str, dict]:
    """Return all named connections as {name: {hostname, username, ...}}."""
    return _load_file()


def get_connection(name: str) -> ConnectionConfig | None:
    """Look up a named connection. Returns None if not found or incomplete."""
    data = _load_file()
    if name not in data:
        return None
    try:
        return ConnectionConfig.from_params(name, data[name])
    except ArgumentError:
        return None


def save_connection(name: str, params: dict[str, str]) -> Path:
    """Validate and save a named connection to the config file."""
    config = ConnectionConfig.from_params(name, params)
    data = _load_file()
    data[name] = {
        "hostname": config.hostname,
        "username": config.username,
        "password": config.password,
        "database": config.database,
        "port": config.port,
        "charset": config.charset,
    }
    _write_toml(data)
    return _CONNECTIONS_FILE


def remove_connection(name: str) -> bool:
    """Remove a named connection. Returns True if removed, False if not found."""
    data = _load_file()
    if name not in data:
        return False
    del data[name]
    if not data:
        _CONNECTIONS_FILE.unlink(missing_ok=True)
    else:
        _write_toml(data)
    return True
