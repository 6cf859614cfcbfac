"""Read-only access to .ini style configuration files."""

from __future__ import annotations

import configparser
from pathlib import Path

from sqlstencil.errors import ArgumentError, ConfigurationError


class ConfigurationSettings:
    """Sections and values of one .ini file, parsed on first access.

    Keys are case-insensitive, values are returned as strings with no
    interpolation.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        if not self._path.is_file():
            raise ArgumentError(f"Configuration file '{self._path}' does not exist")
        self._parser: configparser.ConfigParser | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> configparser.ConfigParser:
        if self._parser is None:
            parser = configparser.ConfigParser(interpolation=None)
            try:
                parser.read_string(self._path.read_text(), source=str(self._path))
            except configparser.Error as e:
                raise ConfigurationError(f"Cannot parse configuration file '{self._path}': {e}") from e
            self._parser = parser
        return self._parser

    def sections(self) -> list[str]:
        return self._load().sections()

    def get_section(self, name: str) -> dict[str, str] | None:
        parser = self._load()
        if not parser.has_section(name):
            return None
        return dict(parser.items(name))

    def get_value(self, section: str, key: str) -> str | None:
        parser = self._load()
        if not parser.has_section(section):
            return None
        return parser.get(section, key, fallback=None)
