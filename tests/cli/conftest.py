"""CLI fixtures: keep connections and query logs out of the real home directory."""

from __future__ import annotations

from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def isolated_home(tmp_path):
    with patch(
        "sqlstencil.connections._CONNECTIONS_FILE", tmp_path / "connections.toml"
    ), patch("sqlstencil.querylog._LOG_ROOT", tmp_path / "logs"):
        yield tmp_path


@pytest.fixture
def driver(fake_driver):
    """Route every MySqlClient the CLI builds to the FakeDriver."""
    with patch("sqlstencil.cli.query.MySqlDriver", return_value=fake_driver):
        yield fake_driver
