"""Test the `connect` command group."""

from click.testing import CliRunner

from sqlstencil.cli import main
from sqlstencil.connections import get_connection


def test_add_list_remove():
    runner = CliRunner()
    result = runner.invoke(main, [
        "connect", "add", "shop",
        "hostname=localhost", "username=app", "password=hunter2", "database=shop",
    ])
    assert result.exit_code == 0, result.output
    assert "Saved connection 'shop'" in result.output
    assert get_connection("shop").username == "app"

    result = runner.invoke(main, ["connect", "list"])
    assert result.exit_code == 0
    assert "shop:" in result.output
    assert "password=****" in result.output
    assert "hunter2" not in result.output

    result = runner.invoke(main, ["connect", "remove", "shop"])
    assert result.exit_code == 0
    assert get_connection("shop") is None


def test_add_incomplete():
    result = CliRunner().invoke(main, ["connect", "add", "shop", "hostname=localhost"])
    assert result.exit_code != 0
    assert "Missing SQL credentials" in result.output


def test_add_bad_pair():
    result = CliRunner().invoke(main, ["connect", "add", "shop", "hostname"])
    assert result.exit_code != 0
    assert "Expected key=value" in result.output


def test_list_empty():
    result = CliRunner().invoke(main, ["connect", "list"])
    assert "No connections configured." in result.output


def test_remove_unknown():
    result = CliRunner().invoke(main, ["connect", "remove", "nope"])
    assert result.exit_code == 1
