"""Test the `render` and `password` commands."""

from click.testing import CliRunner

from sqlstencil.cli import main


def test_render():
    result = CliRunner().invoke(main, [
        "render", "select * from Users where Username=? and Type=? and Active=?",
        "-p", "str:O'Brien", "-p", "integer:12", "-p", "bool:true",
    ])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == (
        "select * from Users where Username='O\\'Brien' and Type=12 and Active=1"
    )


def test_render_placeholder_in_value():
    result = CliRunner().invoke(main, ["render", "select ?, ?", "-p", "string:what?", "-p", "float:1.5"])
    assert result.output.strip() == "select 'what?', 1.500000"


def test_render_count_mismatch():
    result = CliRunner().invoke(main, ["render", "select ?"])
    assert result.exit_code == 1
    assert "Not enough parameters" in result.output


def test_password():
    result = CliRunner().invoke(main, ["password", "--length", "10", "--number", "--count", "3"])
    assert result.exit_code == 0
    lines = result.output.split()
    assert len(lines) == 3
    assert all(len(line) == 12 for line in lines)


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "version" in result.output
