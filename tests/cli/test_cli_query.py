"""Test the `query` and `call` commands against a FakeDriver."""

import json

from click.testing import CliRunner

from sqlstencil.cli import main

DB = "mysql:hostname=localhost,username=app,password=secret,database=shop"


def _log_entries(home):
    files = list((home / "logs").glob("*/*.jsonl"))
    assert len(files) == 1
    return [json.loads(line) for line in files[0].read_text().splitlines()]


class TestQuery:
    def test_read_with_parameters(self, driver, isolated_home):
        driver.add_result([{"Id": 1, "Username": "foo"}])
        result = CliRunner().invoke(main, [
            "query", "select * from Users where Username=? and Type=?",
            "--db", DB, "-p", "string:foo", "-p", "int:12345",
        ])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["classification"] == "read"
        assert data["sql"] == "select * from Users where Username='foo' and Type=12345"
        assert data["columns"] == ["Id", "Username"]
        assert data["rows"] == [{"Id": 1, "Username": "foo"}]
        assert data["row_count"] == 1
        assert driver.executed == [data["sql"]]

        entry = _log_entries(isolated_home)[0]
        assert entry["db"] == "mysql"
        assert entry["parameters"] == ["string:foo", "integer:12345"]
        assert entry["effective_sql"] == data["sql"]
        assert entry["blocked"] is False

    def test_null_parameter(self, driver):
        result = CliRunner().invoke(main, [
            "query", "select * from t where a <=> ?", "--db", DB, "-p", "string:\\N",
        ])
        assert result.exit_code == 0, result.output
        assert driver.executed == ["select * from t where a <=> NULL"]

    def test_text_format(self, driver):
        driver.add_result([{"n": 1}, {"n": None}])
        result = CliRunner().invoke(main, ["query", "select n from t", "--db", DB, "--format", "text"])
        assert result.exit_code == 0
        assert "n" in result.output.splitlines()[0]
        assert "NULL" in result.output
        assert "(2 rows" in result.output

    def test_write_refused_without_flag(self, driver, isolated_home):
        result = CliRunner().invoke(main, [
            "query", "delete from Users where Id=?", "--db", DB, "-p", "integer:5",
        ])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["blocked"] is True
        assert data["classification"] == "dml"
        assert "--allow-write" in data["error"]
        assert driver.executed == []
        assert _log_entries(isolated_home)[0]["blocked"] is True

    def test_write_allowed_with_flag(self, driver):
        driver.add_result(None, rowcount=1)
        result = CliRunner().invoke(main, [
            "query", "delete from Users where Id=?", "--db", DB, "-p", "integer:5", "--allow-write",
        ])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["row_count"] == 1
        assert driver.executed == ["delete from Users where Id=5"]

    def test_admin_refused_even_with_flag(self, driver):
        result = CliRunner().invoke(main, [
            "query", "GRANT SELECT ON users TO readonly_role", "--db", DB, "--allow-write",
        ])
        assert result.exit_code == 1
        assert json.loads(result.output)["classification"] == "admin"
        assert driver.executed == []

    def test_multiple_statements_refused(self, driver):
        result = CliRunner().invoke(main, ["query", "select 1; drop table t", "--db", DB])
        assert result.exit_code == 1
        assert json.loads(result.output)["blocked"] is True
        assert driver.executed == []

    def test_parameter_count_error(self, driver, isolated_home):
        result = CliRunner().invoke(main, ["query", "select ?, ?", "--db", DB, "-p", "int:1"])
        assert result.exit_code == 1
        assert "Not enough parameters" in json.loads(result.output)["error"]
        assert "Not enough parameters" in _log_entries(isolated_home)[0]["error"]

    def test_server_error(self, driver):
        driver.add_error("Table 'shop.nope' doesn't exist", 1146)
        result = CliRunner().invoke(main, ["query", "select * from nope", "--db", DB])
        assert result.exit_code == 1
        assert "doesn't exist" in json.loads(result.output)["error"]

    def test_raw_skips_substitution(self, driver):
        result = CliRunner().invoke(main, ["query", "select '?'", "--db", DB, "--raw"])
        assert result.exit_code == 0, result.output
        assert driver.executed == ["select '?'"]

    def test_raw_with_params_is_usage_error(self, driver):
        result = CliRunner().invoke(main, ["query", "select ?", "--db", DB, "--raw", "-p", "int:1"])
        assert result.exit_code == 2

    def test_bad_parameter_type(self, driver):
        result = CliRunner().invoke(main, ["query", "select ?", "--db", DB, "-p", "varchar:x"])
        assert result.exit_code == 2
        assert "Unknown parameter type" in result.output

    def test_unknown_connection(self, driver):
        result = CliRunner().invoke(main, ["query", "select 1", "--db", "nope"])
        assert result.exit_code == 1
        assert driver.executed == []

    def test_named_connection(self, driver):
        runner = CliRunner()
        runner.invoke(main, [
            "connect", "add", "shop",
            "hostname=localhost", "username=app", "password=x", "database=shop",
        ])
        result = runner.invoke(main, ["query", "select 1", "--db", "shop"])
        assert result.exit_code == 0, result.output
        assert driver.connects == 1

    def test_from_stdin(self, driver):
        result = CliRunner().invoke(main, ["query", "--from-stdin", "--db", DB], input="select 7\n")
        assert result.exit_code == 0, result.output
        assert driver.executed == ["select 7"]


class TestCall:
    def test_call_procedure(self, driver):
        driver.add_result([{"ok": 1}])
        result = CliRunner().invoke(main, [
            "call", "add_user", "--db", DB, "-p", "string:bob", "-p", "bool:yes",
        ])
        assert result.exit_code == 0, result.output
        assert driver.executed == ["call `add_user`('bob', 1)"]
        assert json.loads(result.output)["rows"] == [{"ok": 1}]
