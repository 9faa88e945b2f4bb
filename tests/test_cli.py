"""Tests for the CLI entry points that do not need a database."""
import pytest
from typer.testing import CliRunner

from sensordb import cli
from sensordb.db import create

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_dsn_env(monkeypatch):
    monkeypatch.delenv("SENSORDB_DSN", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)


@pytest.fixture
def ddl_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(create, "create_sensors_table", lambda conn: calls.append("sensors"))
    monkeypatch.setattr(create, "create_sensor_data_hypertable", lambda conn: calls.append("sensor_data"))
    return calls


def test_run_without_dsn_exits_2(ddl_calls):
    result = runner.invoke(cli.app, ["run"])
    assert result.exit_code == 2
    assert ddl_calls == []


def test_run_with_invalid_dsn_exits_before_ddl(ddl_calls):
    result = runner.invoke(cli.app, ["run", "--dsn", "this is not a dsn"])
    assert result.exit_code == 1
    assert "Unable to create connection pool" in result.output
    assert "Successfully created" not in result.output
    assert ddl_calls == []


def test_run_invalid_dsn_from_environment(monkeypatch, ddl_calls):
    monkeypatch.setenv("DATABASE_URL", "this is not a dsn")
    result = runner.invoke(cli.app, ["run"])
    assert result.exit_code == 1
    assert ddl_calls == []


def test_run_rejects_unknown_generator():
    result = runner.invoke(cli.app, ["run", "--generator", "cloud", "--dsn", "postgresql://x"])
    assert result.exit_code == 2


def test_create_tables_dry_run_prints_ddl():
    result = runner.invoke(cli.app, ["create", "tables", "--dry-run"])
    assert result.exit_code == 0
    assert "CREATE TABLE IF NOT EXISTS sensors" in result.output
    assert "create_hypertable" in result.output


def test_query_with_invalid_dsn_exits_1():
    result = runner.invoke(cli.app, ["query", "cpu", "--dsn", "this is not a dsn"])
    assert result.exit_code == 1


def test_user_input_is_not_rendered_as_markup():
    result = runner.invoke(cli.app, ["run", "--generator", "[red]cloud", "--dsn", "postgresql://x"])
    assert result.exit_code == 2
    assert "Invalid generator: [red]cloud." in result.output


def test_progress_console_does_not_wrap():
    assert cli.console.soft_wrap is True
