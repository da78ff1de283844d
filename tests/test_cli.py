"""Tests for the command line entrypoints."""
from __future__ import annotations

import pytest
from typer.testing import CliRunner

import bootstrap
import cli
import provisioning.provisioner as provisioner
from core.config import Settings, get_settings
from core.exceptions import ConnectionExhaustedError, SQLExecutionError
from provisioning.provisioner import ProvisionResult

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Keep the CLI from reconfiguring the root logger during tests."""
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(bootstrap, "setup_logging", lambda **kwargs: None)


def test_provision_success(db_env, monkeypatch):
    result_value = ProvisionResult(
        attempts=1,
        tables_created=["timelines"],
        tables_existing=[],
        rows_inserted=23,
    )
    monkeypatch.setattr(provisioner, "run_provisioning", lambda settings: result_value)

    result = runner.invoke(cli.app, ["provision"])

    assert result.exit_code == 0
    assert "Database provisioned" in result.output
    assert "Timelines inserted: 23" in result.output


def test_provision_missing_config_exits_nonzero(no_db_env, monkeypatch):
    monkeypatch.setattr(cli, "get_settings", lambda: Settings(_env_file=None))

    result = runner.invoke(cli.app, ["provision"])

    assert result.exit_code == 1
    assert "VITE_AZURE_DB_HOST" in result.output
    assert "VITE_AZURE_DB_PASSWORD" in result.output


def test_provision_exhausted_exits_nonzero(db_env, monkeypatch):
    def fail(settings):
        raise ConnectionExhaustedError(3)

    monkeypatch.setattr(provisioner, "run_provisioning", fail)

    result = runner.invoke(cli.app, ["provision"])

    assert result.exit_code == 1
    assert "after 3 attempts" in result.output


def test_show_config_redacts_password(db_env):
    result = runner.invoke(cli.app, ["show-config"])

    assert result.exit_code == 0
    assert "db.example.com" in result.output
    assert "has_password: True" in result.output
    assert "s3cret" not in result.output


def test_show_config_missing_exits_nonzero(no_db_env, monkeypatch):
    monkeypatch.setattr(cli, "get_settings", lambda: Settings(_env_file=None))

    result = runner.invoke(cli.app, ["show-config"])

    assert result.exit_code == 1
    assert "Missing required environment variables" in result.output


def test_check_connection_failure(db_env, monkeypatch):
    def fail(config):
        raise ConnectionExhaustedError(3)

    monkeypatch.setattr(provisioner, "check_database", fail)

    result = runner.invoke(cli.app, ["check-connection"])

    assert result.exit_code == 1


def test_bootstrap_main_exits_on_failure(db_env, monkeypatch):
    def fail(settings):
        raise SQLExecutionError("create_schema", "42501", "permission denied")

    monkeypatch.setattr(bootstrap, "run_provisioning", fail)

    with pytest.raises(SystemExit) as exc_info:
        bootstrap.main()

    assert exc_info.value.code == 1


def test_bootstrap_main_success(db_env, monkeypatch):
    calls = []
    monkeypatch.setattr(bootstrap, "run_provisioning", calls.append)

    bootstrap.main()

    assert len(calls) == 1


def test_bootstrap_main_logs_invalid_log_level(db_env, monkeypatch, caplog):
    monkeypatch.setenv("LOG_LEVEL", "LOUD")
    get_settings.cache_clear()
    run = []
    monkeypatch.setattr(bootstrap, "run_provisioning", run.append)

    with caplog.at_level("CRITICAL", logger="bootstrap"):
        with pytest.raises(SystemExit) as exc_info:
            bootstrap.main()

    assert exc_info.value.code == 1
    assert "Fatal error" in caplog.text
    assert "log_level" in caplog.text
    assert run == []


def test_bootstrap_main_logs_unexpected_error(db_env, monkeypatch, caplog):
    def fail(settings):
        raise RuntimeError("driver crashed")

    monkeypatch.setattr(bootstrap, "run_provisioning", fail)

    with caplog.at_level("CRITICAL", logger="bootstrap"):
        with pytest.raises(SystemExit) as exc_info:
            bootstrap.main()

    assert exc_info.value.code == 1
    assert "Fatal error: driver crashed" in caplog.text


def test_cli_invalid_log_level_exits_nonzero(db_env, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "LOUD")
    get_settings.cache_clear()

    result = runner.invoke(cli.app, ["show-config"])

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_provision_unexpected_error_exits_nonzero(db_env, monkeypatch):
    def fail(settings):
        raise RuntimeError("driver crashed")

    monkeypatch.setattr(provisioner, "run_provisioning", fail)

    result = runner.invoke(cli.app, ["provision"])

    assert result.exit_code == 1
    assert "driver crashed" in result.output
