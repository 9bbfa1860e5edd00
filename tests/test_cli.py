import shlex
import sys

import pytest
from typer.testing import CliRunner

from forkdemo.cli import cli as cli_module
from forkdemo.cli.commands import demo as demo_commands
from forkdemo.core.errors import ConfigurationError
from forkdemo.core.process import CommandError, CommandOutcome
from forkdemo.core.demo import DemoReport
from forkdemo.core.services import Fork


@pytest.fixture
def runner(tmp_path, monkeypatch) -> CliRunner:
    # Keep a developer's ./.env out of the tests.
    monkeypatch.chdir(tmp_path)
    # setenv first so teardown also removes values load_dotenv adds later.
    for name in ("MAIN_DB", "TIGER_SERVICE_ID", "TIGER_SERVICE", "TIGER_FORK_NAME"):
        monkeypatch.setenv(name, "unset")
        monkeypatch.delenv(name)
    return CliRunner()


def test_help_lists_commands(runner: CliRunner):
    result = runner.invoke(cli_module.app, ["--help"])
    assert result.exit_code == 0
    for command in ("run", "config", "delete"):
        assert command in result.output


def test_config_shows_source(runner: CliRunner):
    result = runner.invoke(cli_module.app, ["config"], env={"MAIN_DB": "svc1"})
    assert result.exit_code == 0
    assert "svc1" in result.output


def test_config_reads_env_file(runner: CliRunner, tmp_path):
    env_file = tmp_path / "demo.env"
    env_file.write_text("TIGER_SERVICE_ID=from-dotenv\n")

    result = runner.invoke(cli_module.app, ["--env-file", str(env_file), "config"])
    assert result.exit_code == 0
    assert "from-dotenv" in result.output


def test_run_reports_isolation(runner: CliRunner, monkeypatch):
    seen = {}

    def _fake_run_demo(config, cli):
        seen["config"] = config
        return DemoReport(
            source_service_id="svc1",
            fork=Fork(name="f1", service_id="abc123"),
            inserted={"id": 1, "db_name": "abc123"},
            source_rows=[],
            fork_rows=[{"id": 1, "db_name": "abc123"}],
        )

    monkeypatch.setattr(demo_commands, "run_demo", _fake_run_demo)

    result = runner.invoke(
        cli_module.app, ["run", "--source", "svc1", "--fork-name", "f1", "--cleanup-on-error"]
    )

    assert result.exit_code == 0, result.output
    assert "isolation confirmed" in result.output
    assert seen["config"].source_service_id == "svc1"
    assert seen["config"].fork_name == "f1"
    assert seen["config"].cleanup_on_error is True


def test_run_exits_with_status_one_on_error(runner: CliRunner, monkeypatch):
    def _fail(config, cli):
        raise ConfigurationError("Unable to determine Tiger service ID.")

    monkeypatch.setattr(demo_commands, "run_demo", _fail)

    result = runner.invoke(cli_module.app, ["run"])

    assert result.exit_code == 1
    assert "Unable to determine" in result.output


def test_delete_reports_cli_failure(runner: CliRunner):
    result = runner.invoke(
        cli_module.app, ["delete", "abc123", "--cli", "forkdemo-no-such-binary-xyz"]
    )
    assert result.exit_code == 1


def test_run_error_with_markup_characters(runner: CliRunner, monkeypatch):
    def _fail(config, cli):
        raise CommandError(
            CommandOutcome(argv=("tiger",), returncode=1, stderr="bad value [/oops] here")
        )

    monkeypatch.setattr(demo_commands, "run_demo", _fail)

    result = runner.invoke(cli_module.app, ["run", "--source", "svc1"])

    assert result.exit_code == 1
    assert "[/oops]" in result.output


def test_delete_invokes_cli_with_confirm(runner: CliRunner, tmp_path):
    record = tmp_path / "argv.txt"
    fake_cli = shlex.join(
        [
            sys.executable,
            "-c",
            f"import sys; open({str(record)!r}, 'w').write(' '.join(sys.argv[1:]))",
        ]
    )

    result = runner.invoke(cli_module.app, ["delete", "abc123", "--cli", fake_cli])

    assert result.exit_code == 0, result.output
    assert "deleted" in result.output
    assert record.read_text() == "service delete abc123 --confirm"
