"""End-to-end tests for the sweep command group."""

import json

import pytest
from click.testing import CliRunner
from conftest import APP_JS, APP_JS_AUTO, NOISE_JS

from consolesweep.cli import cli
from consolesweep.utils.constants import DEFAULT_BACKUP_DIR
from consolesweep.utils.exit_codes import ExitCodes


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


def app_text(project) -> str:
    return (project / "src" / "app.js").read_text(encoding="utf-8")


class TestHelp:
    def test_root_help_lists_commands(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for name in ("scan", "clean", "rollback", "backups"):
            assert name in result.output

    def test_command_help_is_ascii(self, runner):
        for name in ("scan", "clean", "rollback", "backups"):
            result = runner.invoke(cli, [name, "--help"])
            assert result.exit_code == 0
            result.output.encode("ascii")

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "sweep" in result.output


class TestClean:
    def test_auto_mode(self, runner, sample_project):
        result = runner.invoke(cli, ["clean", str(sample_project), "--mode", "auto"])
        assert result.exit_code == 0, result.output
        assert app_text(sample_project) == APP_JS_AUTO
        assert (sample_project / DEFAULT_BACKUP_DIR).is_dir()

    def test_dry_run(self, runner, sample_project):
        result = runner.invoke(cli, ["clean", str(sample_project), "--mode", "auto", "--dry-run"])
        assert result.exit_code == 0, result.output
        assert app_text(sample_project) == APP_JS
        assert not (sample_project / DEFAULT_BACKUP_DIR).exists()

    def test_manual_without_terminal_falls_back(self, runner, sample_project):
        result = runner.invoke(cli, ["clean", str(sample_project), "--no-interactive"])
        assert result.exit_code == 0, result.output
        assert app_text(sample_project) == APP_JS_AUTO

    def test_fail_on_sensitive(self, runner, sample_project):
        result = runner.invoke(cli, ["clean", str(sample_project), "--mode", "auto", "--fail-on-sensitive"])
        assert result.exit_code == ExitCodes.SENSITIVE_REMAINING

    def test_backup_cleanup(self, runner, sample_project):
        result = runner.invoke(cli, ["clean", str(sample_project), "--mode", "auto", "--backup-cleanup"])
        assert result.exit_code == 0, result.output
        assert not (sample_project / DEFAULT_BACKUP_DIR).exists()

    def test_exclude(self, runner, sample_project):
        result = runner.invoke(cli, ["clean", str(sample_project), "--mode", "auto", "--exclude", "lib/**"])
        assert result.exit_code == 0, result.output
        assert (sample_project / "lib" / "noise.js").read_text(encoding="utf-8") == NOISE_JS

    def test_interactive(self, runner, tmp_path):
        project = tmp_path / "one"
        project.mkdir()
        (project / "f.js").write_text('function f() {\n  console.log("x");\n  return 1;\n}\n', encoding="utf-8")

        result = runner.invoke(cli, ["clean", str(project), "--interactive", "--no-report"], input="what\nd\n")
        assert result.exit_code == 0, result.output
        assert "Unrecognized choice" in result.output
        assert (project / "f.js").read_text(encoding="utf-8") == "function f() {\n  return 1;\n}\n"

    def test_config_file_is_honoured(self, runner, sample_project):
        state = sample_project / ".consolesweep"
        state.mkdir()
        (state / "config.json").write_text(json.dumps({"scan": {"exclude": ["src/**"]}}), encoding="utf-8")
        result = runner.invoke(cli, ["clean", str(sample_project), "--mode", "auto"])
        assert result.exit_code == 0, result.output
        assert app_text(sample_project) == APP_JS


class TestScan:
    def test_json(self, runner, sample_project):
        result = runner.invoke(cli, ["scan", str(sample_project), "--format", "json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["summary"]["occurrences"] == 6
        assert data["summary"]["files_with_calls"] == 2
        actions = {(o["file"], o["line"]): o["auto_action"] for o in data["occurrences"]}
        assert actions[("src/app.js", 7)] == "keep"
        assert actions[("src/app.js", 10)] == "convert-error"
        assert actions[("lib/noise.js", 2)] == "delete"
        assert app_text(sample_project) == APP_JS

    def test_save(self, runner, sample_project, tmp_path):
        out = tmp_path / "reports" / "scan.json"
        result = runner.invoke(cli, ["scan", str(sample_project), "--save", str(out)])
        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text(encoding="utf-8"))["summary"]["files_scanned"] == 3

    def test_text(self, runner, sample_project):
        result = runner.invoke(cli, ["scan", str(sample_project)])
        assert result.exit_code == 0, result.output
        assert "statement(s)" in result.output


class TestRecovery:
    def test_rollback_restores_latest_session(self, runner, sample_project):
        runner.invoke(cli, ["clean", str(sample_project), "--mode", "auto"])
        assert app_text(sample_project) == APP_JS_AUTO

        result = runner.invoke(cli, ["rollback", str(sample_project)])
        assert result.exit_code == 0, result.output
        assert app_text(sample_project) == APP_JS
        assert (sample_project / "lib" / "noise.js").read_text(encoding="utf-8") == NOISE_JS

        again = runner.invoke(cli, ["rollback", str(sample_project)])
        assert again.exit_code == ExitCodes.TASK_INCOMPLETE

    def test_backups_list_and_purge(self, runner, sample_project):
        runner.invoke(cli, ["clean", str(sample_project), "--mode", "auto"])

        listing = runner.invoke(cli, ["backups", str(sample_project)])
        assert listing.exit_code == 0, listing.output
        [session] = [p.name for p in (sample_project / DEFAULT_BACKUP_DIR).iterdir()]
        assert session[:8] in listing.output

        purge = runner.invoke(cli, ["backups", str(sample_project), "--purge", "--yes"])
        assert purge.exit_code == 0, purge.output
        assert not (sample_project / DEFAULT_BACKUP_DIR).exists()

    def test_no_backups(self, runner, sample_project):
        result = runner.invoke(cli, ["backups", str(sample_project)])
        assert result.exit_code == 0
        assert "No backup sessions" in result.output
