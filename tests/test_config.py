"""Tests for runtime configuration loading."""

import json

from consolesweep.config_runtime import DEFAULTS, config_path, load_runtime_config


def write_config(root, data) -> None:
    path = config_path(root)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")


class TestRuntimeConfig:
    def test_defaults(self, tmp_path):
        cfg = load_runtime_config(tmp_path)
        assert cfg == DEFAULTS
        assert cfg is not DEFAULTS
        assert cfg["backup"]["auto_cleanup"] is False

    def test_file_overrides(self, tmp_path):
        write_config(tmp_path, {
            "scan": {"call_token": "logger.debug", "exclude": ["generated/**"]},
            "backup": {"auto_cleanup": True},
        })
        cfg = load_runtime_config(tmp_path)
        assert cfg["scan"]["call_token"] == "logger.debug"
        assert cfg["scan"]["exclude"] == ["generated/**"]
        assert cfg["backup"]["auto_cleanup"] is True
        assert cfg["analysis"] == DEFAULTS["analysis"]

    def test_wrong_types_and_unknown_keys_are_ignored(self, tmp_path):
        write_config(tmp_path, {
            "scan": {"context_lines": "five", "colour": "blue"},
            "backup": {"auto_cleanup": 1},
        })
        cfg = load_runtime_config(tmp_path)
        assert cfg["scan"]["context_lines"] == 3
        assert "colour" not in cfg["scan"]
        assert cfg["backup"]["auto_cleanup"] is False

    def test_malformed_file(self, tmp_path):
        write_config(tmp_path, "{ not json")
        assert load_runtime_config(tmp_path) == DEFAULTS

    def test_environment_wins(self, tmp_path, monkeypatch):
        write_config(tmp_path, {"backup": {"auto_cleanup": False}})
        monkeypatch.setenv("CONSOLESWEEP_BACKUP_AUTO_CLEANUP", "yes")
        monkeypatch.setenv("CONSOLESWEEP_SCAN_EXTENSIONS", ".js, .vue")
        monkeypatch.setenv("CONSOLESWEEP_ANALYSIS_CATCH_LOOKBACK", "25")
        cfg = load_runtime_config(tmp_path)
        assert cfg["backup"]["auto_cleanup"] is True
        assert cfg["scan"]["extensions"] == [".js", ".vue"]
        assert cfg["analysis"]["catch_lookback"] == 25

    def test_invalid_environment_value(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CONSOLESWEEP_ANALYSIS_CATCH_LOOKBACK", "lots")
        monkeypatch.setenv("CONSOLESWEEP_LOGGING_ERROR_LOG", "maybe")
        cfg = load_runtime_config(tmp_path)
        assert cfg["analysis"]["catch_lookback"] == 15
        assert cfg["logging"]["error_log"] is True
