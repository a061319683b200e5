"""Tests for runtime configuration loading."""

import json

from maintenance_reporter.config_runtime import DEFAULTS, load_runtime_config


def _write_config(root, data):
    state = root / ".mreport"
    state.mkdir()
    (state / "config.json").write_text(json.dumps(data))


class TestLoadRuntimeConfig:
    def test_defaults_without_file(self, tmp_path):
        cfg = load_runtime_config(str(tmp_path))
        assert cfg == DEFAULTS
        assert cfg is not DEFAULTS

    def test_file_overrides_known_keys_with_matching_types(self, tmp_path):
        _write_config(
            tmp_path,
            {
                "git": {"remote": "upstream", "unknown": "ignored"},
                "timeouts": {"audit": "slow"},
                "feed": {"include_dev": True},
            },
        )
        cfg = load_runtime_config(str(tmp_path))
        assert cfg["git"]["remote"] == "upstream"
        assert "unknown" not in cfg["git"]
        assert cfg["timeouts"]["audit"] == DEFAULTS["timeouts"]["audit"]
        assert cfg["feed"]["include_dev"] is True

    def test_invalid_file_falls_back_to_defaults(self, tmp_path):
        state = tmp_path / ".mreport"
        state.mkdir()
        (state / "config.json").write_text("{broken")
        assert load_runtime_config(str(tmp_path)) == DEFAULTS

    def test_environment_wins_over_file(self, tmp_path, monkeypatch):
        _write_config(tmp_path, {"git": {"remote": "upstream"}})
        monkeypatch.setenv("MREPORT_GIT_REMOTE", "fork")
        monkeypatch.setenv("MREPORT_TIMEOUTS_GIT", "5")
        monkeypatch.setenv("MREPORT_FEED_INCLUDE_DEV", "yes")
        cfg = load_runtime_config(str(tmp_path))
        assert cfg["git"]["remote"] == "fork"
        assert cfg["timeouts"]["git"] == 5
        assert cfg["feed"]["include_dev"] is True

    def test_invalid_environment_value_keeps_default(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MREPORT_TIMEOUTS_FEED_FETCH", "soon")
        monkeypatch.setenv("MREPORT_FEED_INCLUDE_DEV", "maybe")
        cfg = load_runtime_config(str(tmp_path))
        assert cfg["timeouts"]["feed_fetch"] == DEFAULTS["timeouts"]["feed_fetch"]
        assert cfg["feed"]["include_dev"] is False

    def test_empty_remote_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MREPORT_GIT_REMOTE", "")
        assert load_runtime_config(str(tmp_path))["git"]["remote"] == ""
