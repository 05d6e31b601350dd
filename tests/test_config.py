"""Tests for settings resolution."""

from datetime import timedelta

import pytest

from coauthor_cli.config import DEFAULT_CHANGES_DIR, MAX_RETENTION_HOURS, ConfigError, Settings


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env(env={})
        assert settings.threshold == 0.85
        assert settings.snapshot_limit == 5
        assert settings.retention_window == timedelta(hours=4)
        assert settings.changes_dir == DEFAULT_CHANGES_DIR

    def test_environment_values(self):
        settings = Settings.from_env(env={
            "COAUTHOR_THRESHOLD": "0.9",
            "COAUTHOR_SNAPSHOT_LIMIT": "10",
            "COAUTHOR_RETENTION_HOURS": "1.5",
            "COAUTHOR_CHANGES_DIR": ".ai-edits",
            "COAUTHOR_CO_AUTHOR": "bot <bot@example.com>",
        })
        assert settings == Settings(0.9, 10, 1.5, ".ai-edits", "bot <bot@example.com>")

    def test_blank_values_ignored(self):
        assert Settings.from_env(env={"COAUTHOR_THRESHOLD": "  "}).threshold == 0.85

    @pytest.mark.parametrize("name, value", [
        ("COAUTHOR_THRESHOLD", "high"),
        ("COAUTHOR_THRESHOLD", "0"),
        ("COAUTHOR_THRESHOLD", "1.5"),
        ("COAUTHOR_SNAPSHOT_LIMIT", "0"),
        ("COAUTHOR_SNAPSHOT_LIMIT", "2.5"),
        ("COAUTHOR_RETENTION_HOURS", "-1"),
        ("COAUTHOR_RETENTION_HOURS", "nan"),
        ("COAUTHOR_RETENTION_HOURS", "inf"),
        ("COAUTHOR_RETENTION_HOURS", "1e8"),
        ("COAUTHOR_THRESHOLD", "nan"),
    ])
    def test_invalid_values(self, name, value):
        with pytest.raises(ConfigError):
            Settings.from_env(env={name: value})

    def test_overrides_skip_none(self):
        settings = Settings().with_overrides(threshold=0.5, snapshot_limit=None)
        assert settings.threshold == 0.5
        assert settings.snapshot_limit == 5

    def test_overrides_are_validated(self):
        with pytest.raises(ConfigError):
            Settings().with_overrides(retention_hours=0)

    def test_dotenv_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("COAUTHOR_THRESHOLD", raising=False)
        monkeypatch.delenv("COAUTHOR_SNAPSHOT_LIMIT", raising=False)
        (tmp_path / ".env").write_text("COAUTHOR_THRESHOLD=0.7\nCOAUTHOR_SNAPSHOT_LIMIT=3\n", encoding="utf-8")

        settings = Settings.from_env(repo_root=str(tmp_path))
        assert settings.threshold == 0.7
        assert settings.snapshot_limit == 3

    def test_environment_beats_dotenv(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("COAUTHOR_THRESHOLD=0.7\n", encoding="utf-8")
        monkeypatch.setenv("COAUTHOR_THRESHOLD", "0.95")

        assert Settings.from_env(repo_root=str(tmp_path)).threshold == 0.95

    def test_century_window_is_usable(self):
        assert Settings(retention_hours=MAX_RETENTION_HOURS).retention_window == timedelta(days=365 * 100)

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)
