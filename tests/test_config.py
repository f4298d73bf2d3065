"""
Tests for configuration loading.
"""

from dataclasses import FrozenInstanceError

import pytest
from mojostyle.config import CheckerConfig, config_from_mapping, load_config
from mojostyle.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("MOJOSTYLE_RETENTION_DAYS", raising=False)
    monkeypatch.delenv("MOJOSTYLE_VALIDATE_COMMAND", raising=False)


class TestDefaults:
    """Test the default configuration."""

    def test_defaults(self):
        cfg = CheckerConfig()
        assert cfg.retention_days == 7
        assert cfg.enable_backup is True
        assert cfg.show_observations is False
        assert ".git" in cfg.exclude_dirs
        assert ".mojo" in cfg.extensions

    def test_frozen(self):
        cfg = CheckerConfig()
        with pytest.raises(FrozenInstanceError):
            cfg.retention_days = 3

    def test_with_overrides_ignores_none(self):
        cfg = CheckerConfig().with_overrides(retention_days=3, show_observations=None)
        assert cfg.retention_days == 3
        assert cfg.show_observations is False


class TestYaml:
    """Test YAML configuration files."""

    def test_explicit_file(self, tmp_path):
        path = tmp_path / "mojostyle.yaml"
        path.write_text(
            "show_observations: true\n"
            "retention-days: 14\n"
            "exclude_dirs: [vendor, third_party]\n"
            "validate_command: \"mojo build {file}\"\n",
            encoding="utf-8",
        )
        cfg = load_config(path)
        assert cfg.show_observations is True
        assert cfg.retention_days == 14
        assert cfg.exclude_dirs == frozenset({"vendor", "third_party"})
        assert cfg.validate_command == ("mojo", "build", "{file}")

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "nope.yaml")

    def test_search_path_in_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".mojostyle.yaml").write_text("keep_backups: true\n", encoding="utf-8")
        assert load_config().keep_backups is True

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == CheckerConfig()

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("key: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    @pytest.mark.parametrize("data", [
        {"retention_days": "seven"},
        {"retention_days": -1},
        {"show_observations": "yes please"},
        {"exclude_dirs": [1, 2]},
        {"validate_timeout": True},
    ])
    def test_bad_types(self, data):
        with pytest.raises(ConfigError):
            config_from_mapping(data)

    def test_unknown_keys_ignored(self, caplog):
        cfg = config_from_mapping({"colour": "red", "retention_days": 2})
        assert cfg.retention_days == 2
        assert "colour" in caplog.text


class TestEnvironment:
    """Test environment overrides."""

    def test_retention_from_env(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("MOJOSTYLE_RETENTION_DAYS", "3")
        assert load_config().retention_days == 3

    def test_env_beats_file(self, tmp_path, monkeypatch):
        path = tmp_path / "c.yaml"
        path.write_text("retention_days: 10\n", encoding="utf-8")
        monkeypatch.setenv("MOJOSTYLE_RETENTION_DAYS", "1")
        assert load_config(path).retention_days == 1

    def test_bad_env_value(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("MOJOSTYLE_RETENTION_DAYS", "soon")
        with pytest.raises(ConfigError):
            load_config()

    def test_validate_command_from_env(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("MOJOSTYLE_VALIDATE_COMMAND", "pixi run mojo build")
        assert load_config().validate_command == ("pixi", "run", "mojo", "build")
