"""Tests for config module."""

import os
from unittest.mock import patch

import pytest

from gpmdp_rc.config import Config
from gpmdp_rc.errors import ConfigError

ENV_VARS = [
    "GPMDP_RC_URL",
    "GPMDP_RC_TOKEN",
    "GPMDP_RC_TIMEOUT_MS",
    "GPMDP_RC_LOG_LEVEL",
    "GPMDP_RC_LOG_DIR",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """No GPMDP_RC_* variables and a HOME without a config file."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))


class TestConfigLoad:
    """Tests for configuration loading."""

    def test_default_values(self):
        """Should use default values when no file exists."""
        config = Config.load()

        assert config.url == ""
        assert config.token == ""
        assert config.timeout_ms == 4000
        assert config.log_level == "WARNING"
        assert config.log_dir == ""

    def test_yaml_file(self, tmp_path):
        """Should load url and token from a YAML file."""
        path = tmp_path / "gpmdp_rc.yaml"
        path.write_text("url: ws://localhost:5672\ntoken: abc-123\ntimeout_ms: 2500\n")

        config = Config.load(str(path))

        assert config.url == "ws://localhost:5672"
        assert config.token == "abc-123"
        assert config.timeout_ms == 2500

    def test_default_path_in_home(self, tmp_path):
        """Should pick up ~/gpmdp_rc.yaml without --config."""
        (tmp_path / "gpmdp_rc.yaml").write_text("url: ws://media-pc:5672\n")

        config = Config.load()

        assert config.url == "ws://media-pc:5672"

    def test_key_value_file(self, tmp_path):
        """Should load the key = value format for other suffixes."""
        path = tmp_path / "gpmdp_rc.conf"
        path.write_text("# player\nurl = ws://localhost:5672\ntoken = xyz\nlog_level = DEBUG\n")

        config = Config.load(str(path))

        assert config.url == "ws://localhost:5672"
        assert config.token == "xyz"
        assert config.log_level == "DEBUG"

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        """Environment variables take precedence over the file."""
        path = tmp_path / "gpmdp_rc.yaml"
        path.write_text("url: ws://from-file:5672\ntoken: file-token\n")
        monkeypatch.setenv("GPMDP_RC_TOKEN", "env-token")
        monkeypatch.setenv("GPMDP_RC_TIMEOUT_MS", "1000")

        config = Config.load(str(path))

        assert config.url == "ws://from-file:5672"
        assert config.token == "env-token"
        assert config.timeout_ms == 1000

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="failed to read config file"):
            Config.load(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("url: [unclosed\n")
        with pytest.raises(ConfigError, match="failed to parse config file"):
            Config.load(str(path))

    def test_yaml_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            Config.load(str(path))

    def test_bad_timeout(self, monkeypatch):
        monkeypatch.setenv("GPMDP_RC_TIMEOUT_MS", "soon")
        with pytest.raises(ConfigError, match="timeout_ms"):
            Config.load()


class TestConfigRequire:
    """Tests for pre-connect validation."""

    def make(self, url="ws://localhost:5672", token="tok"):
        return Config(url=url, token=token, timeout_ms=4000, log_level="INFO", log_dir="")

    def test_complete(self):
        self.make().require()

    def test_missing_url(self):
        with pytest.raises(ConfigError, match="no url"):
            self.make(url="").require()

    def test_missing_token(self):
        with pytest.raises(ConfigError, match="auth"):
            self.make(token="").require()

    def test_pairing_needs_no_token(self):
        self.make(token="").require(pairing=True)

    def test_log_dir_created(self, tmp_path):
        config = self.make()
        config.log_dir = str(tmp_path / "logs")
        path = config.get_log_dir()
        assert path.exists()
        assert self.make().get_log_dir() is None
