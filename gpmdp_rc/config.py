"""Configuration loading for gpmdp_rc."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigError

DEFAULT_CONFIG_FILE = "~/gpmdp_rc.yaml"


@dataclass
class Config:
    """gpmdp_rc configuration settings."""
    url: str
    token: str
    timeout_ms: int
    log_level: str
    log_dir: str

    @classmethod
    def load(cls, config_file: Optional[str] = None) -> "Config":
        """
        Load configuration from environment variables and a config file.

        Environment variables take precedence over the config file.

        Args:
            config_file: Path to config file (defaults to ~/gpmdp_rc.yaml)

        Returns:
            Config instance with loaded values

        Raises:
            ConfigError: If the file cannot be read or parsed
        """
        defaults = {
            "url": "",
            "token": "",
            "timeout_ms": 4000,
            "log_level": "WARNING",
            "log_dir": "",
        }

        path = Path(os.path.expanduser(config_file or DEFAULT_CONFIG_FILE))
        file_config = {}
        if path.exists():
            file_config = cls._parse_config_file(path)
        elif config_file:
            # Only an explicitly named file has to exist
            raise ConfigError(f"failed to read config file: {path}")

        url = os.environ.get(
            "GPMDP_RC_URL",
            file_config.get("url", defaults["url"])
        )
        token = os.environ.get(
            "GPMDP_RC_TOKEN",
            file_config.get("token", defaults["token"])
        )
        timeout_ms = os.environ.get(
            "GPMDP_RC_TIMEOUT_MS",
            file_config.get("timeout_ms", defaults["timeout_ms"])
        )
        try:
            timeout_ms = int(timeout_ms)
        except (TypeError, ValueError):
            raise ConfigError(f"timeout_ms must be an integer, got {timeout_ms!r}")
        log_level = os.environ.get(
            "GPMDP_RC_LOG_LEVEL",
            file_config.get("log_level", defaults["log_level"])
        )
        log_dir = os.environ.get(
            "GPMDP_RC_LOG_DIR",
            file_config.get("log_dir", defaults["log_dir"])
        )

        return cls(
            url=str(url or ""),
            token=str(token or ""),
            timeout_ms=timeout_ms,
            log_level=str(log_level),
            log_dir=str(log_dir or ""),
        )

    @classmethod
    def _parse_config_file(cls, path: Path) -> dict:
        """
        Parse a YAML file, or a simple key=value file for any other suffix.

        Args:
            path: Path to config file

        Returns:
            Dictionary of config values
        """
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"failed to read config file {path}: {e}")

        if path.suffix.lower() in (".yaml", ".yml"):
            return cls._parse_yaml(text, path)
        return cls._parse_key_values(text)

    @staticmethod
    def _parse_yaml(text: str, path: Path) -> dict:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"failed to parse config file {path}: {e}")
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"failed to parse config file {path}: expected a mapping")
        return {str(k).lower(): v for k, v in data.items()}

    @staticmethod
    def _parse_key_values(text: str) -> dict:
        config = {}
        for line in text.splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, value = line.split("=", 1)
                config[key.strip().lower()] = value.strip()
        return config

    def require(self, pairing: bool = False) -> None:
        """
        Check the settings a command needs before connecting.

        Args:
            pairing: True for the auth command, which has no token yet

        Raises:
            ConfigError: If url, or token for a normal command, is empty
        """
        if not self.url:
            raise ConfigError("no url configured (set 'url' in the config file or GPMDP_RC_URL)")
        if not pairing and not self.token:
            raise ConfigError("no token configured, run 'gpmdp-rc auth' first")

    def get_log_dir(self) -> Optional[Path]:
        """Absolute log directory, or None when file logging is off."""
        if not self.log_dir:
            return None
        path = Path(os.path.expanduser(self.log_dir)).resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path
