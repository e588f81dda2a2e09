"""Configuration management for davsync.

Credentials are resolved from environment variables first and then from the
user config file (``~/.config/davsync/config``), which ``davsync init``
writes.
"""

import configparser
import logging
import os
from pathlib import Path
from typing import Optional

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_SECTION = "davsync"

ENV_SERVER = "DAVSYNC_SERVER"
ENV_USERNAME = "DAVSYNC_USERNAME"
ENV_PASSWORD = "DAVSYNC_PASSWORD"
ENV_CONFIG_DIR = "DAVSYNC_CONFIG_DIR"


class Config:
    """Configuration for the WebDAV endpoint and credentials."""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize configuration.

        Args:
            config_dir: Directory holding the config file
                (defaults to $DAVSYNC_CONFIG_DIR or ~/.config/davsync)
        """
        if config_dir is None:
            env_dir = os.environ.get(ENV_CONFIG_DIR)
            if env_dir:
                config_dir = Path(env_dir)
            else:
                config_dir = Path.home() / ".config" / "davsync"
        self.config_dir = config_dir
        self._file_values: Optional[dict[str, str]] = None

    def get_config_path(self) -> Path:
        """Get the path of the config file."""
        return self.config_dir / "config"

    def _load_file(self) -> dict[str, str]:
        if self._file_values is not None:
            return self._file_values

        values: dict[str, str] = {}
        path = self.get_config_path()
        if path.exists():
            parser = configparser.ConfigParser(interpolation=None)
            try:
                parser.read(path, encoding="utf-8")
            except configparser.Error as e:
                raise ConfigError(f"Invalid config file: {e}", str(path)) from e
            if parser.has_section(CONFIG_SECTION):
                values = dict(parser.items(CONFIG_SECTION))
            logger.debug("Loaded config from %s", path)
        self._file_values = values
        return values

    def _get(self, env_var: str, key: str) -> Optional[str]:
        value = os.environ.get(env_var)
        if value:
            return value
        return self._load_file().get(key) or None

    @property
    def server(self) -> Optional[str]:
        """WebDAV endpoint URL."""
        return self._get(ENV_SERVER, "server")

    @property
    def username(self) -> Optional[str]:
        """Username for basic authentication."""
        return self._get(ENV_USERNAME, "username")

    @property
    def password(self) -> Optional[str]:
        """Password for basic authentication."""
        return self._get(ENV_PASSWORD, "password")

    def is_configured(self) -> bool:
        """Check whether a server URL is available."""
        return bool(self.server)

    def save_credentials(
        self, server: str, username: Optional[str], password: Optional[str]
    ) -> None:
        """Write endpoint and credentials to the config file.

        The file is created with owner-only permissions.
        """
        parser = configparser.ConfigParser(interpolation=None)
        parser[CONFIG_SECTION] = {"server": server}
        if username:
            parser[CONFIG_SECTION]["username"] = username
        if password:
            parser[CONFIG_SECTION]["password"] = password

        path = self.get_config_path()
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                parser.write(f)
            os.chmod(path, 0o600)
        except OSError as e:
            raise ConfigError(f"Could not write config file: {e}", str(path)) from e

        self._file_values = None
        logger.debug("Saved config to %s", path)


config = Config()
