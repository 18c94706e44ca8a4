"""Configuration manager for loading and saving castlog config."""

from pathlib import Path

import yaml
from platformdirs import user_config_dir
from pydantic import ValidationError

from castlog.config.schema import CastlogConfig
from castlog.utils.atomic import write_text_atomic
from castlog.utils.errors import InvalidConfigError

APP_NAME = "castlog"

DEFAULT_CONFIG_HEADER = """\
# castlog configuration
#
# Credentials are read from the environment, never from this file:
#   TWITTER_TOKEN    Twitter API v2 bearer token
#   YOUTUBE_API_KEY  YouTube Data API key
"""


def get_config_dir() -> Path:
    """Return the per-user configuration directory."""
    return Path(user_config_dir(APP_NAME))


class ConfigManager:
    """Manages the castlog configuration file."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize the config manager.

        Args:
            config_dir: Optional custom config directory. Defaults to the
                platform's user config dir.
        """
        self.config_dir = config_dir if config_dir is not None else get_config_dir()
        self.config_file = self.config_dir / "config.yaml"

    def load_config(self) -> CastlogConfig:
        """Load and validate the configuration.

        A default file is created on first use.

        Returns:
            Validated CastlogConfig instance

        Raises:
            InvalidConfigError: If the config file is invalid
        """
        if not self.config_file.exists():
            config = CastlogConfig()
            self.save_config(config)
            return config

        try:
            with open(self.config_file) as f:
                data = yaml.safe_load(f) or {}
            return CastlogConfig(**data)
        except (OSError, TypeError, yaml.YAMLError, ValidationError) as e:
            raise InvalidConfigError(
                f"Invalid configuration in {self.config_file}: {e}"
            ) from e

    def save_config(self, config: CastlogConfig) -> None:
        """Save the configuration, keeping the explanatory header."""
        data = config.model_dump(mode="json")
        self.config_dir.mkdir(parents=True, exist_ok=True)
        content = DEFAULT_CONFIG_HEADER + yaml.safe_dump(
            data, default_flow_style=False, sort_keys=False
        )
        write_text_atomic(self.config_file, content)
