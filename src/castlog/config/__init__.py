"""Configuration for castlog."""

from castlog.config.manager import ConfigManager, get_config_dir
from castlog.config.schema import CastlogConfig, ScheduleConfig, SocialConfig

__all__ = [
    "CastlogConfig",
    "ConfigManager",
    "ScheduleConfig",
    "SocialConfig",
    "get_config_dir",
]
