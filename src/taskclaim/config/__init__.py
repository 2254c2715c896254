"""
Configuration management for taskclaim.

Settings come from ``TASKCLAIM_*`` environment variables and an optional
``.env`` file; the coordination core itself reads no environment.
"""

from .config_manager import ConfigManager, get_config
from .settings import LoggingSettings, Settings

__all__ = ["ConfigManager", "get_config", "LoggingSettings", "Settings"]
