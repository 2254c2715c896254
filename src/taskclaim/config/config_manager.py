"""
Configuration manager for taskclaim.

This module loads settings once and builds the coordinator from them.
"""

from typing import Optional

from ..coordinator import ClaimCoordinator
from ..lease import LeasePolicy
from ..registry import JsonTaskRegistry
from ..store import ClaimStore
from .settings import Settings


class ConfigManager:
    """Manages configuration loading and access."""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings

    def load_config(self) -> Settings:
        """Load settings from the environment and ``.env``.

        Raises:
            pydantic.ValidationError: If configuration validation fails
        """
        if self._settings is None:
            self._settings = Settings()
        return self._settings

    def get_config(self) -> Settings:
        return self.load_config()

    def reload_config(self) -> Settings:
        self._settings = None
        return self.load_config()

    def build_coordinator(self) -> ClaimCoordinator:
        """Wire a coordinator from the current settings."""
        settings = self.get_config()
        registry = (
            JsonTaskRegistry(settings.registry_path) if settings.registry_path else None
        )
        policy = LeasePolicy(
            registry=registry,
            default_effort_minutes=settings.default_effort_minutes,
            multiplier=settings.lease_multiplier,
        )
        return ClaimCoordinator(ClaimStore(settings.store_path), policy=policy)


_config_manager: Optional[ConfigManager] = None


def get_config() -> Settings:
    """Get the process-wide settings."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager.get_config()
