"""Configuration module."""
from config.settings import settings, get_settings, reload_settings, Settings

__all__ = ["settings", "get_settings", "reload_settings", "Settings"]
