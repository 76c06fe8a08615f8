"""Configuration file loading."""

from .repository import ConfigRepository, DEFAULT_CONFIG_FILE

__all__ = ["ConfigRepository", "DEFAULT_CONFIG_FILE"]
