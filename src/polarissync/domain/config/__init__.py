"""
Configuration domain package.

This package contains the domain layer for configuration management.
"""

from .models import (
    ActiveDirectorySettings,
    AzureSettings,
    DatabaseSettings,
    LoggingSettings,
    SyncConfig,
)

__all__ = [
    "ActiveDirectorySettings",
    "AzureSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "SyncConfig",
]
