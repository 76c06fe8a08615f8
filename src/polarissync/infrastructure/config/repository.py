"""
Configuration repository for loading config.json.

Keys are matched case-insensitively, so "exemptComputers", "ExemptComputers"
and "exemptcomputers" are the same setting. Defaults for anything the file
leaves out come from the domain models.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from polarissync.domain.config import LoggingSettings, SyncConfig
from polarissync.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "config.json"


def _fold_keys(value: Any) -> Any:
    """Lowercase every mapping key, recursively."""
    if isinstance(value, dict):
        return {str(k).lower(): _fold_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_fold_keys(v) for v in value]
    return value


class ConfigRepository:
    """
    Repository for configuration file operations.

    Handles reading, parsing and validating the sync configuration.
    """

    def __init__(self, config_path: Path | str = DEFAULT_CONFIG_FILE):
        """
        Initialize the config repository.

        Args:
            config_path: Path to the JSON configuration file
        """
        self.config_path = Path(config_path)

    def load_json_file(self) -> Dict[str, Any]:
        """
        Load and parse the JSON file with readable error messages.

        Returns:
            Parsed JSON with keys folded to lowercase

        Raises:
            ConfigurationError: If the file is missing, empty, unreadable or malformed
        """
        filepath = self.config_path
        if not filepath.exists():
            raise ConfigurationError(
                f"Configuration file not found: {filepath}\n"
                f"Hint: Copy config.example.json and customize it.",
                source="config",
            )

        try:
            content = filepath.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read config file: {filepath}: {e}", source="config"
            ) from e

        if not content.strip():
            raise ConfigurationError(f"Configuration file is empty: {filepath}", source="config")

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {filepath}\n"
                f"Error at line {e.lineno}, column {e.colno}: {e.msg}",
                source="config",
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file must contain a JSON object: {filepath}", source="config"
            )
        return _fold_keys(data)

    def load_sync_config(self) -> SyncConfig:
        """
        Load and validate the sync configuration.

        Returns:
            Validated SyncConfig

        Raises:
            ConfigurationError: If the file cannot be loaded or fails validation
        """
        data = self.load_json_file()
        try:
            config = SyncConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Config file is corrupt: {self.config_path}\n{e}", source="config"
            ) from e

        logger.debug(
            "Loaded config from %s (activedirectory=%s, azure=%s, exempt=%d)",
            self.config_path,
            config.active_directory.enabled,
            config.azure.enabled,
            len(config.database.exempt_computers),
        )
        return config

    def load_logging_settings(self) -> LoggingSettings | None:
        """
        Read only the logging section, for a file that fails full validation.

        Returns:
            LoggingSettings, or None when the file or the section is unusable
        """
        try:
            data = self.load_json_file()
            return LoggingSettings.model_validate(data.get("logging") or {})
        except (ConfigurationError, ValidationError):
            return None
