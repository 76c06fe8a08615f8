"""
Dependency injection container for the application.

Builds the inventory store, the enabled directory readers and the sync
service from a validated SyncConfig.
"""

import logging
from pathlib import Path
from typing import List, Optional

from ..domain.config import SyncConfig
from ..infrastructure.azure import AzurePowerShellReader, GraphDeviceReader
from ..infrastructure.config import ConfigRepository, DEFAULT_CONFIG_FILE
from ..infrastructure.ldap_directory import ActiveDirectoryReader
from ..infrastructure.sql_server import InventoryStore
from .sources import ComputerSource
from .sync_service import SyncService

logger = logging.getLogger(__name__)


class Container:
    """
    Dependency injection container.

    Components are created on first access and reused afterwards.
    """

    def __init__(self, config: SyncConfig):
        """
        Initialize the container.

        Args:
            config: Validated sync configuration
        """
        self.config = config
        self._inventory_store: Optional[InventoryStore] = None
        self._directory_sources: Optional[List[ComputerSource]] = None
        self._sync_service: Optional[SyncService] = None

    @classmethod
    def from_config_file(cls, config_path: Path | str = DEFAULT_CONFIG_FILE) -> "Container":
        """
        Build a container from a config file.

        Raises:
            ConfigurationError: If the file cannot be loaded or validated
        """
        return cls(ConfigRepository(config_path).load_sync_config())

    @property
    def inventory_store(self) -> InventoryStore:
        """Get the inventory store."""
        if self._inventory_store is None:
            self._inventory_store = InventoryStore(self.config.database)
        return self._inventory_store

    @property
    def directory_sources(self) -> List[ComputerSource]:
        """Get the enabled directory readers, primary directory first."""
        if self._directory_sources is None:
            sources: List[ComputerSource] = []
            if self.config.active_directory.enabled:
                sources.append(ActiveDirectoryReader(self.config.active_directory))
            if self.config.azure.enabled:
                if self.config.azure.uses_graph:
                    logger.debug("Using Microsoft Graph for Azure devices")
                    sources.append(GraphDeviceReader(self.config.azure))
                else:
                    logger.debug("Using the AzureAD PowerShell module for Azure devices")
                    sources.append(AzurePowerShellReader(self.config.azure, self.config.active_directory))
            self._directory_sources = sources
        return self._directory_sources

    @property
    def sync_service(self) -> SyncService:
        """Get the sync service."""
        if self._sync_service is None:
            self._sync_service = SyncService(
                self.inventory_store,
                self.directory_sources,
                self.config.database.exempt_computers,
            )
        return self._sync_service
