"""
Error taxonomy for a sync run.

Every error raised here is fatal for the run: the pipeline stops before any
removal takes place. Per-record removal failures are not exceptions, they are
reported through the removal sink's boolean result.
"""


class SyncError(Exception):
    """Base class for all fatal sync errors."""

    kind = "sync"

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message)
        self.source = source


class ConfigurationError(SyncError):
    """Configuration file missing, unreadable or invalid."""

    kind = "configuration"


class InventoryError(SyncError):
    """The inventory table could not be read."""

    kind = "inventory"


class DirectoryError(SyncError):
    """Connecting, binding or searching the primary directory failed."""

    kind = "directory"


class EmptyDirectoryError(DirectoryError):
    """
    The primary directory search returned no computers.

    Treated as misconfiguration rather than an empty domain, otherwise every
    inventory record would become a removal candidate.
    """

    kind = "empty_directory"


class CloudDirectoryError(SyncError):
    """The cloud directory session or API call failed."""

    kind = "cloud_directory"
