"""
Domain package.

Pure business types for the reconciliation: identifiers, errors and results.
Nothing in here talks to the outside world.
"""

from .errors import (
    CloudDirectoryError,
    ConfigurationError,
    DirectoryError,
    EmptyDirectoryError,
    InventoryError,
    SyncError,
)
from .identifiers import ComputerIdentifier, identifier_set, normalize

__all__ = [
    "CloudDirectoryError",
    "ComputerIdentifier",
    "ConfigurationError",
    "DirectoryError",
    "EmptyDirectoryError",
    "InventoryError",
    "SyncError",
    "identifier_set",
    "normalize",
]
