"""
PolarisSync - Workstation inventory reconciliation.

Removes workstation records from the Polaris inventory table when the machine
no longer exists in Active Directory or Azure AD.

Usage:
    # CLI (recommended)
    polarissync run --config config.json

    # Programmatic
    from polarissync.application.container import Container

    container = Container.from_config_file("config.json")
    result = container.sync_service.run()
"""

__version__ = "0.1.0"
__author__ = "PolarisSync Team"

from polarissync.application.sync_service import SyncService

__all__ = ["SyncService", "__version__"]
