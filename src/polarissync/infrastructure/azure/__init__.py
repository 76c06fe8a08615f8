"""
Azure AD device enumeration.

Two readers share one contract: GraphDeviceReader talks to Microsoft Graph
when app credentials are configured, AzurePowerShellReader drives the AzureAD
PowerShell module and scrapes its table output otherwise.
"""

from .graph import GraphDeviceReader
from .powershell import (
    COMPLETION_MARKER,
    AzurePowerShellReader,
    PowerShellSession,
    SessionOutput,
    build_device_script,
    parse_device_report,
    split_at_marker,
)

__all__ = [
    "COMPLETION_MARKER",
    "AzurePowerShellReader",
    "GraphDeviceReader",
    "PowerShellSession",
    "SessionOutput",
    "build_device_script",
    "parse_device_report",
    "split_at_marker",
]
