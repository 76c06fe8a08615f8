"""
SQL Server access for the Polaris workstation inventory.

Handles:
- Connection string building (trusted or domain credentials)
- ODBC driver detection and fallback
- Reading the workstation list
- Deleting a single workstation record
"""

import logging
from contextlib import closing
from typing import Any, Callable, FrozenSet, List, Optional

from polarissync.domain.config import DatabaseSettings
from polarissync.domain.errors import InventoryError
from polarissync.domain.identifiers import ComputerIdentifier, identifier_set

logger = logging.getLogger(__name__)

SELECT_COMPUTERS = "select ComputerName from Polaris.Workstations where ComputerName is not null"
DELETE_COMPUTER = "delete from Polaris.Workstations where ComputerName = ?"

# Preferred drivers (newest first)
PREFERRED_DRIVERS = [
    "ODBC Driver 18 for SQL Server",
    "ODBC Driver 17 for SQL Server",
    "ODBC Driver 13 for SQL Server",
    "ODBC Driver 11 for SQL Server",
]

FALLBACK_DRIVERS = [
    "SQL Server Native Client 11.0",
    "SQL Server Native Client 10.0",
    "SQL Server",
]


def _pyodbc():
    # Deferred so that libodbc is only required once a connection is made
    import pyodbc
    return pyodbc


def detect_odbc_driver(available: Optional[List[str]] = None) -> str:
    """
    Detect best available ODBC driver.

    Args:
        available: Installed driver names; queried from pyodbc when omitted

    Returns:
        ODBC driver name

    Raises:
        RuntimeError: If no suitable driver found
    """
    drivers = available if available is not None else _pyodbc().drivers()
    logger.debug("Available ODBC drivers: %s", drivers)

    for driver in PREFERRED_DRIVERS:
        if driver in drivers:
            return driver

    for driver in FALLBACK_DRIVERS:
        if driver in drivers:
            logger.warning("Using fallback ODBC driver: %s", driver)
            return driver

    raise RuntimeError("No SQL Server ODBC driver found. Please install ODBC Driver 17 or 18.")


def _brace(value: str) -> str:
    """Quote an ODBC attribute value so ';' and '}' survive."""
    return "{" + value.replace("}", "}}") + "}"


class InventoryStore:
    """
    The Polaris.Workstations table.

    Acts both as the inventory source and as the removal sink. Every call
    opens its own connection; nothing is pooled between removals.
    """

    name = "inventory"

    def __init__(self, settings: DatabaseSettings,
                 connect: Callable[[str], Any] | None = None,
                 driver: str | None = None):
        """
        Initialize the inventory store.

        Args:
            settings: Database section of the configuration
            connect: Connection factory taking a connection string; pyodbc.connect by default
            driver: ODBC driver name; detected on first use when omitted
        """
        self.settings = settings
        self._connect_fn = connect
        self._driver = driver
        self._connection_string: str | None = None

        auth = "trusted" if settings.trusted else f"{settings.domain}\\{settings.username}"
        logger.debug("InventoryStore initialized for %s:%s (auth=%s)", settings.host, settings.port, auth)

    def build_connection_string(self) -> str:
        """
        Build ODBC connection string.

        Returns:
            Connection string
        """
        if self._connection_string:
            return self._connection_string

        driver = self._driver or detect_odbc_driver()
        s = self.settings

        parts = [
            f"DRIVER={{{driver}}}",
            f"SERVER={s.host},{s.port}",
            f"DATABASE={s.name}",
            "Encrypt=no",
            "TrustServerCertificate=yes",
        ]

        if s.trusted:
            parts.append("Trusted_Connection=yes")
        else:
            user = f"{s.domain}\\{s.username}" if s.domain else s.username
            parts.append(f"UID={user}")
            parts.append(f"PWD={_brace(s.password.get_secret_value())}")

        self._connection_string = ";".join(parts)
        logger.debug("Connection string built (credentials masked)")
        return self._connection_string

    def _connect(self):
        conn_str = self.build_connection_string()
        if self._connect_fn is not None:
            return self._connect_fn(conn_str)
        return _pyodbc().connect(conn_str, timeout=self.settings.timeout)

    def list_computers(self) -> FrozenSet[ComputerIdentifier]:
        """
        Read every non-null computer name from the inventory.

        Returns:
            Normalized identifiers

        Raises:
            InventoryError: If the connection or query fails
        """
        try:
            with closing(self._connect()) as conn:
                cursor = conn.cursor()
                cursor.execute(SELECT_COMPUTERS)
                rows = cursor.fetchall()
        except Exception as e:
            raise InventoryError(f"failed to load workstations: {e}", source=self.name) from e

        computers = identifier_set(row[0] for row in rows)
        logger.info("%d records retrieved", len(computers))
        return computers

    def remove(self, identifier: ComputerIdentifier) -> bool:
        """
        Delete one workstation record.

        Args:
            identifier: Normalized computer name

        Returns:
            True if a row was deleted; False if the delete failed or matched nothing
        """
        try:
            with closing(self._connect()) as conn:
                cursor = conn.cursor()
                cursor.execute(DELETE_COMPUTER, identifier)
                affected = cursor.rowcount
                conn.commit()
        except Exception as e:
            logger.warning("Failed to remove workstation %s: %s", identifier, e)
            return False

        if affected < 1:
            logger.warning("Failed to remove workstation %s: no matching record", identifier)
            return False

        logger.info("%s removed from database", identifier)
        return True
