"""
Tests for the inventory store (pyodbc connections are mocked).
"""

from unittest.mock import MagicMock

import pytest

from polarissync.domain.config import DatabaseSettings
from polarissync.domain.errors import InventoryError
from polarissync.infrastructure.sql_server import (
    DELETE_COMPUTER,
    SELECT_COMPUTERS,
    InventoryStore,
    detect_odbc_driver,
)

DRIVER = "ODBC Driver 18 for SQL Server"


def make_store(rows=None, rowcount=1, error=None, **settings):
    """Store wired to a mock connection factory."""
    conn = MagicMock()
    cursor = conn.cursor.return_value
    cursor.fetchall.return_value = rows or []
    cursor.rowcount = rowcount
    if error is not None:
        cursor.execute.side_effect = error
    connect = MagicMock(return_value=conn)
    settings.setdefault("name", "Polaris")
    store = InventoryStore(DatabaseSettings(**settings), connect=connect, driver=DRIVER)
    return store, connect, conn, cursor


class TestConnectionString:
    """Test cases for connection string building."""

    def test_trusted_connection(self):
        store, *_ = make_store(host="sql01", port=1433)
        conn_str = store.build_connection_string()

        assert conn_str.startswith(f"DRIVER={{{DRIVER}}};")
        assert "SERVER=sql01,1433" in conn_str
        assert "DATABASE=Polaris" in conn_str
        assert "Trusted_Connection=yes" in conn_str
        assert "UID=" not in conn_str

    def test_domain_credentials(self):
        store, *_ = make_store(host="sql01", port=1444, trusted=False,
                               domain="EXAMPLE", username="svc", password="p;w}d")
        conn_str = store.build_connection_string()

        assert "SERVER=sql01,1444" in conn_str
        assert "UID=EXAMPLE\\svc" in conn_str
        assert "PWD={p;w}}d}" in conn_str
        assert "Trusted_Connection" not in conn_str

    def test_connection_string_is_cached(self):
        store, *_ = make_store()
        assert store.build_connection_string() is store.build_connection_string()


class TestDetectOdbcDriver:
    """Test cases for ODBC driver detection."""

    def test_prefers_newest(self):
        drivers = ["SQL Server", "ODBC Driver 17 for SQL Server", "ODBC Driver 18 for SQL Server"]
        assert detect_odbc_driver(drivers) == "ODBC Driver 18 for SQL Server"

    def test_fallback(self):
        assert detect_odbc_driver(["SQL Server"]) == "SQL Server"

    def test_no_driver(self):
        with pytest.raises(RuntimeError, match="No SQL Server ODBC driver"):
            detect_odbc_driver(["PostgreSQL Unicode"])


class TestListComputers:
    """Test cases for reading the inventory."""

    def test_reads_and_normalizes(self):
        store, connect, conn, cursor = make_store(rows=[("pc-1",), ("PC-2",), ("Pc-1",), ("  ",)])

        result = store.list_computers()

        assert result == frozenset({"PC-1", "PC-2"})
        cursor.execute.assert_called_once_with(SELECT_COMPUTERS)
        conn.close.assert_called_once()

    def test_query_failure_is_fatal(self):
        store, _, conn, _ = make_store(error=RuntimeError("invalid object name"))

        with pytest.raises(InventoryError, match="failed to load workstations"):
            store.list_computers()
        conn.close.assert_called_once()

    def test_connect_failure_is_fatal(self):
        store = InventoryStore(
            DatabaseSettings(name="Polaris"),
            connect=MagicMock(side_effect=RuntimeError("login timeout")),
            driver=DRIVER,
        )
        with pytest.raises(InventoryError, match="login timeout"):
            store.list_computers()


class TestRemove:
    """Test cases for deleting inventory records."""

    def test_successful_delete(self):
        store, _, conn, cursor = make_store(rowcount=1)

        assert store.remove("PC-1") is True
        cursor.execute.assert_called_once_with(DELETE_COMPUTER, "PC-1")
        conn.commit.assert_called_once()
        conn.close.assert_called_once()

    def test_zero_rows_is_failure(self):
        store, *_ = make_store(rowcount=0)
        assert store.remove("PC-1") is False

    def test_error_is_failure_not_exception(self):
        store, _, conn, _ = make_store(error=RuntimeError("deadlock victim"))

        assert store.remove("PC-1") is False
        conn.close.assert_called_once()

    def test_fresh_connection_per_removal(self):
        store, connect, *_ = make_store(rowcount=1)

        store.remove("PC-1")
        store.remove("PC-2")

        assert connect.call_count == 2
