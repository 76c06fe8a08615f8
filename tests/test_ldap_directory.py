"""
Tests for the Active Directory reader (ldap3 connections are faked).
"""

import pytest
from ldap3.core.exceptions import LDAPSocketOpenError

from polarissync.domain.config import ActiveDirectorySettings
from polarissync.domain.errors import DirectoryError, EmptyDirectoryError
from polarissync.infrastructure.ldap_directory import (
    COMPUTER_FILTER,
    PAGED_RESULTS_OID,
    ActiveDirectoryReader,
)


class FakeConnection:
    """Just enough of ldap3.Connection for paged searches."""

    def __init__(self, pages=(), bind_result=True, bind_error=None, search_code=0):
        self.pages = [list(page) for page in pages] or [[]]
        self.bind_result = bind_result
        self.bind_error = bind_error
        self.search_code = search_code
        self.searches = []
        self.result = {}
        self.response = []
        self.unbound = False

    def bind(self):
        if self.bind_error is not None:
            raise self.bind_error
        if not self.bind_result:
            self.result = {"result": 49, "description": "invalidCredentials"}
        return self.bind_result

    def search(self, **kwargs):
        self.searches.append(kwargs)
        index = len(self.searches) - 1
        if self.search_code:
            self.result = {"result": self.search_code, "description": "noSuchObject", "message": ""}
            self.response = []
            return False
        self.response = []
        for name in self.pages[index]:
            if isinstance(name, dict):
                self.response.append(name)
            else:
                self.response.append(
                    {"type": "searchResEntry", "dn": f"CN={name},DC=x", "attributes": {"cn": name}}
                )
        cookie = b"more" if index < len(self.pages) - 1 else b""
        self.result = {
            "result": 0,
            "description": "success",
            "controls": {PAGED_RESULTS_OID: {"value": {"size": 0, "cookie": cookie}}},
        }
        return bool(self.response)

    def unbind(self):
        self.unbound = True


@pytest.fixture
def settings():
    return ActiveDirectorySettings(
        host="dc01", domain="EXAMPLE", username="svc", password="secret", dn="OU=PCs,DC=x"
    )


def make_reader(settings, conn):
    calls = []

    def factory(s):
        calls.append(s)
        return conn

    return ActiveDirectoryReader(settings, connection_factory=factory), calls


class TestActiveDirectoryReader:
    """Test cases for ActiveDirectoryReader."""

    def test_collects_cn_of_every_computer(self, settings):
        conn = FakeConnection(pages=[["pc-1", "PC-2"]])
        reader, calls = make_reader(settings, conn)

        assert reader.list_computers() == frozenset({"PC-1", "PC-2"})
        assert calls == [settings]
        search = conn.searches[0]
        assert search["search_base"] == "OU=PCs,DC=x"
        assert search["search_filter"] == COMPUTER_FILTER
        assert search["attributes"] == ["cn"]
        assert conn.unbound is True

    def test_follows_paging_cookie(self, settings):
        conn = FakeConnection(pages=[["PC-1", "PC-2"], ["PC-3"]])
        reader, _ = make_reader(settings, conn)

        assert reader.list_computers() == frozenset({"PC-1", "PC-2", "PC-3"})
        assert len(conn.searches) == 2
        assert conn.searches[1]["paged_cookie"] == b"more"

    def test_list_valued_cn_and_referrals(self, settings):
        """Schema-less results carry cn as a list; referrals are skipped."""
        conn = FakeConnection(pages=[[
            {"type": "searchResRef", "uri": ["ldap://other/DC=y"]},
            {"type": "searchResEntry", "dn": "CN=lab-7,DC=x", "attributes": {"cn": ["lab-7"]}},
            {"type": "searchResEntry", "dn": "CN=x,DC=x", "attributes": {}},
        ]])
        reader, _ = make_reader(settings, conn)

        assert reader.list_computers() == frozenset({"LAB-7"})

    def test_zero_results_is_fatal(self, settings):
        """An empty directory is treated as misconfiguration."""
        conn = FakeConnection(pages=[[]])
        reader, _ = make_reader(settings, conn)

        with pytest.raises(EmptyDirectoryError, match="no results"):
            reader.list_computers()
        assert conn.unbound is True

    def test_empty_error_is_a_directory_error(self):
        assert issubclass(EmptyDirectoryError, DirectoryError)

    def test_bind_rejected(self, settings):
        reader, _ = make_reader(settings, FakeConnection(bind_result=False))

        with pytest.raises(DirectoryError, match="unable to bind to ldap as EXAMPLE\\\\svc"):
            reader.list_computers()

    def test_server_unreachable(self, settings):
        conn = FakeConnection(bind_error=LDAPSocketOpenError("socket connection error"))
        reader, _ = make_reader(settings, conn)

        with pytest.raises(DirectoryError, match="unable to connect to AD server"):
            reader.list_computers()
        assert conn.unbound is True

    def test_search_error(self, settings):
        reader, _ = make_reader(settings, FakeConnection(search_code=32))

        with pytest.raises(DirectoryError, match="ldap search error: noSuchObject"):
            reader.list_computers()
