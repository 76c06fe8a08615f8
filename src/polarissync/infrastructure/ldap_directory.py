"""
Active Directory computer enumeration over LDAP.

Binds as DOMAIN\\user with a simple bind on port 389 and pages through every
computer object below the configured base DN, collecting the cn attribute.
"""

import logging
from typing import Any, Callable, FrozenSet, Iterator, Optional

import ldap3
from ldap3.core.exceptions import LDAPException, LDAPSocketOpenError

from polarissync.domain.config import ActiveDirectorySettings
from polarissync.domain.errors import DirectoryError, EmptyDirectoryError
from polarissync.domain.identifiers import ComputerIdentifier, identifier_set

logger = logging.getLogger(__name__)

COMPUTER_FILTER = "(&(objectClass=computer))"
PAGED_RESULTS_OID = "1.2.840.113556.1.4.319"
DEFAULT_PAGE_SIZE = 1000


def default_connection_factory(settings: ActiveDirectorySettings) -> ldap3.Connection:
    """Plain LDAP connection, not yet bound."""
    server = ldap3.Server(settings.url, get_info=ldap3.NONE)
    return ldap3.Connection(
        server,
        user=settings.bind_user,
        password=settings.password.get_secret_value(),
        authentication=ldap3.SIMPLE,
        receive_timeout=60,
    )


def _first_value(value: Any) -> Optional[str]:
    # Without schema info ldap3 returns every attribute as a list
    if isinstance(value, (list, tuple)):
        return str(value[0]) if value else None
    return str(value) if value is not None else None


class ActiveDirectoryReader:
    """Primary authoritative source."""

    name = "activedirectory"

    def __init__(self, settings: ActiveDirectorySettings,
                 connection_factory: Callable[[ActiveDirectorySettings], Any] | None = None,
                 page_size: int = DEFAULT_PAGE_SIZE):
        self.settings = settings
        self._connection_factory = connection_factory or default_connection_factory
        self.page_size = page_size

    def list_computers(self) -> FrozenSet[ComputerIdentifier]:
        """
        Enumerate computer objects below the base DN.

        Returns:
            Normalized computer names

        Raises:
            DirectoryError: If connecting, binding or searching fails
            EmptyDirectoryError: If the search returned no computers
        """
        conn = self._connection_factory(self.settings)
        try:
            try:
                bound = conn.bind()
            except LDAPSocketOpenError as e:
                raise DirectoryError(f"unable to connect to AD server: {e}", source=self.name) from e
            except LDAPException as e:
                raise DirectoryError(f"unable to bind to ldap: {e}", source=self.name) from e
            if not bound:
                raise DirectoryError(
                    f"unable to bind to ldap as {self.settings.bind_user}: "
                    f"{conn.result.get('description', 'invalid credentials')}",
                    source=self.name,
                )

            try:
                names = list(self._search(conn))
            except LDAPException as e:
                raise DirectoryError(f"ldap search error: {e}", source=self.name) from e
        finally:
            conn.unbind()

        computers = identifier_set(names)
        if not computers:
            raise EmptyDirectoryError("no results returned from ldap search", source=self.name)

        logger.info("%d records retrieved from AD", len(computers))
        return computers

    def _search(self, conn) -> Iterator[Optional[str]]:
        """Yield the cn of every computer entry, one page at a time."""
        cookie = None
        while True:
            conn.search(
                search_base=self.settings.dn,
                search_filter=COMPUTER_FILTER,
                search_scope=ldap3.SUBTREE,
                attributes=["cn"],
                paged_size=self.page_size,
                paged_cookie=cookie,
            )
            if conn.result.get("result", 0) != 0:
                raise DirectoryError(
                    f"ldap search error: {conn.result.get('description')} "
                    f"{conn.result.get('message', '')}".strip(),
                    source=self.name,
                )

            for entry in conn.response or []:
                if entry.get("type") != "searchResEntry":
                    continue
                attributes = entry.get("attributes") or {}
                yield _first_value(attributes.get("cn"))

            cookie = (
                conn.result.get("controls", {})
                .get(PAGED_RESULTS_OID, {})
                .get("value", {})
                .get("cookie")
            )
            if not cookie:
                break
