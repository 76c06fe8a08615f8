"""
Azure AD devices through Microsoft Graph.

Uses the OAuth2 client-credentials flow with an app registration that has
Device.Read.All, then pages through /devices.
"""

from __future__ import annotations

import logging
from contextlib import nullcontext
from typing import Any, Dict, FrozenSet, Iterator, Optional

import httpx

from polarissync.domain.config import AzureSettings
from polarissync.domain.errors import CloudDirectoryError
from polarissync.domain.identifiers import ComputerIdentifier, identifier_set

logger = logging.getLogger(__name__)

TOKEN_URL = "https://login.microsoftonline.com/{tenant}/oauth2/v2.0/token"
DEVICES_URL = "https://graph.microsoft.com/v1.0/devices"
GRAPH_SCOPE = "https://graph.microsoft.com/.default"

TRUST_TYPE = "AzureAd"
PROFILE_TYPE = "RegisteredDevice"

_DEFAULT_TIMEOUT_SECONDS = 30.0


class GraphDeviceReader:
    """Structured replacement for the PowerShell device report."""

    name = "azure"

    def __init__(self, settings: AzureSettings, client: httpx.Client | None = None,
                 timeout: float = _DEFAULT_TIMEOUT_SECONDS):
        """
        Args:
            settings: Azure section with tenantId, clientId and clientSecret set
            client: HTTP client to use; the caller keeps ownership of it
            timeout: Request timeout for the client created when none is given
        """
        self.settings = settings
        self._client = client
        self.timeout = timeout

    def list_computers(self) -> FrozenSet[ComputerIdentifier]:
        """
        Enumerate Azure AD joined, registered devices.

        Raises:
            CloudDirectoryError: If authentication or any Graph request fails
        """
        client_cm = nullcontext(self._client) if self._client is not None else httpx.Client(timeout=self.timeout)
        try:
            with client_cm as client:
                token = self._acquire_token(client)
                names = list(self._iter_device_names(client, token))
        except (httpx.HTTPError, ValueError) as e:
            raise CloudDirectoryError(f"failed to retrieve records from Azure: {e}", source=self.name) from e

        computers = identifier_set(names)
        logger.info("%d records retrieved from Azure", len(computers))
        return computers

    def _acquire_token(self, client: httpx.Client) -> str:
        secret = self.settings.client_secret
        response = client.post(
            TOKEN_URL.format(tenant=self.settings.tenant_id),
            data={
                "grant_type": "client_credentials",
                "client_id": self.settings.client_id or "",
                "client_secret": secret.get_secret_value() if secret else "",
                "scope": GRAPH_SCOPE,
            },
        )
        response.raise_for_status()
        token = response.json().get("access_token")
        if not token:
            raise CloudDirectoryError("token response did not contain an access token", source=self.name)
        return token

    def _iter_device_names(self, client: httpx.Client, token: str) -> Iterator[Optional[str]]:
        url: Optional[str] = DEVICES_URL
        params: Optional[Dict[str, Any]] = {
            "$select": "displayName,trustType,profileType",
            "$top": 999,
        }
        headers = {"Authorization": f"Bearer {token}"}
        while url:
            response = client.get(url, params=params, headers=headers)
            response.raise_for_status()
            payload = response.json()
            for device in payload.get("value", []):
                if device.get("trustType") == TRUST_TYPE and device.get("profileType") == PROFILE_TYPE:
                    yield device.get("displayName")
            # nextLink already carries the query string
            url = payload.get("@odata.nextLink")
            params = None
