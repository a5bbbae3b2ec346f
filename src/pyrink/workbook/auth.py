"""Bearer token providers for Microsoft Graph."""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from azure.core.exceptions import AzureError
from azure.identity.aio import ClientSecretCredential

from pyrink.config.settings import WorkbookSettings
from pyrink.errors import ConfigurationError, TransientStoreError


logger = logging.getLogger(__name__)

GRAPH_SCOPE = "https://graph.microsoft.com/.default"


class TokenProvider(Protocol):
    async def get_token(self) -> str: ...


class StaticTokenProvider:
    """Serve a token acquired elsewhere."""

    def __init__(self, token: str):
        if not token:
            raise ConfigurationError("Access token must not be empty")
        self._token = token

    async def get_token(self) -> str:
        return self._token


class ClientSecretTokenProvider:
    """App-only Graph token from an Entra ID client secret.

    Token caching and refresh are left to ``azure-identity``. This class
    only checks the credentials up front and maps failures onto the sync
    engine's error taxonomy.
    """

    def __init__(
        self,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        *,
        scope: str = GRAPH_SCOPE,
        credential: Optional[Any] = None,
    ):
        if not tenant_id or not client_id or not client_secret:
            raise ConfigurationError(
                "Graph credentials missing. Ensure GRAPH_TENANT_ID, GRAPH_CLIENT_ID, "
                "and GRAPH_CLIENT_SECRET are set."
            )
        self._scope = scope
        self._credential = credential or ClientSecretCredential(tenant_id, client_id, client_secret)

    @classmethod
    def from_settings(cls, settings: WorkbookSettings) -> "ClientSecretTokenProvider":
        return cls(
            settings.tenant_id or "",
            settings.client_id or "",
            settings.client_secret or "",
        )

    async def get_token(self) -> str:
        try:
            access = await self._credential.get_token(self._scope)
        except AzureError as exc:
            raise TransientStoreError(f"Unable to acquire Graph access token: {exc}") from exc
        if not access or not access.token:
            raise TransientStoreError("Unable to acquire Graph access token.")
        logger.debug("Graph access token valid until %s", access.expires_on)
        return access.token

    async def close(self) -> None:
        await self._credential.close()
