"""HOS relay server HTTP client."""

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from mljboard.config.settings import RelaySettings
from mljboard.domain.entities import (
    HOS_PASSWD_HEADER,
    MalojaCredentials,
    RelayConnection,
)
from mljboard.domain.exceptions import RelayUnavailableError
from mljboard.domain.ports import IRelayClient

logger = logging.getLogger(__name__)


class RelayConnectionList(BaseModel):
    """Body of `GET /list`."""

    connections: list[tuple[str, str]]


class RelayClient(IRelayClient):
    """HTTP client for the relay's connection list.

    Hey future me - no caching here! Every resolution hits /list again, because
    the list changes whenever a client connects or drops.
    """

    def __init__(
        self,
        settings: RelaySettings,
        timeout: float | None = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize relay client.

        Args:
            settings: Relay connection settings
            timeout: Request timeout in seconds (None = wait forever)
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.settings = settings
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _headers(self) -> dict[str, str]:
        if self.settings.password:
            return {HOS_PASSWD_HEADER: self.settings.password}
        return {}

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.base_url,
                headers=self._headers(),
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def list_connections(self) -> list[RelayConnection]:
        client = await self._get_client()
        try:
            response = await client.get("/list")
            response.raise_for_status()
            payload: Any = response.json()
            parsed = RelayConnectionList.model_validate(payload)
        except httpx.HTTPError as e:
            logger.warning("Relay /list request failed: %s", e)
            raise RelayUnavailableError(str(e)) from e
        except (ValueError, ValidationError) as e:
            # ValueError covers a body that is not JSON at all
            logger.warning("Relay /list returned an unexpected body: %s", e)
            raise RelayUnavailableError(f"malformed connection list: {e}") from e

        connections = [
            RelayConnection(session_id=session_id, pairing_code=pairing_code)
            for session_id, pairing_code in parsed.connections
        ]
        logger.debug("Relay reports %d live connection(s)", len(connections))
        return connections

    def credentials_for_session(self, session_id: str) -> MalojaCredentials:
        headers = self._headers()
        return MalojaCredentials(
            https=self.settings.https,
            skip_cert_verification=not self.settings.https,
            host=self.settings.host,
            port=self.settings.port,
            path=f"/sid/{session_id}",
            headers=headers or None,
            api_key=None,
        )

    async def __aenter__(self) -> "RelayClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
