"""Maloja-compatible scrobble server HTTP client."""

import logging
from typing import Any

import httpx

from mljboard.domain.entities import MalojaCredentials
from mljboard.domain.exceptions import MalojaError
from mljboard.domain.ports import IMalojaClient
from mljboard.domain.value_objects import ScrobbleRange, to_maloja_params

logger = logging.getLogger(__name__)


class MalojaClient(IMalojaClient):
    """HTTP client for Maloja's `numscrobbles` endpoint.

    Hey future me - there's no shared AsyncClient here. Certificate verification
    is a per-client setting in httpx and every user brings their own server (and
    their own skip_cert_verification flag), so each count opens a short-lived
    client for exactly one request.
    """

    NUMSCROBBLES_PATH = "/apis/mlj_1/numscrobbles"

    def __init__(
        self,
        timeout: float | None = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize Maloja client.

        Args:
            timeout: Request timeout in seconds (None = wait forever)
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self._timeout = timeout
        self._transport = transport

    @staticmethod
    def build_params(
        credentials: MalojaCredentials,
        artist: str | None,
        scrobble_range: ScrobbleRange,
    ) -> dict[str, str]:
        """Query parameters for one numscrobbles request."""
        params = to_maloja_params(scrobble_range)
        if artist is not None:
            params["artist"] = artist
        if credentials.api_key:
            params["key"] = credentials.api_key
        return params

    async def count_scrobbles(
        self,
        credentials: MalojaCredentials,
        artist: str | None,
        scrobble_range: ScrobbleRange,
    ) -> int:
        url = credentials.base_url + self.NUMSCROBBLES_PATH
        params = self.build_params(credentials, artist, scrobble_range)

        try:
            async with httpx.AsyncClient(
                headers=credentials.headers or {},
                verify=not credentials.skip_cert_verification,
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            ) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                data: Any = response.json()
        except httpx.HTTPStatusError as e:
            raise MalojaError(
                f"Maloja at {credentials.host} answered {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise MalojaError(f"Maloja at {credentials.host} unreachable: {e}") from e
        except ValueError as e:
            raise MalojaError(f"Maloja at {credentials.host} sent invalid JSON") from e

        amount = data.get("amount") if isinstance(data, dict) else None
        # bool is an int subclass, reject it explicitly
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise MalojaError(
                f"Maloja at {credentials.host} sent no scrobble amount: {data!r}"
            )
        return amount
