"""Last.fm HTTP client implementation."""

import logging
from collections.abc import AsyncIterator
from typing import Any, cast

import httpx

from mljboard.config.settings import LastfmSettings
from mljboard.domain.entities import RecordedTrack
from mljboard.domain.exceptions import (
    ConfigurationError,
    LastfmStreamError,
    UserNotFoundError,
)
from mljboard.domain.ports import ILastfmClient

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    """Last.fm wraps most strings as {"#text": ...}; plain strings also occur."""
    if isinstance(value, dict):
        return str(value.get("#text", "") or value.get("name", ""))
    if value is None:
        return ""
    return str(value)


def parse_recorded_track(data: dict[str, Any]) -> RecordedTrack | None:
    """Convert one `recenttracks.track` entry. Now-playing entries yield None."""
    if data.get("@attr", {}).get("nowplaying") == "true":
        return None

    played_at: int | None = None
    date = data.get("date")
    uts = date.get("uts") if isinstance(date, dict) else None
    if uts is not None:
        try:
            played_at = int(uts)
        except (TypeError, ValueError):
            played_at = None

    return RecordedTrack(
        artist=_text(data.get("artist")),
        name=_text(data.get("name")),
        album=_text(data.get("album")),
        played_at=played_at,
    )


class LastfmClient(ILastfmClient):
    """HTTP client for Last.fm API operations."""

    API_BASE_URL = "https://ws.audioscrobbler.com/2.0/"

    def __init__(
        self,
        settings: LastfmSettings,
        timeout: float | None = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize Last.fm client.

        Args:
            settings: Last.fm configuration settings (request-scoped)
            timeout: Request timeout in seconds (None = wait forever)
            transport: Optional httpx transport (tests use httpx.MockTransport)

        Raises:
            ConfigurationError: If no API key is configured
        """
        if not settings.is_configured():
            raise ConfigurationError("The bot owner has not set up a Last.FM API key.")
        self.settings = settings
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.API_BASE_URL,
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _make_request(
        self, method: str, params: dict[str, Any]
    ) -> dict[str, Any] | None:
        """
        Make a request to Last.fm API.

        Args:
            method: API method name
            params: Request parameters

        Returns:
            Response data or None if Last.fm reported an error / 404

        Raises:
            httpx.HTTPError: If the request fails
        """
        client = await self._get_client()

        request_params = {
            "method": method,
            "api_key": self.settings.api_key,
            "format": "json",
            **params,
        }

        try:
            response = await client.get("", params=request_params)
            response.raise_for_status()
            data = response.json()

            # Check for API errors
            if "error" in data:
                logger.debug(
                    "Last.fm %s error %s: %s",
                    method,
                    data.get("error"),
                    data.get("message"),
                )
                return None

            return cast(dict[str, Any], data)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise

    async def get_playcount(self, username: str) -> int:
        try:
            response = await self._make_request("user.getInfo", {"user": username})
        except (httpx.HTTPError, ValueError) as e:
            raise UserNotFoundError(username, reason=str(e)) from e

        user = response.get("user") if response else None
        if not isinstance(user, dict):
            raise UserNotFoundError(username)

        try:
            return int(user.get("playcount", 0))
        except (TypeError, ValueError) as e:
            raise UserNotFoundError(username, reason="invalid playcount") from e

    async def _fetch_recent_page(
        self,
        username: str,
        from_ts: int | None,
        to_ts: int | None,
        page: int,
    ) -> dict[str, Any] | None:
        params: dict[str, Any] = {
            "user": username,
            "limit": self.settings.page_size,
            "page": page,
        }
        if from_ts is not None:
            params["from"] = from_ts
        if to_ts is not None:
            params["to"] = to_ts

        response = await self._make_request("user.getRecentTracks", params)
        recent = response.get("recenttracks") if response else None
        return recent if isinstance(recent, dict) else None

    async def recent_tracks(
        self, username: str, from_ts: int | None, to_ts: int | None
    ) -> AsyncIterator[RecordedTrack]:
        try:
            first_page = await self._fetch_recent_page(username, from_ts, to_ts, 1)
        except (httpx.HTTPError, ValueError) as e:
            raise UserNotFoundError(username, reason=str(e)) from e
        if first_page is None:
            raise UserNotFoundError(username)

        return self._iter_recent_tracks(username, from_ts, to_ts, first_page)

    async def _iter_recent_tracks(
        self,
        username: str,
        from_ts: int | None,
        to_ts: int | None,
        first_page: dict[str, Any],
    ) -> AsyncIterator[RecordedTrack]:
        """Yield tracks page by page, starting from an already fetched page 1."""
        total_pages = _total_pages(first_page)
        page_data: dict[str, Any] | None = first_page
        page = 1

        while page_data is not None:
            for item in _page_tracks(page_data):
                track = parse_recorded_track(item)
                if track is not None:
                    yield track

            if page >= total_pages:
                return

            page += 1
            try:
                page_data = await self._fetch_recent_page(username, from_ts, to_ts, page)
            except (httpx.HTTPError, ValueError) as e:
                raise LastfmStreamError(username, page, str(e)) from e
            if page_data is None:
                raise LastfmStreamError(username, page, "Last.fm returned an error")

    async def __aenter__(self) -> "LastfmClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()


def _total_pages(page_data: dict[str, Any]) -> int:
    try:
        return int(page_data.get("@attr", {}).get("totalPages", 1))
    except (TypeError, ValueError):
        return 1


def _page_tracks(page_data: dict[str, Any]) -> list[dict[str, Any]]:
    # A single-track page comes back as an object instead of a list
    tracks = page_data.get("track", [])
    if isinstance(tracks, dict):
        return [tracks]
    return [t for t in tracks if isinstance(t, dict)]
