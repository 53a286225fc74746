"""Shared test fixtures.

Hey future me - `app` is the real FastAPI app with only the three outbound HTTP
clients swapped for httpx.MockTransport-backed ones (see FakeBackends). The
database is a real sqlite file under tmp_path, created by the real lifespan.
"""

from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import httpx
import pytest
from fastapi import FastAPI

from mljboard.api.dependencies import (
    get_lastfm_client,
    get_maloja_client,
    get_relay_client,
)
from mljboard.config import DatabaseSettings, LastfmSettings, RelaySettings, Settings
from mljboard.infrastructure.integrations import LastfmClient, MalojaClient, RelayClient
from mljboard.main import create_app


class FakeBackends:
    """Programmable relay, Maloja and Last.fm servers."""

    def __init__(self) -> None:
        self.relay_connections: list[list[str]] = []
        self.maloja_status = 200
        self.maloja_requests: list[httpx.Request] = []
        self.lastfm_requests: list[httpx.Request] = []
        self.lastfm_playcount = "500"
        self.lastfm_error: dict[str, Any] | None = None
        self.lastfm_pages: dict[str, dict[str, Any]] = {
            "1": self.page([self.track(1), self.track(2, "Aphex Twin")], 1, 1)
        }

    @staticmethod
    def track(n: int, artist: str = "Autechre") -> dict[str, Any]:
        return {
            "artist": {"#text": artist},
            "name": f"Track {n}",
            "album": {"#text": "Album"},
            "date": {"uts": str(1_700_000_000 + n)},
        }

    @staticmethod
    def page(tracks: list[dict[str, Any]], page: int, total_pages: int) -> dict[str, Any]:
        return {
            "recenttracks": {
                "track": tracks,
                "@attr": {"page": str(page), "totalPages": str(total_pages)},
            }
        }

    def relay(self, request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"connections": self.relay_connections})

    def maloja(self, request: httpx.Request) -> httpx.Response:
        self.maloja_requests.append(request)
        if self.maloja_status != 200:
            return httpx.Response(self.maloja_status)
        amount = 7 if "in" in request.url.params else 100
        return httpx.Response(200, json={"status": "ok", "amount": amount})

    async def lastfm(self, request: httpx.Request) -> httpx.Response:
        self.lastfm_requests.append(request)
        if self.lastfm_error is not None:
            return httpx.Response(200, json=self.lastfm_error)
        params = request.url.params
        if params["method"] == "user.getInfo":
            return httpx.Response(
                200,
                json={"user": {"name": params["user"], "playcount": self.lastfm_playcount}},
            )
        return httpx.Response(200, json=self.lastfm_pages[params["page"]])


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database=DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path}/mljboard-test.db"),
        relay=RelaySettings(host="relay", port=9000, password="pw"),
        lastfm=LastfmSettings(api_key="test-key", page_size=2),
        log_level="DEBUG",
    )


@pytest.fixture
def backends() -> FakeBackends:
    return FakeBackends()


@pytest.fixture
def app(settings: Settings, backends: FakeBackends) -> FastAPI:
    application = create_app(settings)

    async def relay_client() -> AsyncGenerator[RelayClient, None]:
        async with RelayClient(
            settings.relay, transport=httpx.MockTransport(backends.relay)
        ) as client:
            yield client

    def maloja_client() -> MalojaClient:
        return MalojaClient(transport=httpx.MockTransport(backends.maloja))

    async def lastfm_client() -> AsyncGenerator[LastfmClient, None]:
        async with LastfmClient(
            settings.lastfm, transport=httpx.MockTransport(backends.lastfm)
        ) as client:
            yield client

    application.dependency_overrides[get_relay_client] = relay_client
    application.dependency_overrides[get_maloja_client] = maloja_client
    application.dependency_overrides[get_lastfm_client] = lastfm_client
    return application
