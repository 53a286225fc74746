"""Tests for LastfmClient."""

from typing import Any

import httpx
import pytest

from mljboard.config import LastfmSettings
from mljboard.domain.entities import RecordedTrack
from mljboard.domain.exceptions import (
    ConfigurationError,
    LastfmStreamError,
    UserNotFoundError,
)
from mljboard.infrastructure.integrations import LastfmClient
from mljboard.infrastructure.integrations.lastfm_client import parse_recorded_track


def track(n: int, artist: str = "Autechre", now_playing: bool = False) -> dict[str, Any]:
    data: dict[str, Any] = {
        "artist": {"#text": artist, "mbid": ""},
        "name": f"Track {n}",
        "album": {"#text": "Album"},
    }
    if now_playing:
        data["@attr"] = {"nowplaying": "true"}
    else:
        data["date"] = {"uts": str(1_700_000_000 + n), "#text": "14 Nov 2023"}
    return data


def page(tracks: list[dict[str, Any]], page_no: int, total_pages: int) -> dict[str, Any]:
    return {
        "recenttracks": {
            "track": tracks,
            "@attr": {
                "user": "bob",
                "page": str(page_no),
                "perPage": "2",
                "totalPages": str(total_pages),
                "total": "3",
            },
        }
    }


def make_client(handler, page_size: int = 200) -> LastfmClient:  # type: ignore[no-untyped-def]
    return LastfmClient(
        LastfmSettings(api_key="test-key", page_size=page_size),
        transport=httpx.MockTransport(handler),
    )


async def collect(stream) -> list[RecordedTrack]:  # type: ignore[no-untyped-def]
    return [t async for t in stream]


class TestParseRecordedTrack:
    """Test recenttracks entry parsing."""

    def test_parses_fields(self) -> None:
        parsed = parse_recorded_track(track(1))

        assert parsed == RecordedTrack(
            artist="Autechre", name="Track 1", album="Album", played_at=1_700_000_001
        )

    def test_now_playing_is_skipped(self) -> None:
        assert parse_recorded_track(track(1, now_playing=True)) is None


class TestConstruction:
    """Test API key handling."""

    def test_missing_api_key_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            LastfmClient(LastfmSettings())


class TestGetPlaycount:
    """Test user.getInfo."""

    async def test_returns_playcount(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"user": {"name": "alice", "playcount": "12345"}})

        async with make_client(handler) as client:
            assert await client.get_playcount("alice") == 12345

        params = seen[0].url.params
        assert params["method"] == "user.getInfo"
        assert params["user"] == "alice"
        assert params["api_key"] == "test-key"
        assert params["format"] == "json"

    async def test_api_error_is_user_not_found(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"error": 6, "message": "User not found"})

        async with make_client(handler) as client:
            with pytest.raises(UserNotFoundError):
                await client.get_playcount("ghost")

    async def test_http_error_is_user_not_found(self) -> None:
        async with make_client(lambda r: httpx.Response(500)) as client:
            with pytest.raises(UserNotFoundError):
                await client.get_playcount("alice")


class TestRecentTracks:
    """Test the paginated user.getRecentTracks stream."""

    async def test_streams_every_page(self) -> None:
        pages = {
            "1": page([track(1, now_playing=True), track(2), track(3)], 1, 2),
            "2": page([track(4)], 2, 2),
        }
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=pages[request.url.params["page"]])

        async with make_client(handler, page_size=2) as client:
            stream = await client.recent_tracks("bob", 100, 200)
            tracks = await collect(stream)

        assert [t.name for t in tracks] == ["Track 2", "Track 3", "Track 4"]
        assert [r.url.params["page"] for r in seen] == ["1", "2"]
        first = seen[0].url.params
        assert first["limit"] == "2"
        assert first["from"] == "100"
        assert first["to"] == "200"

    async def test_open_bounds_are_not_sent(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=page([], 1, 1))

        async with make_client(handler) as client:
            assert await collect(await client.recent_tracks("bob", None, None)) == []

        assert "from" not in seen[0].url.params
        assert "to" not in seen[0].url.params

    async def test_single_track_page_object(self) -> None:
        body = page([], 1, 1)
        body["recenttracks"]["track"] = track(9)

        async with make_client(lambda r: httpx.Response(200, json=body)) as client:
            tracks = await collect(await client.recent_tracks("bob", None, None))

        assert [t.name for t in tracks] == ["Track 9"]

    async def test_first_page_is_fetched_eagerly(self) -> None:
        """A missing user fails when the stream is opened, not while iterating."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"error": 6, "message": "User not found"})

        async with make_client(handler) as client:
            with pytest.raises(UserNotFoundError):
                await client.recent_tracks("ghost", None, None)

    async def test_later_page_failure_is_stream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params["page"] == "1":
                return httpx.Response(200, json=page([track(1)], 1, 3))
            return httpx.Response(500)

        async with make_client(handler) as client:
            stream = await client.recent_tracks("bob", None, None)
            with pytest.raises(LastfmStreamError) as exc_info:
                await collect(stream)

        assert exc_info.value.page == 2
