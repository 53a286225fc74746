"""Tests for LastfmFetcher.

Hey future me - progress timing is exact: update() at 1000, 2000, ... and never
at 999 or 1001. The cancel tests drive the race deterministically with events,
no sleeps.
"""

import asyncio
from collections.abc import AsyncIterator
from unittest.mock import AsyncMock

import pytest

from mljboard.application.services import LastfmFetcher
from mljboard.domain.entities import RecordedTrack
from mljboard.domain.exceptions import (
    CancelOccurredError,
    LastfmStreamError,
    UserNotFoundError,
)
from mljboard.domain.ports import ILastfmClient, IProgressIndicator


def make_tracks(n: int) -> list[RecordedTrack]:
    return [RecordedTrack(artist=f"Artist {i % 7}", name=f"Track {i}") for i in range(n)]


class FakeLastfmClient(ILastfmClient):
    """Streams a fixed list of tracks; can stall or fail part-way."""

    def __init__(
        self,
        tracks: list[RecordedTrack],
        stall_after: int | None = None,
        fail_after: int | None = None,
    ) -> None:
        self.tracks = tracks
        self.stall_after = stall_after
        self.fail_after = fail_after
        self.stalled = asyncio.Event()
        self.calls: list[tuple[str, int | None, int | None]] = []

    async def get_playcount(self, username: str) -> int:
        return len(self.tracks)

    async def recent_tracks(
        self, username: str, from_ts: int | None, to_ts: int | None
    ) -> AsyncIterator[RecordedTrack]:
        self.calls.append((username, from_ts, to_ts))
        return self._stream(username)

    async def _stream(self, username: str) -> AsyncIterator[RecordedTrack]:
        for i, track in enumerate(self.tracks):
            if i == self.stall_after:
                self.stalled.set()
                await asyncio.Event().wait()
            if i == self.fail_after:
                raise LastfmStreamError(username, 2, "boom")
            yield track


@pytest.fixture
def indicator() -> AsyncMock:
    return AsyncMock(spec=IProgressIndicator)


def updates(indicator: AsyncMock) -> list[int]:
    return [call.args[0] for call in indicator.update.await_args_list]


class TestFetch:
    """Test plain (non-cancellable) fetching."""

    async def test_returns_all_tracks(self, indicator: AsyncMock) -> None:
        client = FakeLastfmClient(make_tracks(5))
        fetcher = LastfmFetcher(client)

        tracks = await fetcher.fetch("bob", 10, 20, indicator=indicator)

        assert tracks == make_tracks(5)
        assert client.calls == [("bob", 10, 20)]
        indicator.open.assert_awaited_once_with("bob")
        indicator.close.assert_awaited_once()

    async def test_works_without_indicator(self) -> None:
        fetcher = LastfmFetcher(FakeLastfmClient(make_tracks(3)))

        assert len(await fetcher.fetch("bob")) == 3

    @pytest.mark.parametrize(
        ("total", "expected"),
        [
            (999, []),
            (1000, [1000]),
            (1001, [1000]),
            (2500, [1000, 2000]),
        ],
    )
    async def test_progress_exactly_at_multiples_of_1000(
        self, indicator: AsyncMock, total: int, expected: list[int]
    ) -> None:
        fetcher = LastfmFetcher(FakeLastfmClient(make_tracks(total)))

        await fetcher.fetch("bob", indicator=indicator)

        assert updates(indicator) == expected

    async def test_stream_open_failure_closes_indicator(
        self, indicator: AsyncMock
    ) -> None:
        client = AsyncMock(spec=ILastfmClient)
        client.recent_tracks.side_effect = UserNotFoundError("ghost")
        fetcher = LastfmFetcher(client)

        with pytest.raises(UserNotFoundError):
            await fetcher.fetch("ghost", indicator=indicator)

        indicator.close.assert_awaited_once()

    async def test_mid_stream_failure_is_not_a_partial_count(
        self, indicator: AsyncMock
    ) -> None:
        fetcher = LastfmFetcher(FakeLastfmClient(make_tracks(10), fail_after=4))

        with pytest.raises(LastfmStreamError):
            await fetcher.fetch("bob", indicator=indicator, cancel_event=asyncio.Event())

        indicator.close.assert_awaited_once()

    async def test_close_failure_does_not_mask_result(
        self, indicator: AsyncMock
    ) -> None:
        indicator.close.side_effect = RuntimeError("message already deleted")
        fetcher = LastfmFetcher(FakeLastfmClient(make_tracks(3)))

        assert len(await fetcher.fetch("bob", indicator=indicator)) == 3

    async def test_update_failure_does_not_abort_fetch(
        self, indicator: AsyncMock
    ) -> None:
        indicator.update.side_effect = RuntimeError("rate limited")
        fetcher = LastfmFetcher(FakeLastfmClient(make_tracks(1500)))

        assert len(await fetcher.fetch("bob", indicator=indicator)) == 1500


class TestCancellation:
    """Test the accumulate vs. cancel race."""

    async def test_not_cancelled_returns_tracks(self, indicator: AsyncMock) -> None:
        fetcher = LastfmFetcher(FakeLastfmClient(make_tracks(1200)))

        tracks = await fetcher.fetch(
            "bob", cancel_event=asyncio.Event(), indicator=indicator
        )

        assert len(tracks) == 1200
        assert updates(indicator) == [1000]

    async def test_cancel_mid_stream_raises(self, indicator: AsyncMock) -> None:
        client = FakeLastfmClient(make_tracks(3000), stall_after=1500)
        fetcher = LastfmFetcher(client)
        cancel_event = asyncio.Event()

        task = asyncio.create_task(
            fetcher.fetch("bob", cancel_event=cancel_event, indicator=indicator)
        )
        await client.stalled.wait()
        cancel_event.set()

        with pytest.raises(CancelOccurredError) as exc_info:
            await task

        assert exc_info.value.discarded == 1500
        assert updates(indicator) == [1000]
        indicator.close.assert_awaited_once()

    async def test_cancel_wins_when_both_finish_together(
        self, indicator: AsyncMock
    ) -> None:
        """Already-set event + instant stream: never report success."""
        cancel_event = asyncio.Event()
        cancel_event.set()
        fetcher = LastfmFetcher(FakeLastfmClient(make_tracks(5)))

        with pytest.raises(CancelOccurredError):
            await fetcher.fetch("bob", cancel_event=cancel_event, indicator=indicator)

        indicator.close.assert_awaited_once()
