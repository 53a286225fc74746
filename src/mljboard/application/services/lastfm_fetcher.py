"""Cancellable, paginated Last.fm history fetcher.

Hey future me - the fetch is a RACE between two tasks:

    accumulate   open the stream, pull every page, report progress
    wait-cancel  cancel_event.wait()

asyncio.wait(FIRST_COMPLETED) picks the winner and the loser is cancelled and
awaited, so no page request goes out after the race is decided. A cancel NEVER
returns the tracks gathered so far; it raises CancelOccurredError. If both tasks
finish in the same loop turn, cancel wins.

Progress updates go out exactly when len(tracks) hits a multiple of
PROGRESS_INTERVAL (1000, 2000, ...). Tests rely on that timing.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from mljboard.application.services.progress import NullProgressIndicator
from mljboard.domain.entities import RecordedTrack
from mljboard.domain.exceptions import CancelOccurredError
from mljboard.domain.ports import ILastfmClient, IProgressIndicator

logger = logging.getLogger(__name__)


class LastfmFetcher:
    """Stream a user's Last.fm history between two epoch bounds."""

    PROGRESS_INTERVAL = 1000

    def __init__(self, client: ILastfmClient) -> None:
        self._client = client

    @asynccontextmanager
    async def _progress_scope(
        self, indicator: IProgressIndicator, username: str
    ) -> AsyncIterator[IProgressIndicator]:
        """Open the indicator and guarantee close() on every exit path."""
        await indicator.open(username)
        try:
            yield indicator
        finally:
            try:
                await indicator.close()
            except Exception:
                # Removal failure must not replace the fetch result or error
                logger.warning(
                    "Could not remove progress indicator for %s", username, exc_info=True
                )

    async def _accumulate(
        self,
        username: str,
        from_ts: int | None,
        to_ts: int | None,
        tracks: list[RecordedTrack],
        indicator: IProgressIndicator,
    ) -> list[RecordedTrack]:
        stream = await self._client.recent_tracks(username, from_ts, to_ts)
        try:
            async for track in stream:
                tracks.append(track)
                if len(tracks) % self.PROGRESS_INTERVAL == 0:
                    await self._report(indicator, len(tracks))
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()
        return tracks

    async def _report(self, indicator: IProgressIndicator, loaded: int) -> None:
        try:
            await indicator.update(loaded)
        except Exception:
            logger.warning("Progress update failed at %d tracks", loaded, exc_info=True)

    async def fetch(
        self,
        username: str,
        from_ts: int | None = None,
        to_ts: int | None = None,
        cancel_event: asyncio.Event | None = None,
        indicator: IProgressIndicator | None = None,
    ) -> list[RecordedTrack]:
        """Collect every track in the window.

        Args:
            username: Last.fm username
            from_ts: Lower epoch bound (None = open)
            to_ts: Upper epoch bound (None = open)
            cancel_event: Set by the transport when the user cancels
            indicator: Progress display (defaults to none)

        Returns:
            All tracks, newest first, once the stream is exhausted

        Raises:
            CancelOccurredError: cancel_event was set before the stream finished
            UserNotFoundError: The stream could not be opened
            LastfmStreamError: A later page failed
        """
        indicator = indicator or NullProgressIndicator()
        tracks: list[RecordedTrack] = []

        async with self._progress_scope(indicator, username):
            if cancel_event is None:
                return await self._accumulate(
                    username, from_ts, to_ts, tracks, indicator
                )

            accumulate = asyncio.create_task(
                self._accumulate(username, from_ts, to_ts, tracks, indicator)
            )
            wait_cancel = asyncio.create_task(cancel_event.wait())
            try:
                done, _pending = await asyncio.wait(
                    {accumulate, wait_cancel}, return_when=asyncio.FIRST_COMPLETED
                )
            finally:
                for task in (accumulate, wait_cancel):
                    if not task.done():
                        task.cancel()
                await asyncio.gather(accumulate, wait_cancel, return_exceptions=True)

            if wait_cancel in done:
                logger.info(
                    "Fetch for Last.fm user %s cancelled after %d tracks",
                    username,
                    len(tracks),
                )
                raise CancelOccurredError(username, discarded=len(tracks))

            result = accumulate.result()
            logger.debug("Fetched %d tracks for Last.fm user %s", len(result), username)
            return result
