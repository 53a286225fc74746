"""Scrobble counting against whichever backend an identity resolved to.

Hey future me - two very different strategies live behind count():

Maloja      one numscrobbles request; the server filters and counts.
Last.fm     - no bounds and no artist filter → user.getInfo playcount, no paging
            - anything else → stream every track in the window through
              LastfmFetcher and count client-side (artist match is exact,
              case-insensitive)

count() never raises for backend trouble. Every ScrobbleCountException becomes a
failed ScrobbleCountResult, which human_readable_result() can always render.
The one exception is setup, not backend trouble: a Last.fm identity with no
Last.fm client configured raises ConfigurationError before anything is counted.
"""

import asyncio
import logging
from datetime import datetime

from mljboard.application.services.lastfm_fetcher import LastfmFetcher
from mljboard.domain.entities import BackendIdentity, LastFMUser, MalojaUser
from mljboard.domain.exceptions import ConfigurationError, ScrobbleCountException
from mljboard.domain.ports import ILastfmClient, IMalojaClient, IProgressIndicator
from mljboard.domain.value_objects import (
    AllTime,
    Bounded,
    Named,
    ScrobbleCountResult,
    ScrobbleRange,
    is_unbounded,
    named_to_bounds,
)

logger = logging.getLogger(__name__)


class ScrobbleCounter:
    """Produce a scrobble count for (identity, artist filter, range)."""

    def __init__(
        self,
        maloja_client: IMalojaClient,
        lastfm_client: ILastfmClient | None = None,
    ) -> None:
        """
        Initialize counter.

        Args:
            maloja_client: Client used for Maloja-backed identities
            lastfm_client: Client used for Last.fm identities (None when no
                Last.fm API key is configured)
        """
        self._maloja = maloja_client
        self._lastfm = lastfm_client
        self._fetcher = LastfmFetcher(lastfm_client) if lastfm_client else None

    @property
    def lastfm_enabled(self) -> bool:
        return self._lastfm is not None

    async def count(
        self,
        identity: BackendIdentity,
        artist: str | None = None,
        scrobble_range: ScrobbleRange | None = None,
        cancel_event: asyncio.Event | None = None,
        indicator: IProgressIndicator | None = None,
        now: datetime | None = None,
    ) -> ScrobbleCountResult:
        """Count scrobbles; backend failures come back as a failed result.

        Args:
            identity: Resolved backend identity
            artist: Optional artist filter
            scrobble_range: Time window (defaults to all time)
            cancel_event: Cancel signal for the Last.fm streaming path
            indicator: Progress display for the Last.fm streaming path
            now: Reference time for named Last.fm periods (tests pin this)

        Raises:
            ConfigurationError: Last.fm identity but no Last.fm client configured
        """
        scrobble_range = scrobble_range if scrobble_range is not None else AllTime()
        try:
            if isinstance(identity, MalojaUser):
                count = await self._maloja.count_scrobbles(
                    identity.credentials, artist, scrobble_range
                )
            elif isinstance(identity, LastFMUser):
                count = await self._count_lastfm(
                    identity, artist, scrobble_range, cancel_event, indicator, now
                )
            else:
                raise TypeError(f"Unknown backend identity: {identity!r}")
        except ScrobbleCountException as e:
            logger.warning("Scrobble count failed (%s): %s", e.kind, e.message)
            return ScrobbleCountResult.failure(e.kind)

        return ScrobbleCountResult.ok(count)

    async def _count_lastfm(
        self,
        identity: LastFMUser,
        artist: str | None,
        scrobble_range: ScrobbleRange,
        cancel_event: asyncio.Event | None,
        indicator: IProgressIndicator | None,
        now: datetime | None,
    ) -> int:
        if self._lastfm is None or self._fetcher is None:
            raise ConfigurationError("The bot owner has not set up a Last.FM API key.")

        if isinstance(scrobble_range, Named):
            bounds = named_to_bounds(scrobble_range.label, now)
        elif isinstance(scrobble_range, Bounded):
            bounds = scrobble_range
        else:
            bounds = Bounded()

        if artist is None and is_unbounded(bounds):
            logger.debug("Using Last.fm playcount for %s", identity.username)
            return await self._lastfm.get_playcount(identity.username)

        tracks = await self._fetcher.fetch(
            identity.username,
            bounds.from_ts,
            bounds.to_ts,
            cancel_event=cancel_event,
            indicator=indicator,
        )
        if artist is None:
            return len(tracks)
        return sum(1 for track in tracks if track.artist_matches(artist))
