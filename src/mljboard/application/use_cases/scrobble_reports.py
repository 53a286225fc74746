"""Scrobble report use cases (the `scrobbles`, `artistscrobbles` and `lfmuser` commands)."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime

from mljboard.application.services.credential_resolver import CredentialResolver
from mljboard.application.services.scrobble_counter import ScrobbleCounter
from mljboard.application.use_cases import UseCase
from mljboard.domain.entities import BackendIdentity, LastFMUser
from mljboard.domain.exceptions import ConfigurationError, NoIdentityFoundError
from mljboard.domain.ports import IProgressIndicator
from mljboard.domain.value_objects import (
    AllTime,
    Named,
    ScrobbleCountResult,
    human_readable_result,
    past_year,
)


@dataclass
class ReportField:
    """One labelled value in a report (an embed field in chat)."""

    name: str
    result: ScrobbleCountResult

    @property
    def value(self) -> str:
        return human_readable_result(self.result)


@dataclass
class ScrobbleReport:
    """Transport-agnostic command reply."""

    title: str
    fields: list[ReportField] = field(default_factory=list)


@dataclass
class ScrobblesRequest:
    """Request for a user's all-time and this-year counts."""

    user_handle: str
    display_name: str | None = None
    cancel_event: asyncio.Event | None = None
    indicator: IProgressIndicator | None = None


@dataclass
class ArtistScrobblesRequest:
    """Request for a user's all-time count for one artist."""

    user_handle: str
    artist: str
    display_name: str | None = None
    cancel_event: asyncio.Event | None = None
    indicator: IProgressIndicator | None = None


@dataclass
class LastfmUserScrobblesRequest:
    """Request for any public Last.fm user's past-year count."""

    username: str
    cancel_event: asyncio.Event | None = None
    indicator: IProgressIndicator | None = None
    now: datetime | None = None


async def _resolve_or_raise(resolver: CredentialResolver, user_handle: str) -> BackendIdentity:
    identity = await resolver.resolve_identity(user_handle)
    if identity is None:
        raise NoIdentityFoundError(user_handle)
    return identity


class ScrobblesUseCase(UseCase[ScrobblesRequest, ScrobbleReport]):
    """All-time and this-year counts for the calling user."""

    def __init__(self, resolver: CredentialResolver, counter: ScrobbleCounter) -> None:
        self._resolver = resolver
        self._counter = counter

    async def execute(self, request: ScrobblesRequest) -> ScrobbleReport:
        """
        Raises:
            NoIdentityFoundError: Nothing is set up for the user
            RelayResolutionError: The pairing code matched no single session
        """
        identity = await _resolve_or_raise(self._resolver, request.user_handle)
        name = request.display_name or request.user_handle

        # One cancel signal covers both fields
        all_time = await self._counter.count(
            identity,
            None,
            AllTime(),
            cancel_event=request.cancel_event,
            indicator=request.indicator,
        )
        this_year = await self._counter.count(
            identity,
            None,
            Named("thisyear"),
            cancel_event=request.cancel_event,
            indicator=request.indicator,
        )

        return ScrobbleReport(
            title=f"{name}'s scrobbles",
            fields=[
                ReportField("All time", all_time),
                ReportField("This year", this_year),
            ],
        )


class ArtistScrobblesUseCase(UseCase[ArtistScrobblesRequest, ScrobbleReport]):
    """All-time count for one artist for the calling user."""

    def __init__(self, resolver: CredentialResolver, counter: ScrobbleCounter) -> None:
        self._resolver = resolver
        self._counter = counter

    async def execute(self, request: ArtistScrobblesRequest) -> ScrobbleReport:
        identity = await _resolve_or_raise(self._resolver, request.user_handle)
        name = request.display_name or request.user_handle

        result = await self._counter.count(
            identity,
            request.artist,
            AllTime(),
            cancel_event=request.cancel_event,
            indicator=request.indicator,
        )
        return ScrobbleReport(
            title=f"{name}'s scrobbles for {request.artist}",
            fields=[ReportField("All time", result)],
        )


class LastfmUserScrobblesUseCase(UseCase[LastfmUserScrobblesRequest, ScrobbleReport]):
    """Past-year count for any Last.fm user, streamed and cancellable."""

    def __init__(self, counter: ScrobbleCounter) -> None:
        self._counter = counter

    async def execute(self, request: LastfmUserScrobblesRequest) -> ScrobbleReport:
        """
        Raises:
            ConfigurationError: No Last.fm API key is configured
        """
        if not self._counter.lastfm_enabled:
            raise ConfigurationError("The bot owner has not set up a Last.FM API key.")

        result = await self._counter.count(
            LastFMUser(request.username),
            None,
            past_year(request.now),
            cancel_event=request.cancel_event,
            indicator=request.indicator,
        )
        return ScrobbleReport(
            title=f"LastFM user {request.username}'s scrobbles",
            fields=[ReportField("Within the past year", result)],
        )
