"""Scrobble report endpoints (the `scrobbles`, `artistscrobbles` and `lfmuser` commands).

Hey future me - any report that streams Last.fm history can run for minutes on a
big history. The caller may pass its own fetch_id (or we make one) and
POST /fetches/{id}/cancel from another request sets the cancel signal. The
registry entry disappears as soon as the report request finishes, so a late
cancel just returns cancelled=false.
"""

import logging

from fastapi import APIRouter, Depends, Query

from mljboard.api.dependencies import (
    get_artist_scrobbles_use_case,
    get_cancellation_registry,
    get_lastfm_user_scrobbles_use_case,
    get_scrobbles_use_case,
)
from mljboard.api.schemas.scrobbles import CancelResponse, ScrobbleReportResponse
from mljboard.application.services import CancellationRegistry, LoggingProgressIndicator
from mljboard.application.use_cases import (
    ArtistScrobblesRequest,
    ArtistScrobblesUseCase,
    LastfmUserScrobblesRequest,
    LastfmUserScrobblesUseCase,
    ScrobblesRequest,
    ScrobblesUseCase,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["scrobbles"])


@router.get("/accounts/{handle}/scrobbles", response_model=ScrobbleReportResponse)
async def get_scrobbles(
    handle: str,
    artist: str | None = Query(default=None, description="Only count this artist"),
    display_name: str | None = Query(default=None, description="Name used in the title"),
    fetch_id: str | None = Query(default=None, description="Id to cancel this fetch by"),
    scrobbles_use_case: ScrobblesUseCase = Depends(get_scrobbles_use_case),
    artist_use_case: ArtistScrobblesUseCase = Depends(get_artist_scrobbles_use_case),
    registry: CancellationRegistry = Depends(get_cancellation_registry),
) -> ScrobbleReportResponse:
    """All-time and this-year counts, or the all-time count for one artist."""
    with registry.register(fetch_id) as (active_id, cancel_event):
        if artist:
            report = await artist_use_case.execute(
                ArtistScrobblesRequest(
                    user_handle=handle,
                    artist=artist,
                    display_name=display_name,
                    cancel_event=cancel_event,
                    indicator=LoggingProgressIndicator(),
                )
            )
        else:
            report = await scrobbles_use_case.execute(
                ScrobblesRequest(
                    user_handle=handle,
                    display_name=display_name,
                    cancel_event=cancel_event,
                    indicator=LoggingProgressIndicator(),
                )
            )
    return ScrobbleReportResponse.from_report(report, fetch_id=active_id)


@router.get("/lastfm/{username}/scrobbles", response_model=ScrobbleReportResponse)
async def get_lastfm_user_scrobbles(
    username: str,
    fetch_id: str | None = Query(default=None, description="Id to cancel this fetch by"),
    use_case: LastfmUserScrobblesUseCase = Depends(get_lastfm_user_scrobbles_use_case),
    registry: CancellationRegistry = Depends(get_cancellation_registry),
) -> ScrobbleReportResponse:
    """Past-year count for any public Last.fm user."""
    with registry.register(fetch_id) as (active_id, cancel_event):
        report = await use_case.execute(
            LastfmUserScrobblesRequest(
                username=username,
                cancel_event=cancel_event,
                indicator=LoggingProgressIndicator(),
            )
        )
    return ScrobbleReportResponse.from_report(report, fetch_id=active_id)


@router.post("/fetches/{fetch_id}/cancel", response_model=CancelResponse)
async def cancel_fetch(
    fetch_id: str,
    registry: CancellationRegistry = Depends(get_cancellation_registry),
) -> CancelResponse:
    """Signal a running Last.fm fetch to stop."""
    return CancelResponse(fetch_id=fetch_id, cancelled=registry.cancel(fetch_id))
