"""Dependency injection for API endpoints."""

import logging
from collections.abc import AsyncGenerator
from typing import cast

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from mljboard.application.services import (
    AccountSetupService,
    CancellationRegistry,
    CredentialResolver,
    RelaySessionResolver,
    ScrobbleCounter,
)
from mljboard.application.use_cases import (
    ArtistScrobblesUseCase,
    DescribeIdentityUseCase,
    LastfmUserScrobblesUseCase,
    ScrobblesUseCase,
)
from mljboard.config import Settings
from mljboard.domain.ports import IUserRecordStore
from mljboard.infrastructure.integrations import LastfmClient, MalojaClient, RelayClient
from mljboard.infrastructure.persistence import Database, UserRecordRepository

logger = logging.getLogger(__name__)


# Hey future me - settings live on app.state (set by create_app), NOT in the cached
# get_settings() singleton. Tests build an app with their own Settings and everything
# below picks them up through this one dependency.
def get_app_settings(request: Request) -> Settings:
    """Get the settings the running app was created with."""
    return cast(Settings, request.app.state.settings)


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session from app state.

    Uses session_scope() so the request's writes commit together (or roll back).
    """
    db: Database = request.app.state.db
    async with db.session_scope() as session:
        yield session


def get_user_record_store(
    session: AsyncSession = Depends(get_db_session),
) -> IUserRecordStore:
    """Get user record repository instance."""
    return UserRecordRepository(session)


def get_cancellation_registry(request: Request) -> CancellationRegistry:
    """Get the app-wide cancellation registry.

    Raises:
        HTTPException: 503 if the registry was not initialized by the lifespan
    """
    if not hasattr(request.app.state, "cancellation_registry"):
        raise HTTPException(status_code=503, detail="Cancellation registry not initialized")
    return cast(CancellationRegistry, request.app.state.cancellation_registry)


# Clients are created per request from request-scoped settings and closed afterwards.
async def get_relay_client(
    settings: Settings = Depends(get_app_settings),
) -> AsyncGenerator[RelayClient, None]:
    """Get relay client instance."""
    async with RelayClient(settings.relay, timeout=settings.http.relay_timeout) as client:
        yield client


def get_maloja_client(
    settings: Settings = Depends(get_app_settings),
) -> MalojaClient:
    """Get Maloja client instance."""
    return MalojaClient(timeout=settings.http.maloja_timeout)


async def get_lastfm_client(
    settings: Settings = Depends(get_app_settings),
) -> AsyncGenerator[LastfmClient | None, None]:
    """Get Last.fm client instance if configured, None otherwise."""
    if not settings.lastfm.is_configured():
        yield None
        return
    async with LastfmClient(settings.lastfm, timeout=settings.http.lastfm_timeout) as client:
        yield client


def get_credential_resolver(
    store: IUserRecordStore = Depends(get_user_record_store),
    relay_client: RelayClient = Depends(get_relay_client),
) -> CredentialResolver:
    """Get credential resolver instance."""
    return CredentialResolver(store, RelaySessionResolver(relay_client))


def get_scrobble_counter(
    maloja_client: MalojaClient = Depends(get_maloja_client),
    lastfm_client: LastfmClient | None = Depends(get_lastfm_client),
) -> ScrobbleCounter:
    """Get scrobble counter instance."""
    return ScrobbleCounter(maloja_client, lastfm_client)


def get_account_setup_service(
    store: IUserRecordStore = Depends(get_user_record_store),
) -> AccountSetupService:
    """Get account setup service instance."""
    return AccountSetupService(store)


def get_scrobbles_use_case(
    resolver: CredentialResolver = Depends(get_credential_resolver),
    counter: ScrobbleCounter = Depends(get_scrobble_counter),
) -> ScrobblesUseCase:
    """Get scrobbles use case instance."""
    return ScrobblesUseCase(resolver, counter)


def get_artist_scrobbles_use_case(
    resolver: CredentialResolver = Depends(get_credential_resolver),
    counter: ScrobbleCounter = Depends(get_scrobble_counter),
) -> ArtistScrobblesUseCase:
    """Get artist scrobbles use case instance."""
    return ArtistScrobblesUseCase(resolver, counter)


def get_lastfm_user_scrobbles_use_case(
    counter: ScrobbleCounter = Depends(get_scrobble_counter),
) -> LastfmUserScrobblesUseCase:
    """Get Last.fm user scrobbles use case instance."""
    return LastfmUserScrobblesUseCase(counter)


def get_describe_identity_use_case(
    resolver: CredentialResolver = Depends(get_credential_resolver),
) -> DescribeIdentityUseCase:
    """Get describe identity use case instance."""
    return DescribeIdentityUseCase(resolver)
