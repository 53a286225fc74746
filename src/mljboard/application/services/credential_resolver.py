"""Credential resolution: which backend does a chat user's data live on?

Hey future me - the priority order is website → relay pairing code → Last.fm and
the FIRST success wins:

1. Website: no third system involved.
2. Relay: needs the relay to be up AND exactly one client on the code.
3. Last.fm: fallback of last resort.

The two failure paths are deliberately NOT symmetric:
- A broken stored website (bad URL, no host, odd scheme) is swallowed and we
  move on to the relay.
- A relay failure after a pairing code WAS found (no client, several clients,
  relay down) is raised to the caller and Last.fm is never tried.
Both behaviours have regression tests - don't "fix" one into the other!
"""

import logging
from urllib.parse import urlsplit

from mljboard.application.services.relay_session_resolver import RelaySessionResolver
from mljboard.domain.entities import (
    BackendIdentity,
    LastFMUser,
    MalojaCredentials,
    MalojaUser,
    UserRecordKind,
)
from mljboard.domain.exceptions import MalformedIdentitySourceError
from mljboard.domain.ports import IUserRecordStore

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"https": 443, "http": 80}


def parse_website(url: str) -> MalojaCredentials:
    """Turn a stored website URL into Maloja credentials.

    Raises:
        MalformedIdentitySourceError: Unsupported scheme, missing host or bad port
    """
    try:
        parsed = urlsplit(url.strip())
        port = parsed.port
    except ValueError as e:
        raise MalformedIdentitySourceError("website", url, str(e)) from e

    scheme = parsed.scheme.lower()
    if scheme not in DEFAULT_PORTS:
        raise MalformedIdentitySourceError(
            "website", url, f"unsupported scheme {parsed.scheme!r}"
        )
    if not parsed.hostname:
        raise MalformedIdentitySourceError("website", url, "no host")

    try:
        # urlsplit lets port 0 through; the credentials reject it
        return MalojaCredentials(
            https=scheme == "https",
            skip_cert_verification=False,
            host=parsed.hostname,
            port=port if port is not None else DEFAULT_PORTS[scheme],
            path=parsed.path or "/",
            headers=None,
            api_key=None,
        )
    except ValueError as e:
        raise MalformedIdentitySourceError("website", url, str(e)) from e


class CredentialResolver:
    """Map a chat user handle to a BackendIdentity."""

    def __init__(
        self,
        store: IUserRecordStore,
        relay_resolver: RelaySessionResolver,
    ) -> None:
        self._store = store
        self._relay_resolver = relay_resolver

    async def _latest(self, kind: UserRecordKind, user_handle: str) -> str | None:
        # Last write wins when older rows are still around
        records = await self._store.get(kind, user_handle)
        return records[-1] if records else None

    async def website_identity(self, user_handle: str) -> MalojaUser | None:
        """Identity from the stored website, None if no website is stored.

        Raises:
            MalformedIdentitySourceError: The stored URL is unusable
        """
        website = await self._latest(UserRecordKind.WEBSITE, user_handle)
        if website is None:
            return None
        return MalojaUser(parse_website(website))

    async def relay_identity(self, user_handle: str) -> MalojaUser | None:
        """Identity from the stored pairing code, None if no code is stored.

        Raises:
            RelayResolutionError: A code is stored but no single session matches
        """
        pairing_code = await self._latest(UserRecordKind.PAIRING_CODE, user_handle)
        if pairing_code is None:
            return None
        credentials = await self._relay_resolver.resolve_credentials(pairing_code)
        return MalojaUser(credentials)

    async def lastfm_identity(self, user_handle: str) -> LastFMUser | None:
        """Identity from the stored Last.fm username, None if none is stored."""
        username = await self._latest(UserRecordKind.LASTFM_USERNAME, user_handle)
        if username is None:
            return None
        return LastFMUser(username)

    async def resolve_identity(self, user_handle: str) -> BackendIdentity | None:
        """Resolve a user to the first backend identity that applies.

        Args:
            user_handle: Chat user handle

        Returns:
            The identity, or None if the user has nothing set up

        Raises:
            RelayResolutionError: A pairing code is stored but the relay could not
                give a single session (NOT swallowed, see module docstring)
        """
        try:
            website_user = await self.website_identity(user_handle)
        except MalformedIdentitySourceError as e:
            logger.info("Skipping stored website for %s: %s", user_handle, e.reason)
            website_user = None
        if website_user is not None:
            logger.debug("Resolved %s via website", user_handle)
            return website_user

        relay_user = await self.relay_identity(user_handle)
        if relay_user is not None:
            logger.debug("Resolved %s via relay pairing code", user_handle)
            return relay_user

        lastfm_user = await self.lastfm_identity(user_handle)
        if lastfm_user is not None:
            logger.debug("Resolved %s via Last.fm username", user_handle)
            return lastfm_user

        logger.debug("No identity source configured for %s", user_handle)
        return None
