"""Domain ports (interfaces) for dependency inversion."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from mljboard.domain.entities import (
    MalojaCredentials,
    RecordedTrack,
    RelayConnection,
    UserRecordKind,
)
from mljboard.domain.value_objects import ScrobbleRange


class IUserRecordStore(ABC):
    """Port for the per-user record store (website, pairing code, Last.fm name)."""

    @abstractmethod
    async def get(self, kind: UserRecordKind, user_handle: str) -> list[str]:
        """
        Get every stored record of a kind for a user, oldest first.

        Args:
            kind: Which record family to read
            user_handle: Chat user handle

        Returns:
            Stored values in insertion order (possibly empty)
        """
        pass

    @abstractmethod
    async def add(self, kind: UserRecordKind, user_handle: str, value: str) -> None:
        """Store a record for a user."""
        pass

    @abstractmethod
    async def delete(self, kind: UserRecordKind, user_handle: str) -> int:
        """
        Delete every record of a kind for a user.

        Returns:
            Number of records removed
        """
        pass


class IRelayClient(ABC):
    """Port for the HOS relay server."""

    @abstractmethod
    async def list_connections(self) -> list[RelayConnection]:
        """
        Fetch the relay's live connection list.

        Returns:
            Every (session id, pairing code) pair currently connected

        Raises:
            RelayUnavailableError: If the list cannot be fetched or parsed
        """
        pass

    @abstractmethod
    def credentials_for_session(self, session_id: str) -> MalojaCredentials:
        """Build Maloja credentials that address one relay session."""
        pass


class IMalojaClient(ABC):
    """Port for Maloja-compatible scrobble servers."""

    @abstractmethod
    async def count_scrobbles(
        self,
        credentials: MalojaCredentials,
        artist: str | None,
        scrobble_range: ScrobbleRange,
    ) -> int:
        """
        Count scrobbles server-side.

        Raises:
            MalojaError: On any transport failure or non-2xx response
        """
        pass


class ILastfmClient(ABC):
    """Port for Last.fm API client operations."""

    @abstractmethod
    async def get_playcount(self, username: str) -> int:
        """
        Get a user's lifetime scrobble count.

        Raises:
            UserNotFoundError: If the user is unknown or the request fails
        """
        pass

    @abstractmethod
    async def recent_tracks(
        self, username: str, from_ts: int | None, to_ts: int | None
    ) -> AsyncIterator[RecordedTrack]:
        """
        Open a paginated history stream.

        The first page is requested before this returns, so a missing user fails
        here and not on the first iteration.

        Raises:
            UserNotFoundError: If the stream cannot be opened

        Returns:
            Async iterator over tracks. Iteration raises LastfmStreamError if a
            later page fails.
        """
        pass


class IProgressIndicator(ABC):
    """Transient progress display owned by the transport (e.g. an edited message).

    Hey future me - the fetcher ALWAYS calls close() once open() succeeded, on
    success, cancel and error alike. close() failures are logged and dropped.
    """

    @abstractmethod
    async def open(self, username: str) -> None:
        """Show the indicator (0 loaded)."""
        pass

    @abstractmethod
    async def update(self, loaded: int) -> None:
        """Show how many tracks have been loaded so far."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Remove the indicator."""
        pass


__all__ = [
    "ILastfmClient",
    "IMalojaClient",
    "IProgressIndicator",
    "IRelayClient",
    "IUserRecordStore",
]
