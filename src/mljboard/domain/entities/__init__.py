"""Domain entities.

Hey future me - BackendIdentity is a CLOSED union on purpose. A third backend means
a new dataclass here plus one isinstance branch in the resolver and in the
counter. No base class, no registry.
"""

from dataclasses import dataclass
from enum import StrEnum

from mljboard.domain.entities.error_codes import (
    ERROR_MESSAGES,
    ScrobbleCountErrorKind,
    get_error_message,
)

HOS_PASSWD_HEADER = "HOS-PASSWD"


class UserRecordKind(StrEnum):
    """The three independent per-user records the store keeps."""

    WEBSITE = "website"
    PAIRING_CODE = "pairing_code"
    LASTFM_USERNAME = "lastfm_username"


@dataclass(frozen=True)
class MalojaCredentials:
    """Everything needed to talk to one Maloja-compatible server.

    `path` is kept exactly as given - "/maloja", "/" and "/sid/abc" are all
    stored verbatim.
    """

    https: bool
    skip_cert_verification: bool
    host: str
    port: int
    path: str | None = None
    headers: dict[str, str] | None = None
    api_key: str | None = None

    def __post_init__(self) -> None:
        if not self.host:
            raise ValueError("Maloja host must not be empty")
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid Maloja port: {self.port}")

    @property
    def scheme(self) -> str:
        return "https" if self.https else "http"

    @property
    def base_url(self) -> str:
        """Scheme, host, port and path prefix without a trailing slash."""
        prefix = (self.path or "").rstrip("/")
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.scheme}://{host}:{self.port}{prefix}"


@dataclass(frozen=True)
class MalojaUser:
    """User resolved to a Maloja server (own website or relay session)."""

    credentials: MalojaCredentials


@dataclass(frozen=True)
class LastFMUser:
    """User resolved to a public Last.fm account."""

    username: str


BackendIdentity = MalojaUser | LastFMUser


@dataclass(frozen=True)
class RelayConnection:
    """One live (session id, pairing code) pair reported by the relay."""

    session_id: str
    pairing_code: str


@dataclass(frozen=True)
class RecordedTrack:
    """One scrobble from a Last.fm history page."""

    artist: str
    name: str
    album: str = ""
    played_at: int | None = None

    def artist_matches(self, artist: str) -> bool:
        """Case-insensitive exact artist match."""
        return self.artist.casefold() == artist.casefold()


__all__ = [
    "ERROR_MESSAGES",
    "HOS_PASSWD_HEADER",
    "BackendIdentity",
    "LastFMUser",
    "MalojaCredentials",
    "MalojaUser",
    "RecordedTrack",
    "RelayConnection",
    "ScrobbleCountErrorKind",
    "UserRecordKind",
    "get_error_message",
]
