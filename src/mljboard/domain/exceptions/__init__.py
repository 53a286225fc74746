"""Domain exceptions."""

from typing import Any

from mljboard.domain.entities.error_codes import ScrobbleCountErrorKind


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, message is stored as an attribute so transports can show it
    # without parsing str(exception). Never raise this directly - use a subclass.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


# =============================================================================
# Identity resolution
# =============================================================================


class RelayResolutionError(DomainException):
    """A pairing code was found but the relay could not give us one session.

    Hey future me - unlike a broken website URL, this is NOT swallowed! The
    message goes straight to the user and the resolver stops without trying
    Last.fm. Keep that asymmetry (there's a regression test for it).
    """


class NoActiveClientError(RelayResolutionError):
    """The pairing code exists but no relay client is using it."""

    def __init__(self, pairing_code: str) -> None:
        super().__init__(
            "You have a HOS pairing code, but no client running with it. "
            "Connect your HOS client."
        )
        self.pairing_code = pairing_code


class AmbiguousClientError(RelayResolutionError):
    """Several relay clients share one pairing code."""

    def __init__(self, pairing_code: str, session_ids: list[str]) -> None:
        super().__init__(
            "You have a HOS pairing code, but multiple clients are using it! "
            "Disconnect every client and reconnect only one, or, alternatively, "
            "reset and try again with one client and a new pairing code."
        )
        self.pairing_code = pairing_code
        self.session_ids = session_ids


class RelayUnavailableError(RelayResolutionError):
    """The relay connection list could not be fetched or parsed."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            "You have a HOS pairing code, but the HOS server could not be reached. "
            "Try again later."
        )
        self.reason = reason


class MalformedIdentitySourceError(DomainException):
    """A stored identity source (website URL) cannot be turned into credentials."""

    def __init__(self, source: str, value: str, reason: str) -> None:
        super().__init__(f"Stored {source} {value!r} is unusable: {reason}")
        self.source = source
        self.value = value
        self.reason = reason


class NoIdentityFoundError(DomainException):
    """No identity source is configured for the user."""

    def __init__(self, user_handle: str) -> None:
        super().__init__(
            "You don't have a HOS pairing code, a website or a Last.FM username "
            "set up."
        )
        self.user_handle = user_handle


# =============================================================================
# Scrobble counting
# These never leave the counter as exceptions - ScrobbleCounter turns them into
# a failed ScrobbleCountResult. Everything else may raise them freely.
# =============================================================================


class ScrobbleCountException(DomainException):
    """Base for failures that map onto a ScrobbleCountErrorKind."""

    kind: ScrobbleCountErrorKind


class UserNotFoundError(ScrobbleCountException):
    """Last.fm user does not exist, or the first Last.fm request failed."""

    kind = ScrobbleCountErrorKind.USER_NOT_FOUND

    def __init__(self, username: str, reason: str | None = None) -> None:
        super().__init__(f"Last.fm user {username!r} not found")
        self.username = username
        self.reason = reason


class CancelOccurredError(ScrobbleCountException):
    """History streaming was cancelled by the user."""

    kind = ScrobbleCountErrorKind.CANCEL_OCCURRED

    def __init__(self, username: str, discarded: int = 0) -> None:
        super().__init__(f"Fetch for Last.fm user {username!r} was cancelled")
        self.username = username
        self.discarded = discarded


class MalojaError(ScrobbleCountException):
    """Maloja request failed (transport, timeout, non-2xx or bad body)."""

    kind = ScrobbleCountErrorKind.MALOJA_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class LastfmStreamError(ScrobbleCountException):
    """A Last.fm history page failed after the stream had started."""

    kind = ScrobbleCountErrorKind.LASTFM_STREAM_ERROR

    def __init__(self, username: str, page: int, reason: str) -> None:
        super().__init__(
            f"Last.fm history for {username!r} failed on page {page}: {reason}"
        )
        self.username = username
        self.page = page
        self.reason = reason


class UnsupportedRangeError(ScrobbleCountException):
    """Named period that the Last.fm path cannot translate into epoch bounds."""

    kind = ScrobbleCountErrorKind.UNSUPPORTED_RANGE

    def __init__(self, label: str) -> None:
        super().__init__(f"Unsupported range {label!r}")
        self.label = label


# =============================================================================
# Setup and configuration
# =============================================================================


class ValidationException(DomainException):
    """Raised when user input fails validation (e.g. website without http/https)."""

    pass


class DuplicateEntityException(DomainException):
    """Raised when a single-valued user record already exists."""

    def __init__(self, entity_type: str, entity_id: Any, hint: str = "") -> None:
        message = f"{entity_type} for {entity_id} already exists"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(message)
        self.entity_type = entity_type
        self.entity_id = entity_id


class ConfigurationError(DomainException):
    """Required configuration is missing or invalid.

    Example:
        raise ConfigurationError("The bot owner has not set up a Last.FM API key.")
    """

    pass


__all__ = [
    "AmbiguousClientError",
    "CancelOccurredError",
    "ConfigurationError",
    "DomainException",
    "DuplicateEntityException",
    "LastfmStreamError",
    "MalformedIdentitySourceError",
    "MalojaError",
    "NoActiveClientError",
    "NoIdentityFoundError",
    "RelayResolutionError",
    "RelayUnavailableError",
    "ScrobbleCountException",
    "UnsupportedRangeError",
    "UserNotFoundError",
    "ValidationException",
]
