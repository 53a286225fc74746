"""Scrobble-count error codes.

Hey future me - this is the ONE place where count failures get their display text.
The messages end up in chat replies verbatim, so changing one is a user-visible
change. Relay and setup failures are NOT here - those are exceptions with their
own messages (see domain.exceptions), because they abort a command instead of
being rendered into a report field.

    USER_NOT_FOUND       Last.fm user missing, or the first request failed
    CANCEL_OCCURRED      user pressed cancel while history was streaming
    MALOJA_ERROR         Maloja transport failure or non-2xx
    LASTFM_STREAM_ERROR  a later Last.fm page failed mid-stream
    UNSUPPORTED_RANGE    named period with no Last.fm epoch equivalent
"""

from enum import StrEnum


class ScrobbleCountErrorKind(StrEnum):
    """Why a scrobble count could not be produced."""

    USER_NOT_FOUND = "user_not_found"
    CANCEL_OCCURRED = "cancel_occurred"
    MALOJA_ERROR = "maloja_error"
    LASTFM_STREAM_ERROR = "lastfm_stream_error"
    UNSUPPORTED_RANGE = "unsupported_range"


ERROR_MESSAGES: dict[ScrobbleCountErrorKind, str] = {
    ScrobbleCountErrorKind.USER_NOT_FOUND: "[user not found]",
    ScrobbleCountErrorKind.CANCEL_OCCURRED: "[cancelled]",
    ScrobbleCountErrorKind.MALOJA_ERROR: "[Maloja error]",
    ScrobbleCountErrorKind.LASTFM_STREAM_ERROR: "[Last.FM request failed]",
    ScrobbleCountErrorKind.UNSUPPORTED_RANGE: "[unsupported range]",
}

UNKNOWN_ERROR_MESSAGE = "[unknown error]"


def get_error_message(kind: ScrobbleCountErrorKind | str | None) -> str:
    """Display text for an error kind. Unknown or missing kinds never raise."""
    if kind is None:
        return UNKNOWN_ERROR_MESSAGE
    try:
        return ERROR_MESSAGES[ScrobbleCountErrorKind(kind)]
    except (KeyError, ValueError):
        return UNKNOWN_ERROR_MESSAGE
