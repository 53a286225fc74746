"""Application services."""

from mljboard.application.services.account_setup_service import (
    AccountSetupService,
    ResetSummary,
)
from mljboard.application.services.cancellation import CancellationRegistry
from mljboard.application.services.credential_resolver import (
    CredentialResolver,
    parse_website,
)
from mljboard.application.services.lastfm_fetcher import LastfmFetcher
from mljboard.application.services.progress import (
    LoggingProgressIndicator,
    NullProgressIndicator,
)
from mljboard.application.services.relay_session_resolver import RelaySessionResolver
from mljboard.application.services.scrobble_counter import ScrobbleCounter

__all__ = [
    "AccountSetupService",
    "CancellationRegistry",
    "CredentialResolver",
    "LastfmFetcher",
    "LoggingProgressIndicator",
    "NullProgressIndicator",
    "RelaySessionResolver",
    "ResetSummary",
    "ScrobbleCounter",
    "parse_website",
]
