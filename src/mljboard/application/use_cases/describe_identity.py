"""Describe which backend a user resolves to, without secrets."""

from dataclasses import dataclass

from mljboard.application.services.credential_resolver import CredentialResolver
from mljboard.application.use_cases import UseCase
from mljboard.domain.entities import BackendIdentity, LastFMUser, MalojaUser
from mljboard.domain.exceptions import NoIdentityFoundError


@dataclass
class IdentityDescription:
    """Backend kind plus a display summary (Maloja base URL or Last.fm username)."""

    kind: str
    summary: str


def describe_identity(identity: BackendIdentity) -> IdentityDescription:
    # base_url carries scheme/host/port/path only, never headers or api keys
    if isinstance(identity, MalojaUser):
        return IdentityDescription(kind="maloja", summary=identity.credentials.base_url)
    if isinstance(identity, LastFMUser):
        return IdentityDescription(kind="lastfm", summary=identity.username)
    raise TypeError(f"Unknown backend identity: {identity!r}")


class DescribeIdentityUseCase(UseCase[str, IdentityDescription]):
    """Resolve a user handle and summarize which backend it lands on."""

    def __init__(self, resolver: CredentialResolver) -> None:
        self._resolver = resolver

    async def execute(self, request: str) -> IdentityDescription:
        """
        Raises:
            NoIdentityFoundError: Nothing is set up for the user
            RelayResolutionError: The pairing code matched no single session
        """
        identity = await self._resolver.resolve_identity(request)
        if identity is None:
            raise NoIdentityFoundError(request)
        return describe_identity(identity)
