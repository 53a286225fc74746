"""Application use cases - chat command orchestration."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

TRequest = TypeVar("TRequest")
TResponse = TypeVar("TResponse")


class UseCase(ABC, Generic[TRequest, TResponse]):
    """Base class for all use cases following command pattern."""

    @abstractmethod
    async def execute(self, request: TRequest) -> TResponse:
        """Execute the use case with the given request."""
        pass


# Import concrete use cases (after UseCase definition to avoid circular imports)
from mljboard.application.use_cases.describe_identity import (  # noqa: E402
    DescribeIdentityUseCase,
    IdentityDescription,
    describe_identity,
)
from mljboard.application.use_cases.scrobble_reports import (  # noqa: E402
    ArtistScrobblesRequest,
    ArtistScrobblesUseCase,
    LastfmUserScrobblesRequest,
    LastfmUserScrobblesUseCase,
    ReportField,
    ScrobbleReport,
    ScrobblesRequest,
    ScrobblesUseCase,
)

__all__ = [
    "ArtistScrobblesRequest",
    "ArtistScrobblesUseCase",
    "DescribeIdentityUseCase",
    "IdentityDescription",
    "LastfmUserScrobblesRequest",
    "LastfmUserScrobblesUseCase",
    "ReportField",
    "ScrobbleReport",
    "ScrobblesRequest",
    "ScrobblesUseCase",
    "UseCase",
    "describe_identity",
]
