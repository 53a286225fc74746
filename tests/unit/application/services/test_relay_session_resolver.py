"""Tests for RelaySessionResolver."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from mljboard.application.services import RelaySessionResolver
from mljboard.domain.entities import MalojaCredentials, RelayConnection
from mljboard.domain.exceptions import (
    AmbiguousClientError,
    NoActiveClientError,
    RelayUnavailableError,
)
from mljboard.domain.ports import IRelayClient


@pytest.fixture
def relay_client() -> AsyncMock:
    """Relay client reporting three live connections."""
    client = AsyncMock(spec=IRelayClient)
    client.list_connections.return_value = [
        RelayConnection("s1", "code-a"),
        RelayConnection("s2", "code-b"),
        RelayConnection("s3", "code-b"),
    ]
    client.credentials_for_session = MagicMock(
        side_effect=lambda sid: MalojaCredentials(
            https=False,
            skip_cert_verification=True,
            host="relay",
            port=9000,
            path=f"/sid/{sid}",
        )
    )
    return client


class TestRelaySessionResolver:
    """Test pairing code → session matching."""

    async def test_single_match_returns_session(self, relay_client: AsyncMock) -> None:
        resolver = RelaySessionResolver(relay_client)

        assert await resolver.resolve_session("code-a") == "s1"

    async def test_no_match_raises_no_active_client(
        self, relay_client: AsyncMock
    ) -> None:
        resolver = RelaySessionResolver(relay_client)

        with pytest.raises(NoActiveClientError) as exc_info:
            await resolver.resolve_session("code-z")

        assert "no client running" in exc_info.value.message

    async def test_two_matches_raise_ambiguous(self, relay_client: AsyncMock) -> None:
        """Several sessions on one code must never pick one."""
        resolver = RelaySessionResolver(relay_client)

        with pytest.raises(AmbiguousClientError) as exc_info:
            await resolver.resolve_session("code-b")

        assert exc_info.value.session_ids == ["s2", "s3"]
        relay_client.credentials_for_session.assert_not_called()

    async def test_relay_failure_propagates(self, relay_client: AsyncMock) -> None:
        relay_client.list_connections.side_effect = RelayUnavailableError("down")
        resolver = RelaySessionResolver(relay_client)

        with pytest.raises(RelayUnavailableError):
            await resolver.resolve_session("code-a")

    async def test_resolve_credentials_uses_matched_session(
        self, relay_client: AsyncMock
    ) -> None:
        resolver = RelaySessionResolver(relay_client)

        creds = await resolver.resolve_credentials("code-a")

        assert creds.path == "/sid/s1"
        relay_client.credentials_for_session.assert_called_once_with("s1")
