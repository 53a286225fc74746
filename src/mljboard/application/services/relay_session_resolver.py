"""Match a pairing code to exactly one live relay session."""

import logging

from mljboard.domain.entities import MalojaCredentials
from mljboard.domain.exceptions import AmbiguousClientError, NoActiveClientError
from mljboard.domain.ports import IRelayClient

logger = logging.getLogger(__name__)


class RelaySessionResolver:
    """Resolve pairing codes against the relay's live connection list."""

    def __init__(self, relay_client: IRelayClient) -> None:
        self._relay = relay_client

    async def resolve_session(self, pairing_code: str) -> str:
        """Find the single session using a pairing code.

        Args:
            pairing_code: Code the user's client registered with

        Returns:
            The matching session id

        Raises:
            NoActiveClientError: No session uses the code
            AmbiguousClientError: More than one session uses the code
            RelayUnavailableError: The connection list could not be fetched
        """
        connections = await self._relay.list_connections()
        session_ids = [
            connection.session_id
            for connection in connections
            if connection.pairing_code == pairing_code
        ]

        if not session_ids:
            logger.info("No relay client is using the stored pairing code")
            raise NoActiveClientError(pairing_code)
        if len(session_ids) > 1:
            # Never pick one - the user has to disconnect the extra clients
            logger.info(
                "Pairing code is shared by %d relay clients", len(session_ids)
            )
            raise AmbiguousClientError(pairing_code, session_ids)

        return session_ids[0]

    async def resolve_credentials(self, pairing_code: str) -> MalojaCredentials:
        """Resolve a pairing code straight to credentials for its session."""
        session_id = await self.resolve_session(pairing_code)
        logger.debug("Pairing code matched relay session %s", session_id)
        return self._relay.credentials_for_session(session_id)
