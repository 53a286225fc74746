"""External service integrations."""

from mljboard.infrastructure.integrations.lastfm_client import LastfmClient
from mljboard.infrastructure.integrations.maloja_client import MalojaClient
from mljboard.infrastructure.integrations.relay_client import RelayClient

__all__ = ["LastfmClient", "MalojaClient", "RelayClient"]
