"""Progress indicators used while Last.fm history streams in."""

import logging

from mljboard.domain.ports import IProgressIndicator

logger = logging.getLogger(__name__)


class NullProgressIndicator(IProgressIndicator):
    """Shows nothing."""

    async def open(self, username: str) -> None:
        pass

    async def update(self, loaded: int) -> None:
        pass

    async def close(self) -> None:
        pass


class LoggingProgressIndicator(IProgressIndicator):
    """Writes progress to the log (the HTTP API has no message to edit)."""

    def __init__(self) -> None:
        self.username: str | None = None
        self.loaded = 0

    async def open(self, username: str) -> None:
        self.username = username
        logger.info("Working on scrobbles for Last.fm user %s... (0 loaded)", username)

    async def update(self, loaded: int) -> None:
        self.loaded = loaded
        logger.info(
            "Working on scrobbles for Last.fm user %s... (%d loaded)",
            self.username,
            loaded,
        )

    async def close(self) -> None:
        logger.debug("Progress for Last.fm user %s closed", self.username)
