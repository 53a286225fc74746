"""Cancel signals that a transport can trigger for running fetches."""

import asyncio
import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

from mljboard.domain.exceptions import DuplicateEntityException

logger = logging.getLogger(__name__)


class CancellationRegistry:
    """Per-fetch asyncio.Events keyed by an opaque fetch id.

    Hey future me - an entry only lives while its request runs (register() is a
    context manager). Cancelling an unknown id is a no-op returning False, since
    the fetch may have finished a moment earlier.
    """

    def __init__(self) -> None:
        self._events: dict[str, asyncio.Event] = {}

    @contextmanager
    def register(
        self, fetch_id: str | None = None
    ) -> Iterator[tuple[str, asyncio.Event]]:
        """Create a cancel signal for one fetch and drop it afterwards.

        Raises:
            DuplicateEntityException: The id is already in use by a running fetch
        """
        fetch_id = fetch_id or uuid.uuid4().hex
        if fetch_id in self._events:
            raise DuplicateEntityException("Fetch", fetch_id)

        event = asyncio.Event()
        self._events[fetch_id] = event
        try:
            yield fetch_id, event
        finally:
            self._events.pop(fetch_id, None)

    def cancel(self, fetch_id: str) -> bool:
        """Signal cancellation. Returns False if no such fetch is running."""
        event = self._events.get(fetch_id)
        if event is None:
            return False
        event.set()
        logger.info("Cancel requested for fetch %s", fetch_id)
        return True

    def active_ids(self) -> list[str]:
        return list(self._events)
