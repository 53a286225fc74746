"""Account setup: store, replace and reset a user's identity sources."""

import logging
import secrets
from dataclasses import dataclass

from mljboard.domain.entities import UserRecordKind
from mljboard.domain.exceptions import DuplicateEntityException, ValidationException
from mljboard.domain.ports import IUserRecordStore

logger = logging.getLogger(__name__)

PAIRING_CODE_PREFIX = "mljboard"


def generate_pairing_code() -> str:
    """Prefixed random token, e.g. `mljboard_1f2e3d4c5b6a7980_...`."""
    return f"{PAIRING_CODE_PREFIX}_{secrets.token_hex(8)}_{secrets.token_hex(16)}"


@dataclass(frozen=True)
class ResetSummary:
    """What reset() removed."""

    websites: list[str]
    pairing_codes: list[str]

    @property
    def removed(self) -> int:
        return len(self.websites) + len(self.pairing_codes)


class AccountSetupService:
    """Setup commands for the three identity sources."""

    def __init__(self, store: IUserRecordStore) -> None:
        self._store = store

    async def set_website(self, user_handle: str, url: str) -> str:
        """Store the user's Maloja website.

        Raises:
            ValidationException: URL does not start with http:// or https://
            DuplicateEntityException: A website is already stored
        """
        url = url.strip()
        if not url:
            raise ValidationException("No website provided.")
        if not url.startswith(("http://", "https://")):
            raise ValidationException(
                "Remember that your website has to start with `http://` or "
                "`https://`. Keep in mind that with https you cannot use an "
                "invalid certificate."
            )
        if await self._store.get(UserRecordKind.WEBSITE, user_handle):
            raise DuplicateEntityException(
                "Website", user_handle, "Reset to remove it first."
            )

        await self._store.add(UserRecordKind.WEBSITE, user_handle, url)
        logger.info("Website set for %s", user_handle)
        return url

    async def issue_pairing_code(self, user_handle: str) -> str:
        """Generate and store a relay pairing code.

        Raises:
            DuplicateEntityException: The user already has a pairing code
        """
        if await self._store.get(UserRecordKind.PAIRING_CODE, user_handle):
            raise DuplicateEntityException(
                "Pairing code",
                user_handle,
                "Reset to revoke the code before requesting a new one.",
            )

        code = generate_pairing_code()
        await self._store.add(UserRecordKind.PAIRING_CODE, user_handle, code)
        logger.info("Pairing code issued for %s", user_handle)
        return code

    async def set_lastfm_username(self, user_handle: str, username: str) -> str:
        """Store the user's Last.fm username, replacing any previous one.

        Raises:
            ValidationException: Empty username
        """
        username = username.strip()
        if not username:
            raise ValidationException("No Last.FM username provided.")

        await self._store.delete(UserRecordKind.LASTFM_USERNAME, user_handle)
        await self._store.add(UserRecordKind.LASTFM_USERNAME, user_handle, username)
        logger.info("Last.fm username set for %s", user_handle)
        return username

    async def reset(self, user_handle: str) -> ResetSummary:
        """Remove the user's website(s) and pairing code(s)."""
        websites = await self._store.get(UserRecordKind.WEBSITE, user_handle)
        pairing_codes = await self._store.get(UserRecordKind.PAIRING_CODE, user_handle)

        await self._store.delete(UserRecordKind.WEBSITE, user_handle)
        await self._store.delete(UserRecordKind.PAIRING_CODE, user_handle)

        summary = ResetSummary(websites=websites, pairing_codes=pairing_codes)
        logger.info("Reset %s: removed %d record(s)", user_handle, summary.removed)
        return summary
