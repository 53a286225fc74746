"""Tests for UserRecordRepository against a throwaway sqlite database."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from mljboard.config import DatabaseSettings
from mljboard.domain.entities import UserRecordKind
from mljboard.infrastructure.persistence import Database, UserRecordRepository


@pytest.fixture
async def db(tmp_path: Path) -> AsyncGenerator[Database, None]:
    database = Database(DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path}/test.db"))
    await database.create_tables()
    yield database
    await database.close()


class TestUserRecordRepository:
    """Test the user-record store."""

    async def test_get_returns_insertion_order(self, db: Database) -> None:
        async with db.session_scope() as session:
            repo = UserRecordRepository(session)
            await repo.add(UserRecordKind.WEBSITE, "u1", "https://old.example")
            await repo.add(UserRecordKind.WEBSITE, "u1", "https://new.example")

        async with db.session_scope() as session:
            values = await UserRecordRepository(session).get(UserRecordKind.WEBSITE, "u1")

        assert values == ["https://old.example", "https://new.example"]

    async def test_records_are_scoped_by_kind_and_user(self, db: Database) -> None:
        async with db.session_scope() as session:
            repo = UserRecordRepository(session)
            await repo.add(UserRecordKind.WEBSITE, "u1", "https://example.com")
            await repo.add(UserRecordKind.LASTFM_USERNAME, "u1", "alice")
            await repo.add(UserRecordKind.WEBSITE, "u2", "https://other.example")

            assert await repo.get(UserRecordKind.LASTFM_USERNAME, "u1") == ["alice"]
            assert await repo.get(UserRecordKind.PAIRING_CODE, "u1") == []
            assert await repo.get(UserRecordKind.WEBSITE, "u2") == [
                "https://other.example"
            ]

    async def test_delete_returns_removed_count(self, db: Database) -> None:
        async with db.session_scope() as session:
            repo = UserRecordRepository(session)
            await repo.add(UserRecordKind.PAIRING_CODE, "u1", "a")
            await repo.add(UserRecordKind.PAIRING_CODE, "u1", "b")
            await repo.add(UserRecordKind.LASTFM_USERNAME, "u1", "alice")

            assert await repo.delete(UserRecordKind.PAIRING_CODE, "u1") == 2
            assert await repo.delete(UserRecordKind.PAIRING_CODE, "u1") == 0
            assert await repo.get(UserRecordKind.LASTFM_USERNAME, "u1") == ["alice"]

    async def test_failed_scope_rolls_back(self, db: Database) -> None:
        with pytest.raises(RuntimeError):
            async with db.session_scope() as session:
                await UserRecordRepository(session).add(UserRecordKind.WEBSITE, "u1", "x")
                raise RuntimeError("request failed")

        async with db.session_scope() as session:
            assert await UserRecordRepository(session).get(UserRecordKind.WEBSITE, "u1") == []
