"""Repository implementations for the user-record store."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from mljboard.domain.entities import UserRecordKind
from mljboard.domain.ports import IUserRecordStore
from mljboard.infrastructure.persistence.models import UserRecordModel


class UserRecordRepository(IUserRecordStore):
    """SQLAlchemy-backed IUserRecordStore."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    async def get(self, kind: UserRecordKind, user_handle: str) -> list[str]:
        stmt = (
            select(UserRecordModel.value)
            .where(
                UserRecordModel.user_handle == user_handle,
                UserRecordModel.kind == kind.value,
            )
            .order_by(UserRecordModel.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add(self, kind: UserRecordKind, user_handle: str, value: str) -> None:
        self.session.add(
            UserRecordModel(user_handle=user_handle, kind=kind.value, value=value)
        )
        await self.session.flush()

    async def delete(self, kind: UserRecordKind, user_handle: str) -> int:
        stmt = delete(UserRecordModel).where(
            UserRecordModel.user_handle == user_handle,
            UserRecordModel.kind == kind.value,
        )
        result = await self.session.execute(stmt)
        return int(result.rowcount or 0)
