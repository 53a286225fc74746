"""SQLAlchemy ORM models for mljboard."""

from datetime import UTC, datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


# Hey future me - one table for all three record kinds (website, pairing_code,
# lastfm_username). Several rows per (user, kind) CAN exist, e.g. from old setups;
# readers take the last one, which is why the autoincrement id doubles as the
# insertion order.
class UserRecordModel(Base):
    """A single stored identity source for a chat user."""

    __tablename__ = "user_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_handle: Mapped[str] = mapped_column(String(255), nullable=False)
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    __table_args__ = (Index("ix_user_records_user_kind", "user_handle", "kind"),)
