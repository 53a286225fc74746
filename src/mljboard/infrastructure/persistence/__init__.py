"""Persistence for per-user identity records."""

from mljboard.infrastructure.persistence.database import Database
from mljboard.infrastructure.persistence.repositories import UserRecordRepository

__all__ = ["Database", "UserRecordRepository"]
