"""Scrobble-count result and its display rendering."""

from dataclasses import dataclass

from mljboard.domain.entities.error_codes import (
    ScrobbleCountErrorKind,
    get_error_message,
)


@dataclass(frozen=True)
class ScrobbleCountResult:
    """Either a non-negative count or an error kind, never both."""

    count: int | None = None
    error: ScrobbleCountErrorKind | None = None

    def __post_init__(self) -> None:
        if (self.count is None) == (self.error is None):
            raise ValueError("Exactly one of count or error must be set")
        if self.count is not None and self.count < 0:
            raise ValueError(f"Scrobble count cannot be negative: {self.count}")

    @classmethod
    def ok(cls, count: int) -> "ScrobbleCountResult":
        return cls(count=count)

    @classmethod
    def failure(cls, error: ScrobbleCountErrorKind) -> "ScrobbleCountResult":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.count is not None


def human_readable_result(result: ScrobbleCountResult) -> str:
    """Render a result for display. Never raises."""
    if result.count is not None:
        return str(result.count)
    return get_error_message(result.error)
