"""Backend-agnostic time windows for scrobble counts."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from mljboard.domain.exceptions import UnsupportedRangeError

ONE_YEAR_SECONDS = 31_536_000


@dataclass(frozen=True)
class AllTime:
    """No time bound at all."""


@dataclass(frozen=True)
class Named:
    """An opaque period name the backend understands (e.g. "thisyear")."""

    label: str


@dataclass(frozen=True)
class Bounded:
    """Explicit epoch-second bounds. Either side may be open."""

    from_ts: int | None = None
    to_ts: int | None = None

    @property
    def is_unbounded(self) -> bool:
        return self.from_ts is None and self.to_ts is None


ScrobbleRange = AllTime | Named | Bounded


def past_year(now: datetime | None = None) -> Bounded:
    """Rolling 365-day window ending now."""
    now_ts = int((now or datetime.now(UTC)).timestamp())
    return Bounded(from_ts=now_ts - ONE_YEAR_SECONDS, to_ts=now_ts)


def is_unbounded(scrobble_range: ScrobbleRange) -> bool:
    """True when the range carries no bound information."""
    if isinstance(scrobble_range, AllTime):
        return True
    return isinstance(scrobble_range, Bounded) and scrobble_range.is_unbounded


def _epoch(dt: datetime) -> int:
    return int(dt.timestamp())


def named_to_bounds(label: str, now: datetime | None = None) -> Bounded:
    """Translate a named period into epoch bounds (UTC calendar).

    Maloja evaluates period names server-side; Last.fm only takes epoch bounds,
    so this is the Last.fm side of the translation.

    Raises:
        UnsupportedRangeError: the label has no epoch equivalent here
    """
    now = now or datetime.now(UTC)
    key = label.strip().lower()
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)

    if key == "alltime":
        return Bounded()
    if key == "today":
        return Bounded(from_ts=_epoch(today), to_ts=_epoch(now))
    if key == "thisweek":
        start = today - timedelta(days=today.weekday())
        return Bounded(from_ts=_epoch(start), to_ts=_epoch(now))
    if key == "thismonth":
        return Bounded(from_ts=_epoch(today.replace(day=1)), to_ts=_epoch(now))
    if key == "thisyear":
        return Bounded(
            from_ts=_epoch(today.replace(month=1, day=1)), to_ts=_epoch(now)
        )
    if key == "lastyear":
        start = today.replace(year=today.year - 1, month=1, day=1)
        end = today.replace(month=1, day=1)
        return Bounded(from_ts=_epoch(start), to_ts=_epoch(end) - 1)
    if key == "pastyear":
        return past_year(now)
    if len(key) == 4 and key.isdigit():
        start = datetime(int(key), 1, 1, tzinfo=UTC)
        end = datetime(int(key) + 1, 1, 1, tzinfo=UTC)
        return Bounded(from_ts=_epoch(start), to_ts=_epoch(end) - 1)

    raise UnsupportedRangeError(label)


def to_maloja_params(scrobble_range: ScrobbleRange) -> dict[str, str]:
    """Encode a range as Maloja query parameters."""
    if isinstance(scrobble_range, AllTime):
        return {}
    if isinstance(scrobble_range, Named):
        return {"in": scrobble_range.label}

    params: dict[str, str] = {}
    if scrobble_range.from_ts is not None:
        params["from"] = _maloja_day(scrobble_range.from_ts)
    if scrobble_range.to_ts is not None:
        params["to"] = _maloja_day(scrobble_range.to_ts)
    return params


def _maloja_day(ts: int) -> str:
    return datetime.fromtimestamp(ts, UTC).strftime("%Y/%m/%d")
