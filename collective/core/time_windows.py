"""Trailing time windows used by the analytics engine.

Every window is anchored on an explicit ``now`` supplied by the caller; nothing
in this module reads the wall clock.
"""

from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, ConfigDict, model_validator

from collective.core.config import Constants


SECONDS_PER_DAY = 60 * 60 * 24


def ensure_utc(dt: datetime) -> datetime:
    """Return an aware datetime, treating naive values as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def within(timestamp: datetime | None, start: datetime, end: datetime) -> bool:
    """Return True if ``timestamp`` is present and inside ``[start, end]``."""
    if timestamp is None:
        return False
    return start <= timestamp <= end


class TimeWindow(BaseModel):
    """A time range between two instants, inclusive of ``start``."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _check_order(self) -> "TimeWindow":
        if self.end < self.start:
            raise ValueError("Window end must not precede its start")
        return self

    def contains(self, timestamp: datetime | None, *, closed_end: bool = True) -> bool:
        """Check whether ``timestamp`` falls inside the window.

        Args:
            timestamp: Instant to test; None is never inside
            closed_end: Include ``end`` itself (False gives a half-open window)
        """
        if closed_end:
            return within(timestamp, self.start, self.end)
        return timestamp is not None and self.start <= timestamp < self.end

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


def window_ending_at(now: datetime, duration_days: int) -> TimeWindow:
    """Build the window of ``duration_days`` ending at ``now``."""
    end = ensure_utc(now)
    return TimeWindow(start=end - timedelta(days=duration_days), end=end)


def weekly_tiles(now: datetime, weeks: int = Constants.BREAKDOWN_WEEKS) -> list[TimeWindow]:
    """Split the trailing ``weeks * 7`` days before ``now`` into 7-day slices, oldest first.

    Slices are half-open ``[start, end)`` so adjacent slices never share an
    instant. The newest slice ends at ``now`` and is treated as closed by
    ``tile_contains`` so that ``now`` itself still lands in a slice.
    """
    end = ensure_utc(now)
    tiles = []
    for offset in range(weeks - 1, -1, -1):
        tile_start = end - timedelta(days=(offset + 1) * 7)
        tile_end = end - timedelta(days=offset * 7)
        tiles.append(TimeWindow(start=tile_start, end=tile_end))
    return tiles


def tile_contains(tile: TimeWindow, timestamp: datetime | None, *, is_last: bool) -> bool:
    """Membership test for a weekly slice; only the newest slice includes its end."""
    return tile.contains(timestamp, closed_end=is_last)


def days_between(earlier: datetime, later: datetime) -> float:
    """Signed number of days from ``earlier`` to ``later`` (negative when ``later`` comes first)."""
    return (later - earlier).total_seconds() / SECONDS_PER_DAY
