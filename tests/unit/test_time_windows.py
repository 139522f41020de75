"""Unit tests for time window utilities."""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from collective.core.time_windows import (
    TimeWindow,
    days_between,
    ensure_utc,
    tile_contains,
    weekly_tiles,
    window_ending_at,
    within,
)


NOW = datetime(2024, 11, 21, 0, 0, tzinfo=UTC)


@pytest.mark.unit
class TestWindowEndingAt:
    """Tests for window_ending_at."""

    def test_week_window_bounds(self):
        window = window_ending_at(NOW, 7)

        assert window.end == NOW
        assert window.start == datetime(2024, 11, 14, 0, 0, tzinfo=UTC)
        assert window.duration == timedelta(days=7)

    def test_naive_now_is_treated_as_utc(self):
        window = window_ending_at(datetime(2024, 11, 21), 30)

        assert window.end == NOW
        assert window.start.tzinfo is not None

    def test_same_now_gives_identical_window(self):
        assert window_ending_at(NOW, 30) == window_ending_at(NOW, 30)

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError, match="must not precede"):
            TimeWindow(start=NOW, end=NOW - timedelta(seconds=1))


@pytest.mark.unit
class TestWithin:
    """Tests for inclusive window membership."""

    def test_missing_timestamp_is_outside(self):
        assert within(None, NOW - timedelta(days=7), NOW) is False

    @pytest.mark.parametrize("offset_days", [0, 7])
    def test_boundaries_are_inclusive(self, offset_days):
        assert within(NOW - timedelta(days=offset_days), NOW - timedelta(days=7), NOW) is True

    def test_just_outside_is_excluded(self):
        start = NOW - timedelta(days=7)
        assert within(start - timedelta(microseconds=1), start, NOW) is False
        assert within(NOW + timedelta(microseconds=1), start, NOW) is False

    def test_half_open_contains_excludes_end(self):
        window = window_ending_at(NOW, 7)

        assert window.contains(NOW) is True
        assert window.contains(NOW, closed_end=False) is False
        assert window.contains(window.start, closed_end=False) is True


@pytest.mark.unit
class TestWeeklyTiles:
    """Tests for the four-week tiling of the month window."""

    def test_four_tiles_oldest_first(self):
        tiles = weekly_tiles(NOW)

        assert len(tiles) == 4
        assert tiles[0].start == NOW - timedelta(days=28)
        assert tiles[0].end == NOW - timedelta(days=21)
        assert tiles[-1].start == NOW - timedelta(days=7)
        assert tiles[-1].end == NOW

    def test_tiles_are_contiguous_seven_day_slices(self):
        tiles = weekly_tiles(NOW)

        for earlier, later in zip(tiles, tiles[1:], strict=False):
            assert earlier.end == later.start
        assert all(tile.duration == timedelta(days=7) for tile in tiles)

    def test_shared_boundary_belongs_to_later_tile_only(self):
        tiles = weekly_tiles(NOW)
        boundary = tiles[1].start

        assert tile_contains(tiles[0], boundary, is_last=False) is False
        assert tile_contains(tiles[1], boundary, is_last=False) is True

    def test_now_lands_in_last_tile(self):
        tiles = weekly_tiles(NOW)

        assert tile_contains(tiles[-1], NOW, is_last=True) is True

    @pytest.mark.parametrize("hours_back", [0, 1, 24 * 6, 24 * 7, 24 * 13, 24 * 20, 24 * 27, 24 * 28 - 1])
    def test_every_instant_in_last_28_days_lands_in_exactly_one_tile(self, hours_back):
        tiles = weekly_tiles(NOW)
        instant = NOW - timedelta(hours=hours_back)

        hits = [tile_contains(tile, instant, is_last=i == len(tiles) - 1) for i, tile in enumerate(tiles)]

        assert hits.count(True) == 1


@pytest.mark.unit
class TestDaysBetween:
    """Tests for signed day offsets."""

    def test_early_completion_is_negative(self):
        due = datetime(2024, 11, 20, 20, 0, tzinfo=UTC)
        completed = datetime(2024, 11, 19, 8, 0, tzinfo=UTC)

        assert days_between(due, completed) == pytest.approx(-1.5)

    def test_late_completion_is_positive(self):
        due = datetime(2024, 11, 20, 0, 0, tzinfo=UTC)

        assert days_between(due, due + timedelta(hours=6)) == pytest.approx(0.25)

    def test_ensure_utc_keeps_aware_values(self):
        aware = datetime(2024, 11, 20, tzinfo=UTC)
        assert ensure_utc(aware) is aware
