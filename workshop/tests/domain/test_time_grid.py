"""
Unit tests for the time grid and time range value objects.
"""

import pytest

from workshop.domain.scheduling.value_objects.time_grid import (
    DEFAULT_GRID,
    TimeGrid,
    from_minutes,
    span_slots,
    to_minutes,
    to_slot_index,
)
from workshop.domain.scheduling.value_objects.time_range import TimeRange
from workshop.domain.shared.exceptions import InvalidInterval, InvalidTimeFormat


class TestTimeConversion:
    """Test HH:MM parsing and formatting."""

    @pytest.mark.parametrize(
        "value,expected",
        [("00:00", 0), ("07:00", 420), ("12:30", 750), ("23:59", 1439)],
    )
    def test_to_minutes(self, value, expected):
        assert to_minutes(value) == expected

    @pytest.mark.parametrize("value", ["7:00", "24:00", "12:60", "noon", "", "12-30"])
    def test_to_minutes_rejects_malformed(self, value):
        with pytest.raises(InvalidTimeFormat):
            to_minutes(value)

    def test_from_minutes_pads(self):
        assert from_minutes(425) == "07:05"

    def test_from_minutes_rejects_out_of_day(self):
        with pytest.raises(InvalidTimeFormat):
            from_minutes(24 * 60)


class TestSlotIndex:
    """Test mapping wall-clock times onto the 30-minute grid."""

    @pytest.mark.parametrize(
        "time,index",
        [("07:00", 0), ("07:30", 1), ("12:00", 10), ("17:30", 21)],
    )
    def test_aligned_times(self, time, index):
        assert to_slot_index(time) == index

    @pytest.mark.parametrize("time", ["06:30", "18:00", "19:00", "09:15"])
    def test_off_grid_times_have_no_index(self, time):
        assert to_slot_index(time) is None

    def test_grid_has_22_slots(self):
        assert DEFAULT_GRID.slot_count == 22
        assert DEFAULT_GRID.slot_start(21) == "17:30"

    def test_slot_start_out_of_range(self):
        with pytest.raises(IndexError):
            DEFAULT_GRID.slot_start(22)

    def test_custom_grid(self):
        grid = TimeGrid(opening_minutes=8 * 60, closing_minutes=12 * 60, slot_minutes=60)

        assert grid.slot_count == 4
        assert grid.to_slot_index("09:00") == 1
        assert grid.to_slot_index("09:30") is None


class TestSpanSlots:
    """Test counting the cells touched by an interval."""

    @pytest.mark.parametrize(
        "start,end,count",
        [
            ("09:00", "10:30", 3),
            ("09:00", "09:30", 1),
            ("09:15", "09:45", 2),
            ("06:00", "08:00", 2),
            ("17:00", "20:00", 2),
        ],
    )
    def test_span(self, start, end, count):
        assert span_slots(start, end) == count

    def test_interval_outside_hours_touches_nothing(self):
        assert span_slots("19:00", "20:00") == 0
        assert DEFAULT_GRID.slots_for("19:00", "20:00") == []

    @pytest.mark.parametrize("start,end", [("10:00", "10:00"), ("11:00", "10:00")])
    def test_degenerate_interval_fails(self, start, end):
        with pytest.raises(InvalidInterval):
            span_slots(start, end)

    def test_slots_for_lists_indices(self):
        assert DEFAULT_GRID.slots_for("09:00", "10:30") == [4, 5, 6]

    @pytest.mark.parametrize(
        "start,end,aligned",
        [
            ("09:00", "10:30", True),
            ("07:00", "18:00", True),
            ("09:15", "10:00", False),
            ("06:30", "07:30", False),
            ("17:30", "18:30", False),
            ("10:00", "09:00", False),
        ],
    )
    def test_is_aligned(self, start, end, aligned):
        assert DEFAULT_GRID.is_aligned(start, end) is aligned


class TestTimeRange:
    """Test the half-open interval value object."""

    def test_sentinel_is_unset(self):
        unset = TimeRange.unset()

        assert not unset.is_set
        assert str(unset) == "00:00-00:00"

    def test_end_before_start_fails(self):
        with pytest.raises(InvalidInterval, match="10:00-09:00"):
            TimeRange(start="10:00", end="09:00")

    def test_duration(self):
        assert TimeRange(start="09:00", end="10:30").duration_minutes() == 90

    @pytest.mark.parametrize(
        "other,overlaps",
        [
            (("10:00", "11:00"), True),
            (("08:00", "09:30"), True),
            (("09:30", "10:00"), True),
            (("10:30", "11:00"), False),
            (("08:00", "09:00"), False),
        ],
    )
    def test_half_open_overlap(self, other, overlaps):
        booked = TimeRange(start="09:00", end="10:30")
        candidate = TimeRange(start=other[0], end=other[1])

        assert booked.overlaps_with(candidate) is overlaps
        assert candidate.overlaps_with(booked) is overlaps

    def test_unset_range_never_overlaps(self):
        assert not TimeRange.unset().overlaps_with(TimeRange(start="07:00", end="18:00"))

    def test_immutable(self):
        time_range = TimeRange(start="09:00", end="10:00")

        with pytest.raises(Exception):
            time_range.start = "08:00"
