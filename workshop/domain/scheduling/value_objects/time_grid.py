"""
Time Grid

Maps ``HH:MM`` wall-clock strings onto the workshop's discrete slot grid
(30-minute cells between opening and closing time by default) and back.
Everything here is pure; the only failures are malformed input and
degenerate intervals.
"""

import re
from dataclasses import dataclass

from workshop.domain.shared.exceptions import InvalidInterval, InvalidTimeFormat

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

MINUTES_PER_DAY = 24 * 60


def to_minutes(time: str) -> int:
    """
    Convert an ``HH:MM`` string to minutes after midnight.

    Raises:
        InvalidTimeFormat: If the value is not a 24h ``HH:MM`` string
    """
    if not isinstance(time, str):
        raise InvalidTimeFormat(time)
    match = _HHMM.match(time)
    if match is None:
        raise InvalidTimeFormat(time)
    return int(match.group(1)) * 60 + int(match.group(2))


def from_minutes(minutes: int) -> str:
    """Format minutes after midnight as ``HH:MM``."""
    if minutes < 0 or minutes >= MINUTES_PER_DAY:
        raise InvalidTimeFormat(minutes)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class TimeGrid:
    """A fixed-width slot grid over the operating hours of one day."""

    opening_minutes: int = 7 * 60
    closing_minutes: int = 18 * 60
    slot_minutes: int = 30

    @classmethod
    def from_settings(cls) -> "TimeGrid":
        from workshop.core.config import settings

        return cls(
            opening_minutes=to_minutes(settings.OPENING_TIME),
            closing_minutes=to_minutes(settings.CLOSING_TIME),
            slot_minutes=settings.SLOT_MINUTES,
        )

    @property
    def opening_time(self) -> str:
        return from_minutes(self.opening_minutes)

    @property
    def closing_time(self) -> str:
        return from_minutes(self.closing_minutes)

    @property
    def slot_count(self) -> int:
        return (self.closing_minutes - self.opening_minutes) // self.slot_minutes

    def to_slot_index(self, time: str) -> int | None:
        """
        Index of the slot starting exactly at ``time``.

        Returns:
            Slot index, or None when the time is outside operating hours or
            not aligned to a slot boundary
        """
        minutes = to_minutes(time)
        offset = minutes - self.opening_minutes
        if offset < 0 or minutes >= self.closing_minutes:
            return None
        if offset % self.slot_minutes:
            return None
        return offset // self.slot_minutes

    def slot_start(self, index: int) -> str:
        if index < 0 or index >= self.slot_count:
            raise IndexError(f"Slot index {index} outside grid of {self.slot_count}")
        return from_minutes(self.opening_minutes + index * self.slot_minutes)

    def span_slots(self, start: str, end: str) -> int:
        """
        Number of grid cells touched by the half-open interval ``[start, end)``.

        Raises:
            InvalidInterval: If ``end <= start``
        """
        first, last = self._cell_bounds(start, end)
        return max(0, last - first)

    def slots_for(self, start: str, end: str) -> list[int]:
        """Indices of every grid cell touched by ``[start, end)``."""
        first, last = self._cell_bounds(start, end)
        return list(range(first, last))

    def is_aligned(self, start: str, end: str) -> bool:
        """True when both bounds sit on slot boundaries inside operating hours."""
        start_minutes, end_minutes = to_minutes(start), to_minutes(end)
        if end_minutes <= start_minutes:
            return False
        if start_minutes < self.opening_minutes or end_minutes > self.closing_minutes:
            return False
        return (start_minutes - self.opening_minutes) % self.slot_minutes == 0 and (
            end_minutes - self.opening_minutes
        ) % self.slot_minutes == 0

    def _cell_bounds(self, start: str, end: str) -> tuple[int, int]:
        start_minutes, end_minutes = to_minutes(start), to_minutes(end)
        if end_minutes <= start_minutes:
            raise InvalidInterval(start, end)
        start_minutes = max(start_minutes, self.opening_minutes)
        end_minutes = min(end_minutes, self.closing_minutes)
        if end_minutes <= start_minutes:
            return 0, 0
        first = (start_minutes - self.opening_minutes) // self.slot_minutes
        last = -(-(end_minutes - self.opening_minutes) // self.slot_minutes)
        return first, last


DEFAULT_GRID = TimeGrid()


def to_slot_index(time: str) -> int | None:
    return DEFAULT_GRID.to_slot_index(time)


def span_slots(start: str, end: str) -> int:
    return DEFAULT_GRID.span_slots(start, end)
