"""
Time Range Value Objects

``HH:MM`` intervals on a single business day. Intervals are half-open:
``[start, end)``, so back-to-back bookings do not overlap.
"""

from pydantic import model_validator
from typing_extensions import Self

from workshop.domain.shared.base import ValueObject
from workshop.domain.shared.exceptions import InvalidInterval

from .time_grid import from_minutes, to_minutes

UNSET_TIME = "00:00"


class TimeRange(ValueObject):
    """
    A wall-clock interval on one day.

    ``00:00-00:00`` is the sentinel used by job orders that have no slot yet.
    Any other range must satisfy ``start < end``.
    """

    start: str
    end: str

    @model_validator(mode="after")
    def _check_bounds(self) -> Self:
        start, end = to_minutes(self.start), to_minutes(self.end)
        if self.start == UNSET_TIME and self.end == UNSET_TIME:
            return self
        if end <= start:
            raise InvalidInterval(self.start, self.end)
        return self

    @classmethod
    def unset(cls) -> "TimeRange":
        return cls(start=UNSET_TIME, end=UNSET_TIME)

    @classmethod
    def from_minutes(cls, start_minutes: int, end_minutes: int) -> "TimeRange":
        return cls(start=from_minutes(start_minutes), end=from_minutes(end_minutes))

    @property
    def is_set(self) -> bool:
        return not (self.start == UNSET_TIME and self.end == UNSET_TIME)

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return to_minutes(self.end)

    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes

    def overlaps_with(self, other: "TimeRange") -> bool:
        """
        Half-open overlap test.

        Args:
            other: Other range to check

        Returns:
            True if ``self.start < other.end`` and ``self.end > other.start``
        """
        if not self.is_set or not other.is_set:
            return False
        return (
            self.start_minutes < other.end_minutes
            and self.end_minutes > other.start_minutes
        )

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


class BreakTime(ValueObject):
    """A recurring daily break configured for a technician."""

    description: str = "Break"
    start: str
    end: str

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(start=self.start, end=self.end)
