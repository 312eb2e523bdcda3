"""
Business Calendar Value Object

Decides which dates are workshop business days. The end-of-day carry-over
uses it to find the day unfinished work rolls onto.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta

# Monday=0 .. Friday=4
STANDARD_WORKING_DAYS = frozenset({0, 1, 2, 3, 4})


@dataclass(frozen=True)
class BusinessCalendar:
    """
    Working weekdays plus explicit holidays.
    Immutable value object.
    """

    working_days: frozenset[int] = STANDARD_WORKING_DAYS
    holidays: frozenset[date] = field(default_factory=frozenset)

    def __post_init__(self):
        """Validate business calendar constraints."""
        if not self.working_days:
            raise ValueError("A business calendar needs at least one working day")
        for weekday in self.working_days:
            if not 0 <= weekday <= 6:
                raise ValueError(
                    f"Invalid weekday: {weekday}. Must be 0-6 (Monday=0, Sunday=6)"
                )

    @classmethod
    def standard_calendar(cls, holidays: Iterable[date] = ()) -> BusinessCalendar:
        """
        Factory method for the standard Mon-Fri calendar.

        Args:
            holidays: Dates the workshop is closed on

        Returns:
            Standard business calendar
        """
        return cls(working_days=STANDARD_WORKING_DAYS, holidays=frozenset(holidays))

    @classmethod
    def from_settings(cls) -> BusinessCalendar:
        from workshop.core.config import settings

        return cls.standard_calendar(settings.holiday_dates)

    def is_business_day(self, check_date: date) -> bool:
        if check_date in self.holidays:
            return False
        return check_date.weekday() in self.working_days

    def next_business_day(self, from_date: date) -> date:
        """
        First business day strictly after ``from_date``.

        Args:
            from_date: Day being closed

        Returns:
            Next working date, skipping weekends and holidays
        """
        candidate = from_date + timedelta(days=1)
        # A year of consecutive holidays means a misconfigured calendar
        for _ in range(366):
            if self.is_business_day(candidate):
                return candidate
            candidate += timedelta(days=1)
        raise ValueError(f"No business day found within a year after {from_date}")
