from .business_calendar import BusinessCalendar
from .enums import (
    ActorRole,
    JobItemStatus,
    JobStatus,
    PartAvailability,
    QIStatus,
    ReservationOwner,
    SourceType,
)
from .time_grid import DEFAULT_GRID, TimeGrid, span_slots, to_minutes, to_slot_index
from .time_range import BreakTime, TimeRange
from .user_profile import Actor, UserProfile
from .work_items import JobItem, OriginLink, Part

__all__ = [
    "Actor",
    "ActorRole",
    "BreakTime",
    "BusinessCalendar",
    "DEFAULT_GRID",
    "JobItem",
    "JobItemStatus",
    "JobStatus",
    "OriginLink",
    "Part",
    "PartAvailability",
    "QIStatus",
    "ReservationOwner",
    "SourceType",
    "TimeGrid",
    "TimeRange",
    "UserProfile",
    "span_slots",
    "to_minutes",
    "to_slot_index",
]
