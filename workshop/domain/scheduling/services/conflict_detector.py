"""
Conflict Detector

Answers "is technician T free for [start, end) on day D?" against job orders,
appointments and the technician's configured breaks, and enumerates free
spans. This is a read-side pre-check; the slot reservation table is what
actually rejects a double-booking at commit.
"""

import logging
from datetime import date
from typing import Any
from uuid import UUID

from ..repositories.appointment_repository import AppointmentRepository
from ..repositories.job_order_repository import JobOrderRepository
from ..repositories.user_directory import UserDirectory
from ..value_objects.time_grid import DEFAULT_GRID, TimeGrid
from ..value_objects.time_range import TimeRange
from ..value_objects.user_profile import UserProfile

logger = logging.getLogger(__name__)


class ConflictDetector:
    """Technician availability queries over the job order and appointment stores."""

    def __init__(
        self,
        job_orders: JobOrderRepository,
        appointments: AppointmentRepository,
        users: UserDirectory | None = None,
        grid: TimeGrid = DEFAULT_GRID,
    ):
        self._job_orders = job_orders
        self._appointments = appointments
        self._users = users
        self._grid = grid

    def find_conflicts(
        self,
        technician_id: UUID,
        on_date: date,
        time_range: TimeRange,
        exclude_id: UUID | None = None,
    ) -> list[dict[str, Any]]:
        """
        List every booking or break overlapping ``time_range``.

        Args:
            technician_id: Technician to check
            on_date: Business day
            time_range: Candidate interval, half-open
            exclude_id: Job order or appointment being moved

        Returns:
            One dict per conflicting item, with its type and interval
        """
        conflicts: list[dict[str, Any]] = []

        for job in self._job_orders.find_by_technician_and_date(technician_id, on_date):
            if job.id == exclude_id or not job.occupies_slot:
                continue
            if time_range.overlaps_with(job.time_range):
                conflicts.append(
                    {
                        "type": "job_order",
                        "id": str(job.id),
                        "job_number": job.job_number,
                        "plate_number": job.plate_number,
                        "status": job.status.value,
                        "start": job.time_range.start,
                        "end": job.time_range.end,
                    }
                )

        for appointment in self._appointments.find_by_technician_and_date(
            technician_id, on_date
        ):
            if appointment.id == exclude_id or appointment.no_show:
                continue
            if time_range.overlaps_with(appointment.time_range):
                conflicts.append(
                    {
                        "type": "appointment",
                        "id": str(appointment.id),
                        "plate_number": appointment.plate_number,
                        "start": appointment.time_range.start,
                        "end": appointment.time_range.end,
                    }
                )

        for break_time in self._break_times(technician_id):
            if time_range.overlaps_with(break_time.time_range):
                conflicts.append(
                    {
                        "type": "break",
                        "description": break_time.description,
                        "start": break_time.start,
                        "end": break_time.end,
                    }
                )

        if conflicts:
            logger.debug(
                "Technician %s has %d conflicts on %s for %s",
                technician_id,
                len(conflicts),
                on_date,
                time_range,
            )
        return conflicts

    def has_conflict(
        self,
        technician_id: UUID,
        on_date: date,
        start: str,
        end: str,
        exclude_id: UUID | None = None,
    ) -> bool:
        """True iff any booking or break overlaps ``[start, end)``."""
        time_range = TimeRange(start=start, end=end)
        return bool(self.find_conflicts(technician_id, on_date, time_range, exclude_id))

    def booked_ranges(
        self, technician_id: UUID, on_date: date, exclude_id: UUID | None = None
    ) -> list[TimeRange]:
        """Intervals held by slot-occupying job orders and appointments."""
        ranges = [
            job.time_range
            for job in self._job_orders.find_by_technician_and_date(
                technician_id, on_date
            )
            if job.occupies_slot and job.id != exclude_id
        ]
        ranges.extend(
            appointment.time_range
            for appointment in self._appointments.find_by_technician_and_date(
                technician_id, on_date
            )
            if appointment.id != exclude_id and not appointment.no_show
        )
        return ranges

    def booked_minutes(
        self, technician_id: UUID, on_date: date, exclude_id: UUID | None = None
    ) -> int:
        """Minutes of job order work booked for a technician on a day."""
        return sum(
            job.time_range.duration_minutes()
            for job in self._job_orders.find_by_technician_and_date(
                technician_id, on_date
            )
            if job.occupies_slot and job.id != exclude_id
        )

    def free_slots(self, technician_id: UUID, on_date: date) -> list[TimeRange]:
        """
        Free spans of a technician's day, in chronological order.

        The complement of bookings and breaks within operating hours. An
        empty list means the day is fully booked.
        """
        busy = self.booked_ranges(technician_id, on_date)
        busy.extend(b.time_range for b in self._break_times(technician_id))
        return self._complement(busy)

    def walk_in_slots(
        self,
        on_date: date,
        duration_minutes: int,
        technicians: list[UserProfile],
    ) -> dict[UUID, list[TimeRange]]:
        """
        Grid-aligned intervals of ``duration_minutes`` each technician can take.

        Args:
            on_date: Business day
            duration_minutes: Length of the walk-in job
            technicians: Candidates, in display order

        Returns:
            Mapping of technician id to candidate intervals, chronological;
            technicians without any fit are omitted
        """
        if duration_minutes <= 0:
            raise ValueError("duration_minutes must be positive")

        result: dict[UUID, list[TimeRange]] = {}
        for technician in technicians:
            free = self.free_slots(technician.id, on_date)
            candidates = []
            for index in range(self._grid.slot_count):
                start = self._grid.opening_minutes + index * self._grid.slot_minutes
                end = start + duration_minutes
                if end > self._grid.closing_minutes:
                    break
                if any(
                    span.start_minutes <= start and end <= span.end_minutes
                    for span in free
                ):
                    candidates.append(TimeRange.from_minutes(start, end))
            if candidates:
                result[technician.id] = candidates
        return result

    def available_technicians(
        self,
        on_date: date,
        time_range: TimeRange,
        technicians: list[UserProfile],
    ) -> list[UserProfile]:
        """Technicians free for the whole interval, in the given order."""
        return [
            technician
            for technician in technicians
            if not self.find_conflicts(technician.id, on_date, time_range)
        ]

    def _break_times(self, technician_id: UUID):
        if self._users is None:
            return ()
        profile = self._users.get(technician_id)
        return profile.break_times if profile else ()

    def _complement(self, busy: list[TimeRange]) -> list[TimeRange]:
        cursor = self._grid.opening_minutes
        free: list[TimeRange] = []
        for span in sorted(
            (r for r in busy if r.is_set), key=lambda r: (r.start_minutes, r.end_minutes)
        ):
            start = max(span.start_minutes, self._grid.opening_minutes)
            end = min(span.end_minutes, self._grid.closing_minutes)
            if end <= start:
                continue
            if start > cursor:
                free.append(TimeRange.from_minutes(cursor, start))
            cursor = max(cursor, end)
        if cursor < self._grid.closing_minutes:
            free.append(TimeRange.from_minutes(cursor, self._grid.closing_minutes))
        return free
