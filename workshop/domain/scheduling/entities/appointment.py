"""Appointment entity: a reserved technician slot not yet converted to work."""

from datetime import date
from uuid import UUID

from pydantic import Field, field_validator

from ...shared.base import AggregateRoot
from ..events.domain_events import AppointmentBooked
from ..value_objects.time_range import TimeRange


class Appointment(AggregateRoot):
    """
    A booked slot for a vehicle on a technician's grid.

    Appointments compete with job orders for technician time on equal footing.
    They are deleted when converted into a job order or cancelled.
    """

    plate_number: str = Field(min_length=1, max_length=20)
    assigned_technician: UUID
    date: date
    time_range: TimeRange
    created_by: UUID
    no_show: bool = False

    @field_validator("plate_number")
    @classmethod
    def _normalize_plate(cls, v: str) -> str:
        return v.strip().upper()

    @classmethod
    def book(
        cls,
        plate_number: str,
        technician_id: UUID,
        on_date: date,
        time_range: TimeRange,
        created_by: UUID,
    ) -> "Appointment":
        appointment = cls(
            plate_number=plate_number,
            assigned_technician=technician_id,
            date=on_date,
            time_range=time_range,
            created_by=created_by,
        )
        appointment.add_domain_event(
            AppointmentBooked(
                aggregate_id=appointment.id,
                appointment_id=appointment.id,
                technician_id=technician_id,
                date=on_date,
                start=time_range.start,
                end=time_range.end,
            )
        )
        return appointment

    def is_valid(self) -> bool:
        return self.time_range.is_set

    def mark_no_show(self) -> None:
        self.no_show = True
        self.mark_updated()

    def reschedule(
        self, technician_id: UUID, on_date: date, time_range: TimeRange
    ) -> None:
        """Move the booking; a rebooked customer is expected again."""
        self.assigned_technician = technician_id
        self.date = on_date
        self.time_range = time_range
        self.no_show = False
        self.mark_updated()
