"""Mapper for converting between Appointment aggregates and appointment rows."""

from workshop.domain.scheduling.entities.appointment import Appointment
from workshop.domain.scheduling.value_objects.time_range import TimeRange
from workshop.infrastructure.database.models import AppointmentRecord

from .job_order_mapper import ensure_utc


class AppointmentMapper:
    @staticmethod
    def domain_to_sql(appointment: Appointment) -> AppointmentRecord:
        return AppointmentRecord(
            id=appointment.id,
            plate_number=appointment.plate_number,
            assigned_technician=appointment.assigned_technician,
            date=appointment.date,
            start_time=appointment.time_range.start,
            end_time=appointment.time_range.end,
            created_by=appointment.created_by,
            no_show=appointment.no_show,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
        )

    @staticmethod
    def update_sql_from_domain(
        record: AppointmentRecord, appointment: Appointment
    ) -> AppointmentRecord:
        record.plate_number = appointment.plate_number
        record.assigned_technician = appointment.assigned_technician
        record.date = appointment.date
        record.start_time = appointment.time_range.start
        record.end_time = appointment.time_range.end
        record.no_show = appointment.no_show
        record.updated_at = appointment.updated_at
        return record

    @staticmethod
    def sql_to_domain(record: AppointmentRecord) -> Appointment:
        return Appointment(
            id=record.id,
            created_at=ensure_utc(record.created_at),
            updated_at=ensure_utc(record.updated_at),
            plate_number=record.plate_number,
            assigned_technician=record.assigned_technician,
            date=record.date,
            time_range=TimeRange(start=record.start_time, end=record.end_time),
            created_by=record.created_by,
            no_show=record.no_show,
        )
