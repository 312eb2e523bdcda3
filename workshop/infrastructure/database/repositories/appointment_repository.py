"""Appointment repository backed by SQLModel."""

from datetime import date
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from workshop.domain.scheduling.entities.appointment import Appointment
from workshop.domain.scheduling.repositories.appointment_repository import (
    AppointmentRepository,
)
from workshop.domain.shared.exceptions import NotFound
from workshop.infrastructure.database.mappers import AppointmentMapper
from workshop.infrastructure.database.models import AppointmentRecord

from .base import DatabaseError, SqlRepository


class SqlAppointmentRepository(SqlRepository, AppointmentRepository):
    def find_by_id(self, appointment_id: UUID) -> Appointment | None:
        record = self._get_record(appointment_id)
        return AppointmentMapper.sql_to_domain(record) if record else None

    def find_by_technician_and_date(
        self, technician_id: UUID, on_date: date
    ) -> list[Appointment]:
        return self._find(
            AppointmentRecord.assigned_technician == technician_id,
            AppointmentRecord.date == on_date,
        )

    def find_by_date(self, on_date: date) -> list[Appointment]:
        return self._find(AppointmentRecord.date == on_date)

    def create(self, appointment: Appointment) -> Appointment:
        try:
            self.session.add(AppointmentMapper.domain_to_sql(appointment))
            self.session.flush()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error creating appointment {appointment.id}: {str(e)}"
            ) from e
        return appointment

    def save(self, appointment: Appointment) -> Appointment:
        record = self._get_record(appointment.id)
        if record is None:
            raise NotFound("Appointment", appointment.id)
        try:
            AppointmentMapper.update_sql_from_domain(record, appointment)
            self.session.add(record)
            self.session.flush()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error saving appointment {appointment.id}: {str(e)}"
            ) from e
        return appointment

    def delete(self, appointment_id: UUID) -> bool:
        record = self._get_record(appointment_id)
        if record is None:
            return False
        try:
            self.session.delete(record)
            self.session.flush()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error deleting appointment {appointment_id}: {str(e)}"
            ) from e
        return True

    def _get_record(self, appointment_id: UUID) -> AppointmentRecord | None:
        try:
            return self.session.get(AppointmentRecord, appointment_id)
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error finding appointment {appointment_id}: {str(e)}"
            ) from e

    def _find(self, *criteria) -> list[Appointment]:
        try:
            records = self.session.exec(
                select(AppointmentRecord)
                .where(*criteria)
                .order_by(AppointmentRecord.start_time)
            ).all()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error finding appointments: {str(e)}") from e
        return [AppointmentMapper.sql_to_domain(record) for record in records]
