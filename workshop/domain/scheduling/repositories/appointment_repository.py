"""
Appointment Repository Interface

Defines the contract for appointment data access operations.
"""

from abc import ABC, abstractmethod
from datetime import date
from uuid import UUID

from workshop.domain.shared.exceptions import NotFound

from ..entities.appointment import Appointment


class AppointmentRepository(ABC):
    """Abstract repository interface for Appointment entities."""

    @abstractmethod
    def find_by_id(self, appointment_id: UUID) -> Appointment | None:
        pass

    @abstractmethod
    def find_by_technician_and_date(
        self, technician_id: UUID, on_date: date
    ) -> list[Appointment]:
        """
        Retrieve a technician's appointments on a day.

        Args:
            technician_id: Technician identifier
            on_date: Business day

        Returns:
            Appointments ordered by start time

        Raises:
            DatabaseError: If retrieval operation fails
        """

    @abstractmethod
    def find_by_date(self, on_date: date) -> list[Appointment]:
        pass

    @abstractmethod
    def create(self, appointment: Appointment) -> Appointment:
        pass

    @abstractmethod
    def save(self, appointment: Appointment) -> Appointment:
        pass

    @abstractmethod
    def delete(self, appointment_id: UUID) -> bool:
        """
        Delete an appointment.

        Returns:
            True if a record was removed

        Raises:
            DatabaseError: If the delete fails
        """

    def get(self, appointment_id: UUID) -> Appointment:
        appointment = self.find_by_id(appointment_id)
        if appointment is None:
            raise NotFound("Appointment", appointment_id)
        return appointment
