from .appointment_repository import AppointmentRepository
from .job_order_repository import JobOrderRepository
from .slot_reservation_repository import SlotReservation, SlotReservationRepository
from .snapshot_repository import SnapshotRepository
from .unit_of_work import UnitOfWork
from .user_directory import UserDirectory

__all__ = [
    "AppointmentRepository",
    "JobOrderRepository",
    "SlotReservation",
    "SlotReservationRepository",
    "SnapshotRepository",
    "UnitOfWork",
    "UserDirectory",
]
