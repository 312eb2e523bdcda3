from .appointment_repository import SqlAppointmentRepository
from .base import DatabaseError, SqlRepository
from .job_order_repository import SqlJobOrderRepository
from .slot_reservation_repository import SqlSlotReservationRepository
from .snapshot_repository import SqlSnapshotRepository

__all__ = [
    "DatabaseError",
    "SqlAppointmentRepository",
    "SqlJobOrderRepository",
    "SqlRepository",
    "SqlSlotReservationRepository",
    "SqlSnapshotRepository",
]
