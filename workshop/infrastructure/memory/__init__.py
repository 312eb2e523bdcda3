from .repositories import (
    InMemoryAppointmentRepository,
    InMemoryJobOrderRepository,
    InMemorySlotReservationRepository,
    InMemorySnapshotRepository,
    InMemoryUserDirectory,
)
from .store import InMemoryStore
from .unit_of_work import InMemoryUnitOfWork, InMemoryUnitOfWorkFactory

__all__ = [
    "InMemoryAppointmentRepository",
    "InMemoryJobOrderRepository",
    "InMemorySlotReservationRepository",
    "InMemorySnapshotRepository",
    "InMemoryStore",
    "InMemoryUnitOfWork",
    "InMemoryUnitOfWorkFactory",
    "InMemoryUserDirectory",
]
