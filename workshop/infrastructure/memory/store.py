"""Shared state behind the in-memory repositories."""

import copy
import threading
from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from workshop.domain.scheduling.entities.appointment import Appointment
from workshop.domain.scheduling.entities.job_order import JobOrder
from workshop.domain.scheduling.entities.workshop_snapshot import WorkshopSnapshot
from workshop.domain.scheduling.repositories.slot_reservation_repository import (
    SlotReservation,
)


@dataclass
class InMemoryStore:
    """
    Tables for the in-memory backend.

    ``lock`` serializes units of work, so each transaction sees and writes a
    consistent state.
    """

    job_orders: dict[UUID, JobOrder] = field(default_factory=dict)
    appointments: dict[UUID, Appointment] = field(default_factory=dict)
    snapshots: dict[date, WorkshopSnapshot] = field(default_factory=dict)
    reservations: dict[tuple[UUID, date, int], SlotReservation] = field(
        default_factory=dict
    )
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def checkpoint(self) -> dict:
        return {
            "job_orders": dict(self.job_orders),
            "appointments": dict(self.appointments),
            "snapshots": dict(self.snapshots),
            "reservations": dict(self.reservations),
        }

    def restore(self, state: dict) -> None:
        self.job_orders = copy.copy(state["job_orders"])
        self.appointments = copy.copy(state["appointments"])
        self.snapshots = copy.copy(state["snapshots"])
        self.reservations = copy.copy(state["reservations"])
