"""
Slot Reservation Repository Interface

The authoritative guard against double-booking. Each booked grid cell is a
row keyed by ``(technician_id, date, slot_index)``; the storage layer rejects
a second row for the same key, so two writers racing for overlapping
intervals cannot both commit.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import date
from uuid import UUID

from workshop.domain.shared.base import ValueObject
from workshop.domain.shared.exceptions import ConflictError

from ..value_objects.enums import ReservationOwner
from ..value_objects.time_grid import DEFAULT_GRID, TimeGrid, from_minutes


class SlotReservation(ValueObject):
    owner_id: UUID
    owner_type: ReservationOwner
    technician_id: UUID
    date: date
    slot_index: int


class SlotReservationRepository(ABC):
    """Abstract repository for technician slot reservations."""

    @abstractmethod
    def reserve(
        self,
        owner_id: UUID,
        owner_type: ReservationOwner,
        technician_id: UUID,
        on_date: date,
        slot_indexes: Iterable[int],
    ) -> list[SlotReservation]:
        """
        Reserve grid cells for an owner.

        Args:
            owner_id: Job order or appointment holding the cells
            owner_type: Kind of owner
            technician_id: Technician being booked
            on_date: Business day
            slot_indexes: Grid cells to reserve

        Returns:
            Created reservations

        Raises:
            ConflictError: If any cell is already reserved by another owner
            DatabaseError: If the insert fails for another reason
        """

    @abstractmethod
    def release(self, owner_id: UUID) -> int:
        """Remove every reservation held by an owner; returns the count removed."""

    @abstractmethod
    def find_by_technician_and_date(
        self, technician_id: UUID, on_date: date
    ) -> list[SlotReservation]:
        pass


def reservation_conflict(
    technician_id: UUID,
    on_date: date,
    slot_indexes: list[int],
    taken: Iterable[SlotReservation],
    grid: TimeGrid = DEFAULT_GRID,
) -> ConflictError:
    """Build the ConflictError reported when reserved cells are already held."""
    start = grid.opening_minutes + min(slot_indexes) * grid.slot_minutes
    end = grid.opening_minutes + (max(slot_indexes) + 1) * grid.slot_minutes
    return ConflictError(
        technician_id,
        on_date,
        from_minutes(start),
        from_minutes(end),
        [
            {
                "type": reservation.owner_type.value,
                "id": str(reservation.owner_id),
                "slot_index": reservation.slot_index,
                "start": grid.slot_start(reservation.slot_index),
            }
            for reservation in taken
        ],
    )
