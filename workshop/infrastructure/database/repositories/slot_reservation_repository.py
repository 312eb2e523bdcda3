"""
Slot reservation repository backed by SQLModel.

The ``(technician_id, date, slot_index)`` unique constraint is what makes a
double-booking impossible: when two transactions pass the conflict
pre-check at the same time, the second flush or commit violates it.
"""

from collections.abc import Iterable
from datetime import date
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from workshop.domain.scheduling.repositories.slot_reservation_repository import (
    SlotReservation,
    SlotReservationRepository,
    reservation_conflict,
)
from workshop.domain.scheduling.value_objects.enums import ReservationOwner
from workshop.domain.scheduling.value_objects.time_grid import DEFAULT_GRID, TimeGrid
from workshop.infrastructure.database.models import SlotReservationRecord

from .base import DatabaseError, SqlRepository


def _to_domain(record: SlotReservationRecord) -> SlotReservation:
    return SlotReservation(
        owner_id=record.owner_id,
        owner_type=ReservationOwner(record.owner_type),
        technician_id=record.technician_id,
        date=record.date,
        slot_index=record.slot_index,
    )


class SqlSlotReservationRepository(SqlRepository, SlotReservationRepository):
    def __init__(self, session: Session, grid: TimeGrid = DEFAULT_GRID):
        super().__init__(session)
        self._grid = grid

    def reserve(
        self,
        owner_id: UUID,
        owner_type: ReservationOwner,
        technician_id: UUID,
        on_date: date,
        slot_indexes: Iterable[int],
    ) -> list[SlotReservation]:
        slot_indexes = sorted(set(slot_indexes))
        if not slot_indexes:
            return []

        taken = [
            r
            for r in self._cells(technician_id, on_date, slot_indexes)
            if r.owner_id != owner_id
        ]
        if taken:
            raise reservation_conflict(
                technician_id, on_date, slot_indexes, taken, self._grid
            )

        held = {
            r.slot_index
            for r in self._cells(technician_id, on_date, slot_indexes)
            if r.owner_id == owner_id
        }
        records = [
            SlotReservationRecord(
                owner_id=owner_id,
                owner_type=ReservationOwner(owner_type).value,
                technician_id=technician_id,
                date=on_date,
                slot_index=index,
            )
            for index in slot_indexes
            if index not in held
        ]
        try:
            self.session.add_all(records)
            self.session.flush()
        except IntegrityError as e:
            # Lost the race: a concurrent transaction took a cell after the check
            raise reservation_conflict(
                technician_id, on_date, slot_indexes, [], self._grid
            ) from e
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error reserving slots for {owner_id}: {str(e)}"
            ) from e
        return [_to_domain(record) for record in records]

    def release(self, owner_id: UUID) -> int:
        try:
            result = self.session.execute(
                delete(SlotReservationRecord).where(
                    SlotReservationRecord.owner_id == owner_id
                )
            )
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error releasing slots of {owner_id}: {str(e)}"
            ) from e
        return result.rowcount

    def find_by_technician_and_date(
        self, technician_id: UUID, on_date: date
    ) -> list[SlotReservation]:
        return [
            _to_domain(record)
            for record in self._cells(technician_id, on_date, None)
        ]

    def _cells(
        self, technician_id: UUID, on_date: date, slot_indexes: list[int] | None
    ) -> list[SlotReservationRecord]:
        statement = select(SlotReservationRecord).where(
            SlotReservationRecord.technician_id == technician_id,
            SlotReservationRecord.date == on_date,
        )
        if slot_indexes is not None:
            statement = statement.where(
                SlotReservationRecord.slot_index.in_(slot_indexes)
            )
        try:
            return list(
                self.session.exec(
                    statement.order_by(SlotReservationRecord.slot_index)
                ).all()
            )
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error finding reservations of {technician_id} on {on_date}: {str(e)}"
            ) from e
