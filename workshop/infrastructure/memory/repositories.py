"""
In-memory repository implementations.

All repositories share one ``InMemoryStore``. Records are copied on the way
in and out so callers never hold a reference into the store, which lets the
unit of work restore a previous state on rollback.
"""

from collections.abc import Iterable
from datetime import date
from typing import TypeVar
from uuid import UUID

from workshop.domain.scheduling.entities.appointment import Appointment
from workshop.domain.scheduling.entities.job_order import JobOrder
from workshop.domain.scheduling.entities.workshop_snapshot import WorkshopSnapshot
from workshop.domain.scheduling.repositories.appointment_repository import (
    AppointmentRepository,
)
from workshop.domain.scheduling.repositories.job_order_repository import (
    JobOrderRepository,
)
from workshop.domain.scheduling.repositories.slot_reservation_repository import (
    SlotReservation,
    SlotReservationRepository,
    reservation_conflict,
)
from workshop.domain.scheduling.repositories.snapshot_repository import (
    SnapshotRepository,
)
from workshop.domain.scheduling.repositories.user_directory import UserDirectory
from workshop.domain.scheduling.value_objects.enums import JobStatus, ReservationOwner
from workshop.domain.scheduling.value_objects.time_grid import DEFAULT_GRID, TimeGrid
from workshop.domain.scheduling.value_objects.user_profile import UserProfile
from workshop.domain.shared.base import AggregateRoot
from workshop.domain.shared.exceptions import (
    ConcurrencyError,
    DuplicateJobNumber,
    NotFound,
    SnapshotAlreadyExists,
)

from .store import InMemoryStore

AggregateT = TypeVar("AggregateT", bound=AggregateRoot)


def _detach(aggregate: AggregateT) -> AggregateT:
    copy = aggregate.model_copy(deep=True)
    copy.clear_domain_events()
    return copy


class InMemoryJobOrderRepository(JobOrderRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def find_by_id(self, job_id: UUID) -> JobOrder | None:
        job = self._store.job_orders.get(job_id)
        return _detach(job) if job else None

    def find_by_technician_and_date(
        self, technician_id: UUID, on_date: date
    ) -> list[JobOrder]:
        return [
            _detach(job)
            for job in self._store.job_orders.values()
            if job.assigned_technician == technician_id and job.date == on_date
        ]

    def find_by_status(
        self, status: JobStatus, on_date: date | None = None
    ) -> list[JobOrder]:
        return [
            _detach(job)
            for job in self._store.job_orders.values()
            if job.status == status and (on_date is None or job.date == on_date)
        ]

    def find_by_date(self, on_date: date) -> list[JobOrder]:
        return [
            _detach(job)
            for job in self._store.job_orders.values()
            if job.date == on_date
        ]

    def find_by_job_number(self, job_number: str, on_date: date) -> JobOrder | None:
        job_number = job_number.strip().upper()
        for job in self._store.job_orders.values():
            if job.job_number == job_number and job.date == on_date:
                return _detach(job)
        return None

    def create(self, job: JobOrder) -> JobOrder:
        if self.find_by_job_number(job.job_number, job.date) is not None:
            raise DuplicateJobNumber(job.job_number, job.date)
        self._store.job_orders[job.id] = _detach(job)
        return job

    def save(self, job: JobOrder) -> JobOrder:
        stored = self._store.job_orders.get(job.id)
        if stored is None:
            raise NotFound("JobOrder", job.id)
        if stored.version != job.version:
            raise ConcurrencyError("JobOrder", job.id, job.version)
        if (stored.job_number, stored.date) != (job.job_number, job.date):
            clash = self.find_by_job_number(job.job_number, job.date)
            if clash is not None and clash.id != job.id:
                raise DuplicateJobNumber(job.job_number, job.date)
        job.version += 1
        self._store.job_orders[job.id] = _detach(job)
        return job


class InMemoryAppointmentRepository(AppointmentRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def find_by_id(self, appointment_id: UUID) -> Appointment | None:
        appointment = self._store.appointments.get(appointment_id)
        return _detach(appointment) if appointment else None

    def find_by_technician_and_date(
        self, technician_id: UUID, on_date: date
    ) -> list[Appointment]:
        found = [
            _detach(a)
            for a in self._store.appointments.values()
            if a.assigned_technician == technician_id and a.date == on_date
        ]
        return sorted(found, key=lambda a: a.time_range.start_minutes)

    def find_by_date(self, on_date: date) -> list[Appointment]:
        found = [
            _detach(a) for a in self._store.appointments.values() if a.date == on_date
        ]
        return sorted(found, key=lambda a: a.time_range.start_minutes)

    def create(self, appointment: Appointment) -> Appointment:
        self._store.appointments[appointment.id] = _detach(appointment)
        return appointment

    def save(self, appointment: Appointment) -> Appointment:
        if appointment.id not in self._store.appointments:
            raise NotFound("Appointment", appointment.id)
        self._store.appointments[appointment.id] = _detach(appointment)
        return appointment

    def delete(self, appointment_id: UUID) -> bool:
        return self._store.appointments.pop(appointment_id, None) is not None


class InMemorySnapshotRepository(SnapshotRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def find_by_date(self, snapshot_date: date) -> WorkshopSnapshot | None:
        snapshot = self._store.snapshots.get(snapshot_date)
        return snapshot.model_copy(deep=True) if snapshot else None

    def create(self, snapshot: WorkshopSnapshot) -> WorkshopSnapshot:
        if snapshot.date in self._store.snapshots:
            raise SnapshotAlreadyExists(snapshot.date)
        self._store.snapshots[snapshot.date] = snapshot.model_copy(deep=True)
        return snapshot

    def list_all(self) -> list[WorkshopSnapshot]:
        return [
            snapshot.model_copy(deep=True)
            for snapshot in sorted(
                self._store.snapshots.values(), key=lambda s: s.date, reverse=True
            )
        ]


class InMemorySlotReservationRepository(SlotReservationRepository):
    """Reservations keyed by ``(technician_id, date, slot_index)``, one owner per key."""

    def __init__(self, store: InMemoryStore, grid: TimeGrid = DEFAULT_GRID):
        self._store = store
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
        taken = [
            self._store.reservations[key]
            for key in ((technician_id, on_date, i) for i in slot_indexes)
            if key in self._store.reservations
            and self._store.reservations[key].owner_id != owner_id
        ]
        if taken:
            raise reservation_conflict(
                technician_id, on_date, slot_indexes, taken, self._grid
            )

        created = []
        for index in slot_indexes:
            reservation = SlotReservation(
                owner_id=owner_id,
                owner_type=owner_type,
                technician_id=technician_id,
                date=on_date,
                slot_index=index,
            )
            self._store.reservations[(technician_id, on_date, index)] = reservation
            created.append(reservation)
        return created

    def release(self, owner_id: UUID) -> int:
        keys = [
            key
            for key, reservation in self._store.reservations.items()
            if reservation.owner_id == owner_id
        ]
        for key in keys:
            del self._store.reservations[key]
        return len(keys)

    def find_by_technician_and_date(
        self, technician_id: UUID, on_date: date
    ) -> list[SlotReservation]:
        return sorted(
            (
                r
                for (tech, day, _), r in self._store.reservations.items()
                if tech == technician_id and day == on_date
            ),
            key=lambda r: r.slot_index,
        )


class InMemoryUserDirectory(UserDirectory):
    def __init__(self, users: Iterable[UserProfile] = ()):
        self._users: dict[UUID, UserProfile] = {user.id: user for user in users}

    def add(self, user: UserProfile) -> UserProfile:
        self._users[user.id] = user
        return user

    def get(self, user_id: UUID) -> UserProfile | None:
        return self._users.get(user_id)

    def list_technicians(self) -> list[UserProfile]:
        return [u for u in self._users.values() if u.is_technician and u.is_active]
