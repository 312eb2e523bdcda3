"""
End-of-day carry-over and snapshot application service.

Closing a day freezes its board into a write-once snapshot and rolls every
open job onto the next business day as a new record. Both happen in one unit
of work: either the snapshot and all continuations are stored, or nothing is.
"""

import logging
import threading
from collections import Counter
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from uuid import UUID

from workshop.core.observability import audit
from workshop.domain.scheduling.entities.job_order import JobOrder
from workshop.domain.scheduling.entities.workshop_snapshot import (
    CarryOverRecord,
    PersonRef,
    SnapshotJobOrder,
    SnapshotStatistics,
    WorkshopSnapshot,
)
from workshop.domain.scheduling.events.domain_events import SnapshotCreated
from workshop.domain.scheduling.repositories.user_directory import UserDirectory
from workshop.domain.scheduling.services.lifecycle_policy import LifecycleAction
from workshop.domain.scheduling.value_objects.business_calendar import (
    BusinessCalendar,
)
from workshop.domain.scheduling.value_objects.time_grid import DEFAULT_GRID, TimeGrid
from workshop.domain.scheduling.value_objects.user_profile import Actor
from workshop.domain.shared.exceptions import NotFound, SnapshotAlreadyExists

from .base_service import ApplicationServiceBase, UnitOfWorkFactory

logger = logging.getLogger(__name__)

_date_locks: dict[date, threading.Lock] = {}
_date_lock_users: Counter[date] = Counter()
_date_locks_guard = threading.Lock()


@contextmanager
def _closing_lock(on_date: date) -> Iterator[None]:
    """
    Serialize day closes for the same date within this process.

    A date's lock lives only while some close of that date holds or waits
    for it.
    """
    with _date_locks_guard:
        lock = _date_locks.setdefault(on_date, threading.Lock())
        _date_lock_users[on_date] += 1
    try:
        with lock:
            yield
    finally:
        with _date_locks_guard:
            _date_lock_users[on_date] -= 1
            if not _date_lock_users[on_date]:
                del _date_lock_users[on_date]
                del _date_locks[on_date]


class CarryOverSnapshotService(ApplicationServiceBase):
    """Day close, snapshot retrieval and snapshot listing."""

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        users: UserDirectory | None = None,
        calendar: BusinessCalendar | None = None,
        grid: TimeGrid = DEFAULT_GRID,
    ):
        super().__init__(unit_of_work_factory, users, grid)
        self._calendar = calendar or BusinessCalendar.from_settings()

    def run_end_of_day_carry_over(self, actor: Actor, on_date: date) -> WorkshopSnapshot:
        """
        Close ``on_date``.

        Every job in an open status gets a continuation on the next business
        day: no technician or slot, Unassigned (or WaitingParts while parts
        are missing), ``source_type`` carry-over and a link back to the
        source. The source jobs are not modified. The snapshot embeds every
        job of the day, names resolved, plus statistics and one carry-over
        entry per open job.

        Args:
            actor: Actor closing the day
            on_date: Business day to close

        Returns:
            The stored snapshot

        Raises:
            Forbidden: If the actor may not close the day
            SnapshotAlreadyExists: If the day was already closed
            DuplicateJobNumber: If a continuation's number is already used on
                the next business day
        """
        self.authorize(actor, LifecycleAction.END_OF_DAY)
        next_date = self._calendar.next_business_day(on_date)

        with _closing_lock(on_date), self._uow_factory() as uow:
            if uow.snapshots.find_by_date(on_date) is not None:
                raise SnapshotAlreadyExists(on_date)

            jobs = uow.job_orders.find_by_date(on_date)
            carry_over_jobs: list[CarryOverRecord] = []
            for job in jobs:
                if not job.status.is_open:
                    continue
                continuation = job.carry_over_to(next_date)
                uow.job_orders.create(continuation)
                uow.collect(continuation)
                carry_over_jobs.append(
                    CarryOverRecord(
                        job_id=job.id,
                        job_number=job.job_number,
                        plate_number=job.plate_number,
                        status=job.status,
                        reason=job.status.label,
                        carried_to_job_id=continuation.id,
                    )
                )

            snapshot = WorkshopSnapshot(
                date=on_date,
                created_by=self._person(actor.id),
                job_orders=tuple(self._freeze(job) for job in jobs),
                statistics=SnapshotStatistics.from_jobs(jobs),
                carry_over_jobs=tuple(carry_over_jobs),
            )
            uow.snapshots.create(snapshot)
            uow.add_domain_event(
                SnapshotCreated(
                    aggregate_id=snapshot.id,
                    snapshot_date=on_date,
                    total_jobs=snapshot.statistics.total_jobs,
                    carried_over=len(carry_over_jobs),
                    carry_over_job_ids=[r.job_id for r in carry_over_jobs],
                )
            )

        logger.info(
            "Closed %s: %d jobs snapshotted, %d carried over to %s",
            on_date,
            snapshot.statistics.total_jobs,
            len(carry_over_jobs),
            next_date,
        )
        audit(
            "snapshot.created",
            actor.id,
            date=on_date,
            next_date=next_date,
            total_jobs=snapshot.statistics.total_jobs,
            carried_over=len(carry_over_jobs),
        )
        for record in carry_over_jobs:
            audit(
                "job_order.carried_over",
                actor.id,
                job_id=record.job_id,
                job_number=record.job_number,
                status=record.status,
                carried_to_job_id=record.carried_to_job_id,
                date=next_date,
            )
        return snapshot

    def get_snapshot(self, on_date: date) -> WorkshopSnapshot:
        """
        Raises:
            NotFound: If the day has not been closed
        """
        with self._uow_factory() as uow:
            snapshot = uow.snapshots.find_by_date(on_date)
        if snapshot is None:
            raise NotFound("WorkshopSnapshot", on_date)
        return snapshot

    def list_snapshots(self) -> list[WorkshopSnapshot]:
        """Every stored snapshot, most recent day first."""
        with self._uow_factory() as uow:
            return uow.snapshots.list_all()

    def _freeze(self, job: JobOrder) -> SnapshotJobOrder:
        return SnapshotJobOrder(
            id=job.id,
            job_number=job.job_number,
            plate_number=job.plate_number,
            vin=job.vin,
            assigned_technician=self._optional_person(job.assigned_technician),
            service_advisor=self._optional_person(job.service_advisor),
            created_by=self._person(job.created_by),
            date=job.date,
            time_range=job.time_range,
            actual_end_time=job.actual_end_time,
            job_list=tuple(job.job_list),
            parts=tuple(job.parts),
            status=job.status,
            qi_status=job.qi_status,
            hold_customer_remarks=job.hold_customer_remarks,
            sublet_remarks=job.sublet_remarks,
            source_type=job.source_type,
            carried_over=job.carried_over,
            original_created_date=job.original_created_date,
            is_important=job.is_important,
            origin_job_id=job.origin_job_id,
            origin_links=tuple(job.origin_links),
            created_at=job.created_at,
        )

    def _optional_person(self, user_id: UUID | None) -> PersonRef | None:
        return self._person(user_id) if user_id is not None else None

    def _person(self, user_id: UUID) -> PersonRef:
        profile = self._users.get(user_id) if self._users else None
        if profile is None:
            # Unknown to the directory; keep the id so the record stays traceable
            return PersonRef(id=user_id, name=str(user_id))
        return PersonRef(id=profile.id, name=profile.name, email=profile.email)
