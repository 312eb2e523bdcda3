"""
Base application service providing common functionality.

Application services open one unit of work per operation, so every use case
either commits completely or rolls back completely.
"""

from abc import ABC
from collections.abc import Callable
from datetime import date
from uuid import UUID

from workshop.core.config import settings
from workshop.domain.scheduling.entities.job_order import JobOrder
from workshop.domain.scheduling.repositories.unit_of_work import UnitOfWork
from workshop.domain.scheduling.repositories.user_directory import UserDirectory
from workshop.domain.scheduling.services.conflict_detector import ConflictDetector
from workshop.domain.scheduling.services.lifecycle_policy import (
    LifecycleAction,
    authorize,
)
from workshop.domain.scheduling.value_objects.enums import ReservationOwner
from workshop.domain.scheduling.value_objects.time_grid import DEFAULT_GRID, TimeGrid
from workshop.domain.scheduling.value_objects.time_range import TimeRange
from workshop.domain.scheduling.value_objects.user_profile import Actor
from workshop.domain.shared.exceptions import (
    ConflictError,
    DailyLimitExceeded,
    InvalidInterval,
)

UnitOfWorkFactory = Callable[[], UnitOfWork]


class ApplicationServiceBase(ABC):
    """
    Base class for application services.

    Provides authorization, grid validation, placement checks and slot
    reservation bookkeeping shared by the scheduling use cases.
    """

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        users: UserDirectory | None = None,
        grid: TimeGrid = DEFAULT_GRID,
        daily_limit_minutes: int | None = None,
    ):
        """
        Initialize the application service.

        Args:
            unit_of_work_factory: Factory for creating unit of work instances
            users: Directory resolving technicians, names and break times
            grid: Slot grid bookings must align to
            daily_limit_minutes: Per-technician daily cap on job order time;
                defaults to the configured limit
        """
        self._uow_factory = unit_of_work_factory
        self._users = users
        self._grid = grid
        self._daily_limit_minutes = daily_limit_minutes

    def authorize(self, actor: Actor, action: LifecycleAction) -> None:
        authorize(actor.role, action)

    def detector(self, uow: UnitOfWork) -> ConflictDetector:
        return ConflictDetector(uow.job_orders, uow.appointments, self._users, self._grid)

    def validate_time_range(self, start: str, end: str) -> TimeRange:
        """
        Build a bookable time range.

        Raises:
            InvalidInterval: If the range is degenerate, outside operating
                hours or not aligned to the slot grid
        """
        time_range = TimeRange(start=start, end=end)
        if not time_range.is_set or not self._grid.is_aligned(start, end):
            raise InvalidInterval(
                start,
                end,
                f"must align to {self._grid.slot_minutes}-minute slots between "
                f"{self._grid.opening_time} and {self._grid.closing_time}",
            )
        return time_range

    def ensure_free(
        self,
        uow: UnitOfWork,
        technician_id: UUID,
        on_date: date,
        time_range: TimeRange,
        exclude_id: UUID | None = None,
    ) -> None:
        """
        Conflict pre-check with full context for the caller.

        Raises:
            ConflictError: If any booking or break overlaps the range
        """
        conflicts = self.detector(uow).find_conflicts(
            technician_id, on_date, time_range, exclude_id
        )
        if conflicts:
            raise ConflictError(
                technician_id, on_date, time_range.start, time_range.end, conflicts
            )

    def sync_reservation(self, uow: UnitOfWork, job: JobOrder) -> None:
        """
        Make the stored slot reservations match the job's current placement.

        Raises:
            ConflictError: If another owner holds one of the job's cells
        """
        uow.reservations.release(job.id)
        if job.occupies_slot:
            uow.reservations.reserve(
                job.id,
                ReservationOwner.JOB_ORDER,
                job.assigned_technician,  # type: ignore[arg-type]
                job.date,
                self._grid.slots_for(job.time_range.start, job.time_range.end),
            )

    def ensure_placeable(
        self,
        uow: UnitOfWork,
        job: JobOrder,
        technician_id: UUID,
        on_date: date,
        time_range: TimeRange,
    ) -> None:
        """
        Full placement check for a job about to occupy a slot.

        Runs on every path that makes a job occupy technician time: intake,
        plotting, reassignment, appointment conversion and resuming work.

        Raises:
            ConflictError: If any booking or break overlaps the range
            DailyLimitExceeded: If the technician's booked job order time
                would pass the daily limit
        """
        self.ensure_free(uow, technician_id, on_date, time_range, exclude_id=job.id)

        limit = self.limit_minutes()
        booked = self.detector(uow).booked_minutes(
            technician_id, on_date, exclude_id=job.id
        )
        if booked + time_range.duration_minutes() > limit:
            raise DailyLimitExceeded(
                technician_id,
                on_date,
                time_range.start,
                time_range.end,
                booked,
                limit,
            )

    def limit_minutes(self) -> int:
        if self._daily_limit_minutes is not None:
            return self._daily_limit_minutes
        return settings.DAILY_TECHNICIAN_LIMIT_MINUTES
