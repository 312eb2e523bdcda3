"""
Workshop engine facade.

Wires the application services to one unit of work factory and exposes the
engine operations in one place, the way request handlers consume them.
"""

from datetime import date
from uuid import UUID

from workshop.core.observability import setup_logging
from workshop.domain.scheduling.entities.appointment import Appointment
from workshop.domain.scheduling.entities.job_order import JobOrder
from workshop.domain.scheduling.entities.workshop_snapshot import (
    SnapshotStatistics,
    WorkshopSnapshot,
)
from workshop.domain.scheduling.events.domain_events import DomainEventDispatcher
from workshop.domain.scheduling.repositories.user_directory import UserDirectory
from workshop.domain.scheduling.services.status_queue_projector import StatusQueues
from workshop.domain.scheduling.value_objects.business_calendar import (
    BusinessCalendar,
)
from workshop.domain.scheduling.value_objects.enums import JobItemStatus, JobStatus
from workshop.domain.scheduling.value_objects.time_grid import TimeGrid
from workshop.domain.scheduling.value_objects.time_range import TimeRange
from workshop.domain.scheduling.value_objects.user_profile import Actor, UserProfile
from workshop.domain.scheduling.value_objects.work_items import JobItem, Part

from .services.appointment_service import AppointmentService
from .services.base_service import UnitOfWorkFactory
from .services.board_service import BoardService
from .services.carry_over_service import CarryOverSnapshotService
from .services.lifecycle_service import JobOrderLifecycleService
from .services.scheduler_service import SchedulerService


class WorkshopEngine:
    """Single entry point over scheduling, lifecycle, appointments and day close."""

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        users: UserDirectory | None = None,
        calendar: BusinessCalendar | None = None,
        grid: TimeGrid | None = None,
        daily_limit_minutes: int | None = None,
    ):
        grid = grid or TimeGrid.from_settings()
        self.scheduler = SchedulerService(
            unit_of_work_factory, users, grid, daily_limit_minutes
        )
        self.lifecycle = JobOrderLifecycleService(
            unit_of_work_factory, users, grid, daily_limit_minutes
        )
        self.appointments = AppointmentService(
            unit_of_work_factory, users, grid, daily_limit_minutes
        )
        self.carry_over = CarryOverSnapshotService(
            unit_of_work_factory, users, calendar, grid
        )
        self.board = BoardService(unit_of_work_factory, users, grid)

    @classmethod
    def in_memory(
        cls,
        users: UserDirectory | None = None,
        calendar: BusinessCalendar | None = None,
        grid: TimeGrid | None = None,
        dispatcher: DomainEventDispatcher | None = None,
        daily_limit_minutes: int | None = None,
    ) -> "WorkshopEngine":
        from workshop.infrastructure.memory import InMemoryUnitOfWorkFactory

        grid = grid or TimeGrid.from_settings()
        return cls(
            InMemoryUnitOfWorkFactory(dispatcher=dispatcher, grid=grid),
            users,
            calendar,
            grid,
            daily_limit_minutes,
        )

    @classmethod
    def from_settings(
        cls,
        users: UserDirectory | None = None,
        dispatcher: DomainEventDispatcher | None = None,
    ) -> "WorkshopEngine":
        """Engine over the configured database, with logging configured."""
        setup_logging()
        from workshop.infrastructure.database import (
            SqlModelUnitOfWorkFactory,
            create_db_and_tables,
            get_engine,
        )

        grid = TimeGrid.from_settings()
        engine = get_engine()
        create_db_and_tables(engine)
        return cls(
            SqlModelUnitOfWorkFactory(engine, dispatcher=dispatcher, grid=grid),
            users,
            BusinessCalendar.from_settings(),
            grid,
        )

    # Intake and scheduling

    def create_job_order(
        self, actor: Actor, job_number: str, plate_number: str, on_date: date, **kwargs
    ) -> JobOrder:
        return self.scheduler.create_job_order(
            actor, job_number, plate_number, on_date, **kwargs
        )

    def plot(
        self,
        actor: Actor,
        job_id: UUID,
        technician_id: UUID,
        on_date: date,
        start: str,
        end: str,
        clear_carry_over: bool = True,
    ) -> JobOrder:
        return self.scheduler.plot(
            actor, job_id, technician_id, on_date, start, end, clear_carry_over
        )

    def replot(
        self,
        actor: Actor,
        job_id: UUID,
        technician_id: UUID,
        on_date: date,
        start: str,
        end: str,
        clear_carry_over: bool = True,
    ) -> JobOrder:
        return self.scheduler.replot(
            actor, job_id, technician_id, on_date, start, end, clear_carry_over
        )

    def reassign(
        self,
        actor: Actor,
        job_id: UUID,
        technician_id: UUID,
        on_date: date,
        start: str,
        end: str,
    ) -> JobOrder:
        return self.scheduler.reassign(actor, job_id, technician_id, on_date, start, end)

    def has_conflict(
        self,
        technician_id: UUID,
        on_date: date,
        start: str,
        end: str,
        exclude_id: UUID | None = None,
    ) -> bool:
        return self.scheduler.has_conflict(technician_id, on_date, start, end, exclude_id)

    def free_slots(self, technician_id: UUID, on_date: date) -> list[TimeRange]:
        return self.scheduler.free_slots(technician_id, on_date)

    def walk_in_slots(
        self, on_date: date, duration_minutes: int
    ) -> dict[UUID, list[TimeRange]]:
        return self.scheduler.walk_in_slots(on_date, duration_minutes)

    def available_technicians(
        self, on_date: date, start: str, end: str
    ) -> list[UserProfile]:
        return self.scheduler.available_technicians(on_date, start, end)

    # Lifecycle

    def transition_status(
        self,
        actor: Actor,
        job_id: UUID,
        new_status: JobStatus,
        remarks: str | None = None,
        reason: str | None = None,
    ) -> JobOrder:
        return self.lifecycle.transition_status(
            actor, job_id, new_status, remarks, reason
        )

    def submit_for_qi(self, actor: Actor, job_id: UUID) -> JobOrder:
        return self.lifecycle.submit_for_qi(actor, job_id)

    def approve_qi(self, actor: Actor, job_id: UUID) -> JobOrder:
        return self.lifecycle.approve_qi(actor, job_id)

    def reject_qi(
        self, actor: Actor, job_id: UUID, reason: str | None = None
    ) -> JobOrder:
        return self.lifecycle.reject_qi(actor, job_id, reason)

    def complete_job(self, actor: Actor, job_id: UUID, claimed: bool = True) -> JobOrder:
        return self.lifecycle.complete_job(actor, job_id, claimed)

    def redo_job(
        self, actor: Actor, job_id: UUID, reason: str | None = None
    ) -> JobOrder:
        return self.lifecycle.redo_job(actor, job_id, reason)

    def update_parts(self, actor: Actor, job_id: UUID, parts: list[Part]) -> JobOrder:
        return self.lifecycle.update_parts(actor, job_id, parts)

    def update_tasks(
        self, actor: Actor, job_id: UUID, job_list: list[JobItem]
    ) -> JobOrder:
        return self.lifecycle.update_tasks(actor, job_id, job_list)

    def set_task_status(
        self, actor: Actor, job_id: UUID, index: int, status: JobItemStatus
    ) -> JobOrder:
        return self.lifecycle.set_task_status(actor, job_id, index, status)

    def toggle_important(self, actor: Actor, job_id: UUID) -> JobOrder:
        return self.lifecycle.toggle_important(actor, job_id)

    # Appointments

    def book_appointment(
        self,
        actor: Actor,
        plate_number: str,
        technician_id: UUID,
        on_date: date,
        start: str,
        end: str,
    ) -> Appointment:
        return self.appointments.book_appointment(
            actor, plate_number, technician_id, on_date, start, end
        )

    def convert_appointment(
        self, actor: Actor, appointment_id: UUID, job_number: str, **kwargs
    ) -> JobOrder:
        return self.appointments.convert_appointment(
            actor, appointment_id, job_number, **kwargs
        )

    def reschedule_appointment(
        self,
        actor: Actor,
        appointment_id: UUID,
        technician_id: UUID,
        on_date: date,
        start: str,
        end: str,
    ) -> Appointment:
        return self.appointments.reschedule_appointment(
            actor, appointment_id, technician_id, on_date, start, end
        )

    def appointment_conflicts(
        self,
        appointment_id: UUID,
        technician_id: UUID | None = None,
        on_date: date | None = None,
        start: str | None = None,
        end: str | None = None,
    ) -> list[JobOrder]:
        return self.appointments.appointment_conflicts(
            appointment_id, technician_id, on_date, start, end
        )

    def resolve_appointment_conflicts(
        self,
        actor: Actor,
        appointment_id: UUID,
        job_ids: list[UUID],
        technician_id: UUID | None = None,
        on_date: date | None = None,
        start: str | None = None,
        end: str | None = None,
    ) -> list[JobOrder]:
        return self.appointments.resolve_appointment_conflicts(
            actor, appointment_id, job_ids, technician_id, on_date, start, end
        )

    def cancel_appointment(self, actor: Actor, appointment_id: UUID) -> None:
        self.appointments.cancel_appointment(actor, appointment_id)

    def mark_no_show(self, actor: Actor, appointment_id: UUID) -> Appointment:
        return self.appointments.mark_no_show(actor, appointment_id)

    def purge_no_shows(self, actor: Actor, on_date: date) -> int:
        return self.appointments.purge_no_shows(actor, on_date)

    def list_appointments(self, on_date: date) -> list[Appointment]:
        return self.appointments.list_appointments(on_date)

    # Day close and board

    def run_end_of_day_carry_over(self, actor: Actor, on_date: date) -> WorkshopSnapshot:
        return self.carry_over.run_end_of_day_carry_over(actor, on_date)

    def get_snapshot(self, on_date: date) -> WorkshopSnapshot:
        return self.carry_over.get_snapshot(on_date)

    def list_snapshots(self) -> list[WorkshopSnapshot]:
        return self.carry_over.list_snapshots()

    def get_queues(self, source: date | WorkshopSnapshot) -> StatusQueues:
        return self.board.get_queues(source)

    def get_statistics(self, on_date: date) -> SnapshotStatistics:
        return self.board.get_statistics(on_date)

    def get_job_order(self, job_id: UUID) -> JobOrder:
        return self.board.get_job_order(job_id)

    def list_job_orders(self, on_date: date) -> list[JobOrder]:
        return self.board.list_job_orders(on_date)
