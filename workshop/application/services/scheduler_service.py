"""
Scheduler application service.

The only writer of a job order's technician, date and time range. Every
placement runs the conflict pre-check and the daily limit check, then takes
the slot reservations that storage guards with a unique constraint, all in
one unit of work.
"""

import logging
from datetime import date
from uuid import UUID

from workshop.core.observability import audit
from workshop.domain.scheduling.entities.job_order import JobOrder
from workshop.domain.scheduling.services.lifecycle_policy import LifecycleAction
from workshop.domain.scheduling.value_objects.enums import JobStatus
from workshop.domain.scheduling.value_objects.time_range import TimeRange
from workshop.domain.scheduling.value_objects.user_profile import Actor, UserProfile
from workshop.domain.scheduling.value_objects.work_items import JobItem, Part
from workshop.domain.shared.exceptions import InvalidTransition

from .base_service import ApplicationServiceBase

logger = logging.getLogger(__name__)


class SchedulerService(ApplicationServiceBase):
    """Plotting, reassignment, replotting and availability queries."""

    def create_job_order(
        self,
        actor: Actor,
        job_number: str,
        plate_number: str,
        on_date: date,
        vin: str = "",
        job_list: list[JobItem] | None = None,
        parts: list[Part] | None = None,
        technician_id: UUID | None = None,
        start: str | None = None,
        end: str | None = None,
        service_advisor: UUID | None = None,
        is_important: bool = False,
    ) -> JobOrder:
        """
        Direct intake of a new job order.

        Args:
            actor: Creating actor
            job_number: Job number, unique per business day
            plate_number: Vehicle plate
            on_date: Business day
            vin: Vehicle identification number
            job_list: Tasks
            parts: Parts; any unavailable part makes the job WaitingParts
            technician_id: Technician to plot onto at intake
            start: Slot start, with ``end``
            end: Slot end
            service_advisor: Responsible service advisor
            is_important: Priority flag

        Returns:
            Created job order

        Raises:
            Forbidden: If the actor may not create jobs
            DuplicateJobNumber: If the number is taken for the day
            ConflictError: If the requested slot is not free
            InvalidInterval: If the slot is malformed or off-grid
        """
        self.authorize(actor, LifecycleAction.CREATE_JOB)
        time_range = None
        if technician_id is not None and start is not None and end is not None:
            time_range = self.validate_time_range(start, end)

        with self._uow_factory() as uow:
            job = JobOrder.create(
                job_number=job_number,
                plate_number=plate_number,
                created_by=actor.id,
                on_date=on_date,
                vin=vin,
                job_list=job_list,
                parts=parts,
                assigned_technician=technician_id if time_range else None,
                time_range=time_range,
                service_advisor=service_advisor,
                is_important=is_important,
            )
            if job.occupies_slot:
                self.ensure_placeable(
                    uow,
                    job,
                    job.assigned_technician,  # type: ignore[arg-type]
                    on_date,
                    job.time_range,
                )
            uow.job_orders.create(job)
            self.sync_reservation(uow, job)
            uow.collect(job)

        logger.info(
            "Created job order %s (%s) on %s as %s",
            job.job_number,
            job.id,
            on_date,
            job.status.value,
        )
        audit(
            "job_order.created",
            actor.id,
            job_id=job.id,
            job_number=job.job_number,
            status=job.status,
            date=on_date,
        )
        return job

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
        """
        Place an unassigned (or carried-over, not yet placed) job on the grid.

        Args:
            actor: Acting user
            job_id: Job order to plot
            technician_id: Technician receiving the work
            on_date: Business day
            start: Slot start
            end: Slot end
            clear_carry_over: Drop the job from the carried-over queue;
                provenance fields are always kept

        Returns:
            The job order, now OnGoing

        Raises:
            InvalidTransition: If the job is not Unassigned
            ConflictError: If the slot is taken, overlaps a break or
                exceeds the daily limit
            NotFound: If the job does not exist
        """
        return self._plot(
            actor, job_id, technician_id, on_date, start, end, clear_carry_over, "plot"
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
        """Plot a job returned to Unassigned by QI rejection or resolved parts."""
        return self._plot(
            actor,
            job_id,
            technician_id,
            on_date,
            start,
            end,
            clear_carry_over,
            "replot",
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
        """
        Move a job to another technician, day or slot.

        Allowed in every status except Complete. An unassigned job is plotted.
        The conflict check ignores the job's own current booking.

        Raises:
            InvalidTransition: If the job is Complete
            ConflictError: If the target slot is not free
        """
        self.authorize(actor, LifecycleAction.REASSIGN)
        time_range = self.validate_time_range(start, end)

        with self._uow_factory() as uow:
            job = uow.job_orders.get(job_id)
            if job.is_complete:
                raise InvalidTransition(
                    job.id,
                    job.status.value,
                    job.status.value,
                    "complete jobs cannot be reassigned",
                )
            previous_technician = job.assigned_technician
            self.ensure_placeable(uow, job, technician_id, on_date, time_range)
            if job.status is JobStatus.UNASSIGNED:
                job.plot(technician_id, on_date, time_range, actor.id)
            else:
                job.reassign(technician_id, on_date, time_range)
            uow.job_orders.save(job)
            self.sync_reservation(uow, job)
            uow.collect(job)

        logger.info(
            "Reassigned job order %s from %s to %s on %s %s",
            job.job_number,
            previous_technician,
            technician_id,
            on_date,
            time_range,
        )
        audit(
            "job_order.reassigned",
            actor.id,
            job_id=job.id,
            job_number=job.job_number,
            previous_technician_id=previous_technician,
            technician_id=technician_id,
            date=on_date,
            time_range=str(time_range),
        )
        return job

    def has_conflict(
        self,
        technician_id: UUID,
        on_date: date,
        start: str,
        end: str,
        exclude_id: UUID | None = None,
    ) -> bool:
        with self._uow_factory() as uow:
            return self.detector(uow).has_conflict(
                technician_id, on_date, start, end, exclude_id
            )

    def free_slots(self, technician_id: UUID, on_date: date) -> list[TimeRange]:
        with self._uow_factory() as uow:
            return self.detector(uow).free_slots(technician_id, on_date)

    def walk_in_slots(
        self, on_date: date, duration_minutes: int
    ) -> dict[UUID, list[TimeRange]]:
        """Candidate intervals per technician for an unscheduled walk-in."""
        with self._uow_factory() as uow:
            return self.detector(uow).walk_in_slots(
                on_date, duration_minutes, self._technicians()
            )

    def available_technicians(
        self, on_date: date, start: str, end: str
    ) -> list[UserProfile]:
        time_range = TimeRange(start=start, end=end)
        with self._uow_factory() as uow:
            return self.detector(uow).available_technicians(
                on_date, time_range, self._technicians()
            )

    def _plot(
        self,
        actor: Actor,
        job_id: UUID,
        technician_id: UUID,
        on_date: date,
        start: str,
        end: str,
        clear_carry_over: bool,
        operation: str,
    ) -> JobOrder:
        self.authorize(actor, LifecycleAction.PLOT)
        time_range = self.validate_time_range(start, end)

        with self._uow_factory() as uow:
            job = uow.job_orders.get(job_id)
            if job.status is not JobStatus.UNASSIGNED:
                raise InvalidTransition(
                    job.id,
                    job.status.value,
                    JobStatus.ON_GOING.value,
                    "only unassigned jobs can be plotted",
                )
            self.ensure_placeable(uow, job, technician_id, on_date, time_range)
            job.plot(technician_id, on_date, time_range, actor.id, clear_carry_over)
            uow.job_orders.save(job)
            self.sync_reservation(uow, job)
            uow.collect(job)

        logger.info(
            "Plotted job order %s for technician %s on %s %s",
            job.job_number,
            technician_id,
            on_date,
            time_range,
        )
        audit(
            f"job_order.{operation}",
            actor.id,
            job_id=job.id,
            job_number=job.job_number,
            technician_id=technician_id,
            date=on_date,
            time_range=str(time_range),
        )
        return job

    def _technicians(self) -> list[UserProfile]:
        return self._users.list_technicians() if self._users else []
