"""
Appointment application service.

Appointments hold technician slots the same way job orders do, so booking
goes through the same conflict pre-check and slot reservations.
"""

import logging
from datetime import date
from uuid import UUID

from workshop.core.observability import audit
from workshop.domain.scheduling.entities.appointment import Appointment
from workshop.domain.scheduling.entities.job_order import JobOrder
from workshop.domain.scheduling.events.domain_events import AppointmentConverted
from workshop.domain.scheduling.repositories.unit_of_work import UnitOfWork
from workshop.domain.scheduling.services.lifecycle_policy import LifecycleAction
from workshop.domain.scheduling.value_objects.enums import (
    JobStatus,
    ReservationOwner,
    SourceType,
)
from workshop.domain.scheduling.value_objects.user_profile import Actor
from workshop.domain.scheduling.value_objects.work_items import JobItem, Part
from workshop.domain.shared.exceptions import ValidationError

from .base_service import ApplicationServiceBase

logger = logging.getLogger(__name__)


class AppointmentService(ApplicationServiceBase):
    """Booking, rescheduling, conversion, conflict resolution and no-shows."""

    def book_appointment(
        self,
        actor: Actor,
        plate_number: str,
        technician_id: UUID,
        on_date: date,
        start: str,
        end: str,
    ) -> Appointment:
        """
        Book a technician slot for an expected vehicle.

        Raises:
            Forbidden: If the actor may not manage appointments
            InvalidInterval: If the slot is malformed or off-grid
            ConflictError: If the slot overlaps a booking or break
        """
        self.authorize(actor, LifecycleAction.MANAGE_APPOINTMENTS)
        time_range = self.validate_time_range(start, end)

        with self._uow_factory() as uow:
            self.ensure_free(uow, technician_id, on_date, time_range)
            appointment = Appointment.book(
                plate_number, technician_id, on_date, time_range, actor.id
            )
            uow.appointments.create(appointment)
            uow.reservations.reserve(
                appointment.id,
                ReservationOwner.APPOINTMENT,
                technician_id,
                on_date,
                self._grid.slots_for(start, end),
            )
            uow.collect(appointment)

        logger.info(
            "Booked appointment %s for %s with technician %s on %s %s",
            appointment.id,
            appointment.plate_number,
            technician_id,
            on_date,
            time_range,
        )
        audit(
            "appointment.booked",
            actor.id,
            appointment_id=appointment.id,
            plate_number=appointment.plate_number,
            technician_id=technician_id,
            date=on_date,
            time_range=str(time_range),
        )
        return appointment

    def convert_appointment(
        self,
        actor: Actor,
        appointment_id: UUID,
        job_number: str,
        vin: str = "",
        job_list: list[JobItem] | None = None,
        parts: list[Part] | None = None,
        service_advisor: UUID | None = None,
        is_important: bool = False,
    ) -> JobOrder:
        """
        Turn an arrived appointment into a job order.

        The job takes over the appointment's technician and slot; the parts
        rule still applies, so a job with a missing part starts WaitingParts
        and the slot is freed. The appointment is deleted in the same
        transaction.

        Raises:
            NotFound: If the appointment does not exist
            DuplicateJobNumber: If the number is taken for the day
            DailyLimitExceeded: If the job would pass the technician's daily limit
        """
        self.authorize(actor, LifecycleAction.CREATE_JOB)

        with self._uow_factory() as uow:
            appointment = uow.appointments.get(appointment_id)
            uow.appointments.delete(appointment.id)
            uow.reservations.release(appointment.id)

            job = JobOrder.create(
                job_number=job_number,
                plate_number=appointment.plate_number,
                created_by=actor.id,
                on_date=appointment.date,
                vin=vin,
                job_list=job_list,
                parts=parts,
                assigned_technician=appointment.assigned_technician,
                time_range=appointment.time_range,
                service_advisor=service_advisor,
                source_type=SourceType.APPOINTMENT,
                is_important=is_important,
            )
            if job.occupies_slot:
                self.ensure_placeable(
                    uow,
                    job,
                    appointment.assigned_technician,
                    appointment.date,
                    appointment.time_range,
                )
            uow.job_orders.create(job)
            self.sync_reservation(uow, job)
            uow.collect(job)
            uow.add_domain_event(
                AppointmentConverted(
                    aggregate_id=appointment.id,
                    appointment_id=appointment.id,
                    job_id=job.id,
                )
            )

        logger.info(
            "Converted appointment %s into job order %s (%s)",
            appointment_id,
            job.job_number,
            job.status.value,
        )
        audit(
            "appointment.converted",
            actor.id,
            appointment_id=appointment_id,
            job_id=job.id,
            job_number=job.job_number,
            status=job.status,
        )
        return job

    def reschedule_appointment(
        self,
        actor: Actor,
        appointment_id: UUID,
        technician_id: UUID,
        on_date: date,
        start: str,
        end: str,
    ) -> Appointment:
        """
        Move an appointment to another technician, day or slot.

        The conflict check ignores the appointment's own current booking.

        Raises:
            NotFound: If the appointment does not exist
            InvalidInterval: If the slot is malformed or off-grid
            ConflictError: If the target slot overlaps a booking or break
        """
        self.authorize(actor, LifecycleAction.MANAGE_APPOINTMENTS)
        time_range = self.validate_time_range(start, end)

        with self._uow_factory() as uow:
            appointment = uow.appointments.get(appointment_id)
            previous_technician = appointment.assigned_technician
            previous_date = appointment.date
            previous_range = appointment.time_range
            self.ensure_free(
                uow, technician_id, on_date, time_range, exclude_id=appointment.id
            )
            appointment.reschedule(technician_id, on_date, time_range)
            uow.appointments.save(appointment)
            uow.reservations.release(appointment.id)
            uow.reservations.reserve(
                appointment.id,
                ReservationOwner.APPOINTMENT,
                technician_id,
                on_date,
                self._grid.slots_for(start, end),
            )

        logger.info(
            "Rescheduled appointment %s from %s %s %s to %s %s %s",
            appointment.id,
            previous_technician,
            previous_date,
            previous_range,
            technician_id,
            on_date,
            time_range,
        )
        audit(
            "appointment.rescheduled",
            actor.id,
            appointment_id=appointment.id,
            previous_technician_id=previous_technician,
            previous_date=previous_date,
            previous_time_range=str(previous_range),
            technician_id=technician_id,
            date=on_date,
            time_range=str(time_range),
        )
        return appointment

    def appointment_conflicts(
        self,
        appointment_id: UUID,
        technician_id: UUID | None = None,
        on_date: date | None = None,
        start: str | None = None,
        end: str | None = None,
    ) -> list[JobOrder]:
        """
        Job orders standing in the way of an appointment.

        Checks the appointment's current placement, or a candidate placement
        when any of ``technician_id``, ``on_date`` or ``start``/``end`` is
        given. Only jobs that can be sent back to Unassigned are listed.

        Returns:
            Clashing job orders, by start time
        """
        with self._uow_factory() as uow:
            appointment = uow.appointments.get(appointment_id)
            return self._clashing_jobs(
                uow, appointment, technician_id, on_date, start, end
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
        """
        Clear clashing job orders out of an appointment's way.

        Each listed job goes back to Unassigned with its technician and time
        range cleared, all in one unit of work.

        Args:
            actor: Acting user
            appointment_id: Appointment whose placement wins
            job_ids: Job orders to unplot, as listed by ``appointment_conflicts``
            technician_id: Candidate technician, defaults to the appointment's
            on_date: Candidate day, defaults to the appointment's
            start: Candidate start, with ``end``
            end: Candidate end

        Returns:
            The unplotted job orders

        Raises:
            NotFound: If the appointment or a job order does not exist
            ValidationError: If a listed job does not clash with the placement
        """
        self.authorize(actor, LifecycleAction.MANAGE_APPOINTMENTS)

        with self._uow_factory() as uow:
            appointment = uow.appointments.get(appointment_id)
            clashing = {
                job.id: job
                for job in self._clashing_jobs(
                    uow, appointment, technician_id, on_date, start, end
                )
            }
            resolved = []
            for job_id in dict.fromkeys(job_ids):
                job = clashing.get(job_id) or uow.job_orders.get(job_id)
                if job.id not in clashing:
                    raise ValidationError(
                        "job_ids",
                        job_id,
                        f"job order {job.job_number} does not clash with "
                        f"appointment {appointment.id}",
                    )
                job.change_status(
                    JobStatus.UNASSIGNED,
                    actor.id,
                    reason=f"Displaced by appointment {appointment.plate_number}",
                )
                uow.job_orders.save(job)
                self.sync_reservation(uow, job)
                uow.collect(job)
                resolved.append(job)

        for job in resolved:
            logger.info(
                "Unplotted job order %s for appointment %s",
                job.job_number,
                appointment_id,
            )
            audit(
                "appointment.conflict_resolved",
                actor.id,
                appointment_id=appointment_id,
                job_id=job.id,
                job_number=job.job_number,
            )
        return resolved

    def _clashing_jobs(
        self,
        uow: UnitOfWork,
        appointment: Appointment,
        technician_id: UUID | None,
        on_date: date | None,
        start: str | None,
        end: str | None,
    ) -> list[JobOrder]:
        if start is not None and end is not None:
            time_range = self.validate_time_range(start, end)
        else:
            time_range = appointment.time_range
        technician_id = technician_id or appointment.assigned_technician
        on_date = on_date or appointment.date

        jobs = [
            job
            for job in uow.job_orders.find_by_technician_and_date(technician_id, on_date)
            if job.occupies_slot
            and job.status.can_transition_to(JobStatus.UNASSIGNED)
            and job.time_range.overlaps_with(time_range)
        ]
        return sorted(jobs, key=lambda job: (job.time_range.start_minutes, job.job_number))

    def cancel_appointment(self, actor: Actor, appointment_id: UUID) -> None:
        """
        Delete an appointment and free its slot.

        Raises:
            NotFound: If the appointment does not exist
        """
        self.authorize(actor, LifecycleAction.MANAGE_APPOINTMENTS)
        with self._uow_factory() as uow:
            appointment = uow.appointments.get(appointment_id)
            uow.appointments.delete(appointment.id)
            uow.reservations.release(appointment.id)

        logger.info("Cancelled appointment %s", appointment_id)
        audit(
            "appointment.cancelled",
            actor.id,
            appointment_id=appointment_id,
            plate_number=appointment.plate_number,
        )

    def mark_no_show(self, actor: Actor, appointment_id: UUID) -> Appointment:
        """Flag a customer who did not arrive; the slot becomes bookable again."""
        self.authorize(actor, LifecycleAction.MANAGE_APPOINTMENTS)
        with self._uow_factory() as uow:
            appointment = uow.appointments.get(appointment_id)
            appointment.mark_no_show()
            uow.appointments.save(appointment)
            uow.reservations.release(appointment.id)

        audit(
            "appointment.no_show",
            actor.id,
            appointment_id=appointment_id,
            plate_number=appointment.plate_number,
        )
        return appointment

    def purge_no_shows(self, actor: Actor, on_date: date) -> int:
        """
        Delete every no-show appointment of a day.

        Returns:
            Number of appointments removed
        """
        self.authorize(actor, LifecycleAction.MANAGE_APPOINTMENTS)
        with self._uow_factory() as uow:
            removed = 0
            for appointment in uow.appointments.find_by_date(on_date):
                if not appointment.no_show:
                    continue
                uow.appointments.delete(appointment.id)
                uow.reservations.release(appointment.id)
                removed += 1

        if removed:
            logger.info("Purged %d no-show appointments on %s", removed, on_date)
            audit("appointment.no_shows_purged", actor.id, date=on_date, count=removed)
        return removed

    def list_appointments(self, on_date: date) -> list[Appointment]:
        """Appointments of a day, ordered by start time."""
        with self._uow_factory() as uow:
            return uow.appointments.find_by_date(on_date)
