"""
Job order lifecycle application service.

Applies status transitions and work-content edits. Each operation reads the
job, validates and applies the change and writes it back inside one unit of
work; the repository's version check rejects a write based on a stale read.
"""

import logging
from uuid import UUID

from workshop.core.observability import audit
from workshop.domain.scheduling.entities.job_order import JobOrder
from workshop.domain.scheduling.repositories.unit_of_work import UnitOfWork
from workshop.domain.scheduling.services.lifecycle_policy import (
    LifecycleAction,
    action_for_transition,
)
from workshop.domain.scheduling.value_objects.enums import (
    JobItemStatus,
    JobStatus,
    QIStatus,
)
from workshop.domain.scheduling.value_objects.user_profile import Actor
from workshop.domain.scheduling.value_objects.work_items import JobItem, Part
from workshop.domain.shared.exceptions import InvalidTransition

from .base_service import ApplicationServiceBase

logger = logging.getLogger(__name__)


class JobOrderLifecycleService(ApplicationServiceBase):
    """Status transitions, QI resolution, release and work-content edits."""

    def transition_status(
        self,
        actor: Actor,
        job_id: UUID,
        new_status: JobStatus,
        remarks: str | None = None,
        reason: str | None = None,
    ) -> JobOrder:
        """
        Move a job order to ``new_status``.

        Setting the status a job already has is a no-op, so a client retry
        does not apply twice.

        Args:
            actor: Acting user; the role must allow the implied operation
            job_id: Job order to change
            new_status: Target status
            remarks: Required for HoldCustomer and Sublet
            reason: Free-form reason for the audit trail

        Returns:
            The updated job order

        Raises:
            Forbidden: If the role may not perform this transition
            InvalidTransition: If the transition is not in the table
            MissingRemarks: If HoldCustomer/Sublet is entered without remarks
            PreconditionFailed: If the QI guard or another entry guard fails
            ConflictError: If resuming OnGoing and the slot was taken
            DailyLimitExceeded: If resuming OnGoing would pass the daily limit
            NotFound: If the job does not exist
        """
        new_status = JobStatus(new_status)
        with self._uow_factory() as uow:
            job = uow.job_orders.get(job_id)
            self.authorize(actor, action_for_transition(job.status, new_status))
            old_status = self._apply(uow, actor, job, new_status, remarks, reason)
        if old_status is not None:
            self._log_transition(actor, job, old_status, reason)
        return job

    def submit_for_qi(self, actor: Actor, job_id: UUID) -> JobOrder:
        """
        Submit an OnGoing job for quality inspection.

        Raises:
            PreconditionFailed: If a task is unfinished or a part unavailable
            InvalidTransition: If the job is not OnGoing
        """
        return self._resolve(
            actor,
            job_id,
            LifecycleAction.SUBMIT_FOR_QI,
            {JobStatus.ON_GOING},
            JobStatus.QUALITY_INSPECTION,
            "Submitted for quality inspection",
        )

    def approve_qi(self, actor: Actor, job_id: UUID) -> JobOrder:
        """Approve a pending inspection; the job moves to ForRelease."""
        return self._resolve(
            actor,
            job_id,
            LifecycleAction.APPROVE_QI,
            {JobStatus.QUALITY_INSPECTION},
            JobStatus.FOR_RELEASE,
            "Quality inspection approved",
        )

    def reject_qi(
        self, actor: Actor, job_id: UUID, reason: str | None = None
    ) -> JobOrder:
        """Reject a pending inspection; the job returns to Unassigned for replotting."""
        return self._resolve(
            actor,
            job_id,
            LifecycleAction.REJECT_QI,
            {JobStatus.QUALITY_INSPECTION},
            JobStatus.UNASSIGNED,
            reason or "Quality inspection rejected",
        )

    def complete_job(self, actor: Actor, job_id: UUID, claimed: bool = True) -> JobOrder:
        """
        Release resolution.

        ForRelease goes to Complete when the customer claims the vehicle and
        to FinishedUnclaimed otherwise; FinishedUnclaimed goes to Complete
        once claimed.

        Raises:
            InvalidTransition: From any other status, or when an unclaimed
                FinishedUnclaimed job is completed again
        """
        self.authorize(actor, LifecycleAction.COMPLETE_JOB)
        with self._uow_factory() as uow:
            job = uow.job_orders.get(job_id)
            if job.status is JobStatus.FOR_RELEASE:
                target = (
                    JobStatus.COMPLETE if claimed else JobStatus.FINISHED_UNCLAIMED
                )
            elif job.status is JobStatus.FINISHED_UNCLAIMED and claimed:
                target = JobStatus.COMPLETE
            elif job.status is JobStatus.COMPLETE and claimed:
                return job
            else:
                raise InvalidTransition(
                    job.id,
                    job.status.value,
                    JobStatus.COMPLETE.value
                    if claimed
                    else JobStatus.FINISHED_UNCLAIMED.value,
                    "only released jobs can be completed",
                )
            reason = "Claimed by customer" if claimed else "Not yet claimed"
            old_status = self._apply(uow, actor, job, target, None, reason)
        if old_status is not None:
            self._log_transition(actor, job, old_status, reason)
        return job

    def redo_job(self, actor: Actor, job_id: UUID, reason: str | None = None) -> JobOrder:
        """Send a ForRelease job back to quality inspection for rework."""
        return self._resolve(
            actor,
            job_id,
            LifecycleAction.REDO_JOB,
            {JobStatus.FOR_RELEASE},
            JobStatus.QUALITY_INSPECTION,
            reason or "Redo requested",
        )

    def update_parts(self, actor: Actor, job_id: UUID, parts: list[Part]) -> JobOrder:
        """
        Replace a job's parts and apply the parts-availability rule.

        A newly unavailable part sends an active job to WaitingParts and
        frees its slot; all parts available again sends a WaitingParts job
        to Unassigned with its technician and time cleared.
        """
        self.authorize(actor, LifecycleAction.EDIT_WORK)
        with self._uow_factory() as uow:
            job = uow.job_orders.get(job_id)
            old_status = job.status
            changed = job.update_parts(parts, actor.id)
            self._persist(uow, job)
        if changed:
            self._log_transition(actor, job, old_status, "Parts availability changed")
        return job

    def update_tasks(
        self, actor: Actor, job_id: UUID, job_list: list[JobItem]
    ) -> JobOrder:
        self.authorize(actor, LifecycleAction.EDIT_WORK)
        with self._uow_factory() as uow:
            job = uow.job_orders.get(job_id)
            job.update_tasks(job_list)
            self._persist(uow, job)
        return job

    def set_task_status(
        self, actor: Actor, job_id: UUID, index: int, status: JobItemStatus
    ) -> JobOrder:
        """
        Mark one task finished or unfinished.

        Technicians tick tasks off while working, so the QI guard can pass
        without replacing the whole task list.

        Raises:
            ValidationError: If the job has no task at ``index``
            InvalidTransition: If the job is Complete
        """
        self.authorize(actor, LifecycleAction.UPDATE_TASK)
        with self._uow_factory() as uow:
            job = uow.job_orders.get(job_id)
            job.set_task_status(index, JobItemStatus(status))
            self._persist(uow, job)
        audit(
            "job_order.task_status_set",
            actor.id,
            job_id=job.id,
            job_number=job.job_number,
            task=job.job_list[index].description,
            status=status,
        )
        return job

    def toggle_important(self, actor: Actor, job_id: UUID) -> JobOrder:
        self.authorize(actor, LifecycleAction.EDIT_WORK)
        with self._uow_factory() as uow:
            job = uow.job_orders.get(job_id)
            job.toggle_important()
            self._persist(uow, job)
        audit(
            "job_order.importance_toggled",
            actor.id,
            job_id=job.id,
            job_number=job.job_number,
            is_important=job.is_important,
        )
        return job

    def _resolve(
        self,
        actor: Actor,
        job_id: UUID,
        action: LifecycleAction,
        allowed_from: set[JobStatus],
        target: JobStatus,
        reason: str,
    ) -> JobOrder:
        self.authorize(actor, action)
        with self._uow_factory() as uow:
            job = uow.job_orders.get(job_id)
            if job.status not in allowed_from:
                raise InvalidTransition(
                    job.id,
                    job.status.value,
                    target.value,
                    f"{action.value} requires status "
                    + "/".join(sorted(s.value for s in allowed_from)),
                )
            if (
                action is LifecycleAction.APPROVE_QI
                and job.qi_status is not QIStatus.PENDING
            ):
                raise InvalidTransition(
                    job.id, job.status.value, target.value, "inspection is not pending"
                )
            old_status = self._apply(uow, actor, job, target, None, reason)
        if old_status is not None:
            self._log_transition(actor, job, old_status, reason)
        return job

    def _apply(
        self,
        uow: UnitOfWork,
        actor: Actor,
        job: JobOrder,
        new_status: JobStatus,
        remarks: str | None,
        reason: str | None,
    ) -> JobStatus | None:
        old_status = job.status
        if not job.change_status(new_status, actor.id, remarks, reason):
            return None
        if job.occupies_slot and not old_status.occupies_slot:
            # Resuming work: the slot must still be free and within the daily limit
            self.ensure_placeable(
                uow,
                job,
                job.assigned_technician,  # type: ignore[arg-type]
                job.date,
                job.time_range,
            )
        self._persist(uow, job)
        return old_status

    def _persist(self, uow: UnitOfWork, job: JobOrder) -> None:
        uow.job_orders.save(job)
        self.sync_reservation(uow, job)
        uow.collect(job)

    def _log_transition(
        self, actor: Actor, job: JobOrder, old_status: JobStatus, reason: str | None
    ) -> None:
        logger.info(
            "Job order %s moved %s -> %s",
            job.job_number,
            old_status.value,
            job.status.value,
        )
        audit(
            "job_order.status_changed",
            actor.id,
            job_id=job.id,
            job_number=job.job_number,
            old_status=old_status,
            new_status=job.status,
            reason=reason,
        )
