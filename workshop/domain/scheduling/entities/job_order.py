"""Job order aggregate root: the unit of scheduled repair work."""

from datetime import date, datetime
from uuid import UUID, uuid4

from pydantic import Field, field_validator

from ...shared.base import AggregateRoot, utc_now
from ...shared.exceptions import (
    InvalidTransition,
    MissingRemarks,
    PreconditionFailed,
    ValidationError,
)
from ..events.domain_events import (
    JobOrderCarriedOver,
    JobOrderCreated,
    JobOrderPlotted,
    StatusChanged,
)
from ..value_objects.enums import JobItemStatus, JobStatus, QIStatus, SourceType
from ..value_objects.time_range import TimeRange
from ..value_objects.work_items import JobItem, OriginLink, Part


class JobOrder(AggregateRoot):
    """
    Job order aggregate root representing repair work on one vehicle for one day.

    A job order owns its work content (tasks and parts), its lifecycle status
    and its slot assignment. Every status change goes through ``change_status``
    so the transition table, the remarks requirement and the QI guard are
    enforced in one place. Scheduling fields are only written through
    ``plot``/``reassign``, which the scheduler calls after its conflict checks.
    """

    job_number: str = Field(min_length=1, max_length=50)
    plate_number: str = Field(min_length=1, max_length=20)
    vin: str = Field(default="", max_length=17)

    assigned_technician: UUID | None = None
    service_advisor: UUID | None = None
    created_by: UUID

    date: date
    time_range: TimeRange = Field(default_factory=TimeRange.unset)
    actual_end_time: str | None = None

    job_list: list[JobItem] = Field(default_factory=list)
    parts: list[Part] = Field(default_factory=list)

    status: JobStatus = JobStatus.UNASSIGNED
    qi_status: QIStatus | None = None
    hold_customer_remarks: str | None = None
    sublet_remarks: str | None = None

    source_type: SourceType = SourceType.DIRECT
    carried_over: bool = False
    original_created_date: date | None = None
    is_important: bool = False
    origin_job_id: UUID | None = None
    origin_links: list[OriginLink] = Field(default_factory=list)

    # Optimistic concurrency token, bumped by the repository on every save
    version: int = 0

    @field_validator("job_number", "plate_number", "vin")
    @classmethod
    def _normalize_identifier(cls, v: str) -> str:
        return v.strip().upper()

    @classmethod
    def create(
        cls,
        job_number: str,
        plate_number: str,
        created_by: UUID,
        on_date: date,
        vin: str = "",
        job_list: list[JobItem] | None = None,
        parts: list[Part] | None = None,
        assigned_technician: UUID | None = None,
        time_range: TimeRange | None = None,
        service_advisor: UUID | None = None,
        source_type: SourceType = SourceType.DIRECT,
        is_important: bool = False,
    ) -> "JobOrder":
        """
        Factory method for intake (direct or appointment conversion).

        The initial status follows the parts rule: WaitingParts when any part
        is unavailable, otherwise OnGoing when a technician and slot are
        given, otherwise Unassigned.

        Args:
            job_number: Human-facing job number
            plate_number: Vehicle plate
            created_by: Creating actor
            on_date: Business day the job occupies
            vin: Vehicle identification number
            job_list: Tasks to perform
            parts: Parts required
            assigned_technician: Technician, when plotted at intake
            time_range: Slot, when plotted at intake
            service_advisor: Responsible service advisor
            source_type: Intake path
            is_important: Priority flag

        Returns:
            New job order with a JobOrderCreated event recorded
        """
        parts = list(parts or [])
        time_range = time_range or TimeRange.unset()
        if any(not part.is_available for part in parts):
            status = JobStatus.WAITING_PARTS
        elif assigned_technician is not None and time_range.is_set:
            status = JobStatus.ON_GOING
        else:
            status = JobStatus.UNASSIGNED
            assigned_technician = None
            time_range = TimeRange.unset()

        job = cls(
            job_number=job_number,
            plate_number=plate_number,
            vin=vin,
            created_by=created_by,
            date=on_date,
            job_list=list(job_list or []),
            parts=parts,
            assigned_technician=assigned_technician,
            time_range=time_range,
            service_advisor=service_advisor,
            status=status,
            source_type=source_type,
            original_created_date=on_date,
            is_important=is_important,
        )
        job.add_domain_event(
            JobOrderCreated(
                aggregate_id=job.id,
                job_id=job.id,
                job_number=job.job_number,
                date=job.date,
                status=job.status,
                source_type=job.source_type.value,
            )
        )
        return job

    def is_valid(self) -> bool:
        """Validate the assignment invariant."""
        if self.status is JobStatus.UNASSIGNED:
            return self.assigned_technician is None and not self.time_range.is_set
        if self.status.occupies_slot:
            return self.assigned_technician is not None and self.time_range.is_set
        return True

    @property
    def is_complete(self) -> bool:
        return self.status.is_terminal

    @property
    def is_plotted(self) -> bool:
        return self.assigned_technician is not None and self.time_range.is_set

    @property
    def occupies_slot(self) -> bool:
        """Check if the job currently holds a technician slot on the grid."""
        return self.status.occupies_slot and self.is_plotted

    @property
    def all_tasks_finished(self) -> bool:
        return all(item.is_finished for item in self.job_list)

    @property
    def all_parts_available(self) -> bool:
        return all(part.is_available for part in self.parts)

    @property
    def unavailable_parts(self) -> list[str]:
        return [part.name for part in self.parts if not part.is_available]

    @property
    def unfinished_tasks(self) -> list[str]:
        return [item.description for item in self.job_list if not item.is_finished]

    def change_status(
        self,
        new_status: JobStatus,
        actor_id: UUID | None = None,
        remarks: str | None = None,
        reason: str | None = None,
    ) -> bool:
        """
        Change job order status.

        Args:
            new_status: Target status
            actor_id: Actor performing the change
            remarks: Required text for HoldCustomer and Sublet
            reason: Free-form reason recorded on the event

        Returns:
            False when the job is already in ``new_status`` (no-op)

        Raises:
            InvalidTransition: If the transition is not in the table
            MissingRemarks: If HoldCustomer/Sublet is entered without remarks
            PreconditionFailed: If the target status' guard does not hold
        """
        old_status = self.status
        if new_status == old_status:
            return False

        if not old_status.can_transition_to(new_status):
            raise InvalidTransition(self.id, old_status.value, new_status.value)

        self._check_entry_guard(new_status, remarks)

        if new_status is JobStatus.HOLD_CUSTOMER:
            self.hold_customer_remarks = remarks.strip()  # type: ignore[union-attr]
        elif new_status is JobStatus.SUBLET:
            self.sublet_remarks = remarks.strip()  # type: ignore[union-attr]

        if new_status is JobStatus.QUALITY_INSPECTION:
            self.qi_status = QIStatus.PENDING
        elif old_status is JobStatus.QUALITY_INSPECTION:
            if new_status is JobStatus.FOR_RELEASE:
                self.qi_status = QIStatus.APPROVED
            elif new_status is JobStatus.UNASSIGNED:
                self.qi_status = QIStatus.REJECTED

        if old_status is JobStatus.ON_GOING and new_status is JobStatus.WAITING_PARTS:
            self.actual_end_time = datetime.now().strftime("%H:%M")

        if new_status is JobStatus.UNASSIGNED:
            self.assigned_technician = None
            self.time_range = TimeRange.unset()

        self.status = new_status
        self.mark_updated()
        self.add_domain_event(
            StatusChanged(
                aggregate_id=self.id,
                job_id=self.id,
                job_number=self.job_number,
                old_status=old_status,
                new_status=new_status,
                actor_id=actor_id,
                reason=reason,
            )
        )
        return True

    def _check_entry_guard(self, new_status: JobStatus, remarks: str | None) -> None:
        if new_status.requires_remarks and not (remarks and remarks.strip()):
            field_name = (
                "hold_customer_remarks"
                if new_status is JobStatus.HOLD_CUSTOMER
                else "sublet_remarks"
            )
            raise MissingRemarks(new_status.value, field_name)

        if new_status is JobStatus.QUALITY_INSPECTION:
            if not self.all_tasks_finished or not self.all_parts_available:
                raise PreconditionFailed(
                    f"Job {self.job_number} cannot be submitted for quality inspection",
                    "qi_submission",
                    {
                        "unfinished_tasks": self.unfinished_tasks,
                        "unavailable_parts": self.unavailable_parts,
                    },
                )

        if new_status is JobStatus.WAITING_PARTS and self.all_parts_available:
            raise PreconditionFailed(
                f"Job {self.job_number} has no unavailable parts",
                "parts_unavailable",
            )

        if new_status is JobStatus.ON_GOING:
            if not self.all_parts_available:
                raise PreconditionFailed(
                    f"Job {self.job_number} is waiting for parts",
                    "parts_available",
                    {"unavailable_parts": self.unavailable_parts},
                )
            if not self.is_plotted:
                raise PreconditionFailed(
                    f"Job {self.job_number} has no technician slot; plot it first",
                    "assignment_required",
                )

    def update_parts(self, parts: list[Part], actor_id: UUID | None = None) -> bool:
        """
        Replace the parts list and re-derive status from availability.

        An active job with a newly unavailable part moves to WaitingParts.
        A WaitingParts job whose parts are all available moves to Unassigned
        and loses its slot. Holds keep their manually chosen status.

        Returns:
            True if the status changed
        """
        self._ensure_editable()
        self.parts = list(parts)
        self.mark_updated()

        if not self.all_parts_available and self.status in {
            JobStatus.ON_GOING,
            JobStatus.UNASSIGNED,
            JobStatus.QUALITY_INSPECTION,
            JobStatus.FOR_RELEASE,
        }:
            return self.change_status(
                JobStatus.WAITING_PARTS, actor_id, reason="Parts unavailable"
            )
        if self.all_parts_available and self.status is JobStatus.WAITING_PARTS:
            return self.change_status(
                JobStatus.UNASSIGNED, actor_id, reason="Parts available"
            )
        return False

    def update_tasks(self, job_list: list[JobItem]) -> None:
        self._ensure_editable()
        self.job_list = list(job_list)
        self.mark_updated()

    def set_task_status(self, index: int, status: JobItemStatus) -> None:
        self._ensure_editable()
        if index < 0 or index >= len(self.job_list):
            raise ValidationError(
                "job_list", index, f"job {self.job_number} has no task at this position"
            )
        items = list(self.job_list)
        items[index] = JobItem(description=items[index].description, status=status)
        self.job_list = items
        self.mark_updated()

    def toggle_important(self) -> bool:
        self._ensure_editable()
        self.is_important = not self.is_important
        self.mark_updated()
        return self.is_important

    def plot(
        self,
        technician_id: UUID,
        on_date: date,
        time_range: TimeRange,
        actor_id: UUID | None = None,
        clear_carry_over: bool = True,
    ) -> None:
        """
        Place an unassigned job on a technician's grid and start work.

        Raises:
            InvalidTransition: If the job is not Unassigned
            PreconditionFailed: If parts are missing
        """
        if self.status is not JobStatus.UNASSIGNED:
            raise InvalidTransition(
                self.id,
                self.status.value,
                JobStatus.ON_GOING.value,
                "only unassigned jobs can be plotted",
            )
        if not self.all_parts_available:
            raise PreconditionFailed(
                f"Job {self.job_number} is waiting for parts",
                "parts_available",
                {"unavailable_parts": self.unavailable_parts},
            )

        self.assigned_technician = technician_id
        self.date = on_date
        self.time_range = time_range
        if clear_carry_over:
            self.carried_over = False
        self.change_status(JobStatus.ON_GOING, actor_id, reason="Plotted")
        self.add_domain_event(
            JobOrderPlotted(
                aggregate_id=self.id,
                job_id=self.id,
                job_number=self.job_number,
                technician_id=technician_id,
                date=on_date,
                start=time_range.start,
                end=time_range.end,
            )
        )

    def reassign(
        self,
        technician_id: UUID,
        on_date: date,
        time_range: TimeRange,
    ) -> None:
        """
        Move the job to another technician, day or slot without changing status.

        Raises:
            InvalidTransition: If the job is Complete or Unassigned
        """
        self._ensure_editable()
        if self.status is JobStatus.UNASSIGNED:
            raise InvalidTransition(
                self.id,
                self.status.value,
                self.status.value,
                "unassigned jobs must be plotted",
            )
        previous_technician = self.assigned_technician
        self.assigned_technician = technician_id
        self.date = on_date
        self.time_range = time_range
        self.mark_updated()
        self.add_domain_event(
            JobOrderPlotted(
                aggregate_id=self.id,
                job_id=self.id,
                job_number=self.job_number,
                technician_id=technician_id,
                date=on_date,
                start=time_range.start,
                end=time_range.end,
                previous_technician_id=previous_technician,
                reassigned=True,
            )
        )

    def carry_over_to(self, next_date: date) -> "JobOrder":
        """
        Create the continuation of this job on the next business day.

        The source is left untouched. The continuation has no technician or
        slot and restarts as Unassigned, or WaitingParts while parts are
        still missing.

        Args:
            next_date: Business day the work rolls onto

        Returns:
            New job order linked back to this one
        """
        status = (
            JobStatus.UNASSIGNED if self.all_parts_available else JobStatus.WAITING_PARTS
        )
        continuation = JobOrder(
            id=uuid4(),
            created_at=utc_now(),
            job_number=self.job_number,
            plate_number=self.plate_number,
            vin=self.vin,
            created_by=self.created_by,
            service_advisor=self.service_advisor,
            date=next_date,
            job_list=list(self.job_list),
            parts=list(self.parts),
            status=status,
            source_type=SourceType.CARRY_OVER,
            carried_over=True,
            original_created_date=self.original_created_date or self.date,
            is_important=self.is_important,
            origin_job_id=self.id,
            origin_links=[
                *self.origin_links,
                OriginLink(job_id=self.id, date=self.date, status=self.status),
            ],
        )
        continuation.add_domain_event(
            JobOrderCarriedOver(
                aggregate_id=continuation.id,
                job_id=continuation.id,
                job_number=continuation.job_number,
                source_job_id=self.id,
                from_date=self.date,
                to_date=next_date,
            )
        )
        return continuation

    def _ensure_editable(self) -> None:
        if self.is_complete:
            raise InvalidTransition(
                self.id,
                self.status.value,
                self.status.value,
                "complete jobs cannot be modified",
            )
