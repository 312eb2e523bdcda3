"""
Unit tests for the JobOrder aggregate.
"""

import re
from uuid import uuid4

import pytest

from workshop.domain.scheduling.entities.job_order import JobOrder
from workshop.domain.scheduling.events.domain_events import (
    JobOrderCarriedOver,
    JobOrderCreated,
    JobOrderPlotted,
    StatusChanged,
)
from workshop.domain.scheduling.value_objects.enums import (
    JobItemStatus,
    JobStatus,
    QIStatus,
    SourceType,
)
from workshop.domain.scheduling.value_objects.time_range import TimeRange
from workshop.domain.shared.exceptions import (
    InvalidTransition,
    MissingRemarks,
    PreconditionFailed,
    ValidationError,
)
from workshop.tests.factories import (
    MONDAY,
    TUESDAY,
    JobOrderFactory,
    available_parts,
    finished_tasks,
    unavailable_parts,
    unfinished_tasks,
)


@pytest.fixture
def technician_id():
    return uuid4()


@pytest.fixture
def on_going(technician_id) -> JobOrder:
    return JobOrderFactory.create(
        technician_id=technician_id,
        start="09:00",
        end="10:00",
        job_list=finished_tasks(),
    )


class TestJobOrderCreation:
    """Test intake status derivation."""

    def test_without_slot_is_unassigned(self):
        job = JobOrderFactory.create()

        assert job.status is JobStatus.UNASSIGNED
        assert job.assigned_technician is None
        assert not job.time_range.is_set
        assert job.is_valid()

    def test_with_slot_is_on_going(self, on_going, technician_id):
        assert on_going.status is JobStatus.ON_GOING
        assert on_going.assigned_technician == technician_id
        assert on_going.occupies_slot

    def test_unavailable_part_starts_waiting_parts(self, technician_id):
        job = JobOrderFactory.create(
            technician_id=technician_id,
            start="09:00",
            end="10:00",
            parts=available_parts("Filter") + unavailable_parts("Pads"),
        )

        assert job.status is JobStatus.WAITING_PARTS
        assert not job.occupies_slot
        assert job.unavailable_parts == ["Pads"]

    def test_technician_without_slot_is_unassigned(self, technician_id):
        job = JobOrderFactory.create(technician_id=technician_id)

        assert job.status is JobStatus.UNASSIGNED
        assert job.assigned_technician is None

    def test_identifiers_normalized(self):
        job = JobOrderFactory.create(job_number=" jo-77 ", plate_number="abc 123")

        assert job.job_number == "JO-77"
        assert job.plate_number == "ABC 123"

    def test_records_created_event(self):
        job = JobOrder.create("JO-1", "XYZ999", uuid4(), MONDAY)

        (event,) = job.get_domain_events()
        assert isinstance(event, JobOrderCreated)
        assert event.status is JobStatus.UNASSIGNED
        assert event.source_type == "direct"
        assert job.original_created_date == MONDAY


class TestChangeStatus:
    """Test the status change guards."""

    def test_same_status_is_noop(self, on_going):
        assert on_going.change_status(JobStatus.ON_GOING) is False
        assert on_going.get_domain_events() == []

    def test_records_status_changed(self, on_going):
        actor = uuid4()

        assert on_going.change_status(JobStatus.HOLD_WARRANTY, actor, reason="Claim")

        (event,) = on_going.get_domain_events()
        assert isinstance(event, StatusChanged)
        assert event.old_status is JobStatus.ON_GOING
        assert event.new_status is JobStatus.HOLD_WARRANTY
        assert event.actor_id == actor
        assert event.reason == "Claim"

    def test_transition_outside_table(self, on_going):
        with pytest.raises(InvalidTransition, match="from OG to CP"):
            on_going.change_status(JobStatus.COMPLETE)

        assert on_going.status is JobStatus.ON_GOING

    @pytest.mark.parametrize("status", [JobStatus.HOLD_CUSTOMER, JobStatus.SUBLET])
    @pytest.mark.parametrize("remarks", [None, "", "   "])
    def test_remarks_required(self, on_going, status, remarks):
        with pytest.raises(MissingRemarks):
            on_going.change_status(status, remarks=remarks)

        assert on_going.status is JobStatus.ON_GOING

    def test_remarks_stored(self, on_going):
        on_going.change_status(JobStatus.HOLD_CUSTOMER, remarks="  Awaiting approval ")

        assert on_going.hold_customer_remarks == "Awaiting approval"

        on_going.change_status(JobStatus.UNASSIGNED)
        on_going.change_status(JobStatus.SUBLET, remarks="Paint shop")

        assert on_going.sublet_remarks == "Paint shop"

    def test_hold_keeps_slot_fields_but_releases_occupancy(self, on_going):
        on_going.change_status(JobStatus.HOLD_INSURANCE)

        assert on_going.assigned_technician is not None
        assert not on_going.occupies_slot

    def test_unassigned_clears_slot(self, on_going):
        on_going.change_status(JobStatus.UNASSIGNED)

        assert on_going.assigned_technician is None
        assert on_going.time_range == TimeRange.unset()
        assert on_going.is_valid()

    def test_on_going_requires_slot(self):
        job = JobOrderFactory.create()

        with pytest.raises(PreconditionFailed) as exc_info:
            job.change_status(JobStatus.ON_GOING)

        assert exc_info.value.precondition == "assignment_required"

    def test_resume_from_hold_with_slot(self, on_going):
        on_going.change_status(JobStatus.HOLD_FORD)

        assert on_going.change_status(JobStatus.ON_GOING)
        assert on_going.occupies_slot

    def test_waiting_parts_requires_missing_part(self, on_going):
        with pytest.raises(PreconditionFailed) as exc_info:
            on_going.change_status(JobStatus.WAITING_PARTS)

        assert exc_info.value.precondition == "parts_unavailable"

    def test_on_going_to_waiting_parts_records_end_time(self, technician_id):
        job = JobOrderFactory.create(
            technician_id=technician_id, start="09:00", end="10:00"
        )
        job.parts = unavailable_parts()

        job.change_status(JobStatus.WAITING_PARTS)

        assert re.fullmatch(r"\d{2}:\d{2}", job.actual_end_time)


class TestQualityInspection:
    """Test the QI guard and the qi_status bookkeeping."""

    def test_submit_requires_finished_tasks(self, technician_id):
        job = JobOrderFactory.create(
            technician_id=technician_id,
            start="09:00",
            end="10:00",
            job_list=finished_tasks("Oil") + unfinished_tasks("Brakes"),
        )

        with pytest.raises(PreconditionFailed) as exc_info:
            job.change_status(JobStatus.QUALITY_INSPECTION)

        assert exc_info.value.precondition == "qi_submission"
        assert exc_info.value.details["unfinished_tasks"] == ["Brakes"]
        assert job.qi_status is None

    def test_submit_sets_pending(self, on_going):
        on_going.change_status(JobStatus.QUALITY_INSPECTION)

        assert on_going.qi_status is QIStatus.PENDING
        assert on_going.occupies_slot

    def test_approve_sets_approved(self, on_going):
        on_going.change_status(JobStatus.QUALITY_INSPECTION)
        on_going.change_status(JobStatus.FOR_RELEASE)

        assert on_going.qi_status is QIStatus.APPROVED

    def test_reject_sets_rejected_and_frees_slot(self, on_going):
        on_going.change_status(JobStatus.QUALITY_INSPECTION)
        on_going.change_status(JobStatus.UNASSIGNED)

        assert on_going.qi_status is QIStatus.REJECTED
        assert on_going.assigned_technician is None

    def test_redo_returns_to_pending(self, on_going):
        on_going.change_status(JobStatus.QUALITY_INSPECTION)
        on_going.change_status(JobStatus.FOR_RELEASE)
        on_going.change_status(JobStatus.QUALITY_INSPECTION)

        assert on_going.qi_status is QIStatus.PENDING


class TestWorkContent:
    """Test parts and task edits."""

    def test_missing_part_moves_to_waiting_parts(self, on_going):
        changed = on_going.update_parts(unavailable_parts("Brake pads"))

        assert changed is True
        assert on_going.status is JobStatus.WAITING_PARTS
        assert on_going.actual_end_time is not None

    def test_parts_arrival_moves_to_unassigned(self, on_going):
        on_going.update_parts(unavailable_parts("Brake pads"))

        changed = on_going.update_parts(available_parts("Brake pads"))

        assert changed is True
        assert on_going.status is JobStatus.UNASSIGNED
        assert on_going.assigned_technician is None

    def test_hold_keeps_status_when_parts_change(self, on_going):
        on_going.change_status(JobStatus.HOLD_WARRANTY)

        assert on_going.update_parts(unavailable_parts()) is False
        assert on_going.status is JobStatus.HOLD_WARRANTY

    def test_available_parts_on_active_job_change_nothing(self, on_going):
        assert on_going.update_parts(available_parts("Filter", "Gasket")) is False
        assert len(on_going.parts) == 2

    def test_set_task_status(self):
        job = JobOrderFactory.create(job_list=unfinished_tasks("A", "B"))

        job.set_task_status(1, JobItemStatus.FINISHED)

        assert job.unfinished_tasks == ["A"]

    def test_set_task_status_out_of_range(self):
        job = JobOrderFactory.create(job_list=unfinished_tasks("A"))

        with pytest.raises(ValidationError, match="job_list"):
            job.set_task_status(3, JobItemStatus.FINISHED)

    def test_toggle_important(self):
        job = JobOrderFactory.create()

        assert job.toggle_important() is True
        assert job.toggle_important() is False

    def test_complete_job_is_frozen(self, on_going):
        on_going.change_status(JobStatus.QUALITY_INSPECTION)
        on_going.change_status(JobStatus.FOR_RELEASE)
        on_going.change_status(JobStatus.COMPLETE)

        with pytest.raises(InvalidTransition, match="complete jobs cannot be modified"):
            on_going.update_tasks(unfinished_tasks())
        with pytest.raises(InvalidTransition):
            on_going.update_parts(unavailable_parts())


class TestPlotting:
    """Test plot and reassign on the aggregate."""

    def test_plot_unassigned(self, technician_id):
        job = JobOrderFactory.create()
        slot = TimeRange(start="13:00", end="14:30")

        job.plot(technician_id, TUESDAY, slot)

        assert job.status is JobStatus.ON_GOING
        assert job.date == TUESDAY
        assert job.time_range == slot
        kinds = [type(e) for e in job.get_domain_events()]
        assert kinds == [StatusChanged, JobOrderPlotted]

    def test_plot_requires_unassigned(self, on_going, technician_id):
        with pytest.raises(InvalidTransition, match="only unassigned jobs"):
            on_going.plot(technician_id, MONDAY, TimeRange(start="13:00", end="14:00"))

    def test_plot_clears_carry_over_flag(self, technician_id):
        job = JobOrderFactory.create().carry_over_to(TUESDAY)

        job.plot(technician_id, TUESDAY, TimeRange(start="07:00", end="08:00"))

        assert not job.carried_over

    def test_plot_can_keep_carry_over_flag(self, technician_id):
        job = JobOrderFactory.create().carry_over_to(TUESDAY)

        job.plot(
            technician_id,
            TUESDAY,
            TimeRange(start="07:00", end="08:00"),
            clear_carry_over=False,
        )

        assert job.carried_over

    def test_reassign_keeps_status(self, on_going, technician_id):
        other = uuid4()
        on_going.change_status(JobStatus.QUALITY_INSPECTION)
        on_going.clear_domain_events()

        on_going.reassign(other, MONDAY, TimeRange(start="15:00", end="16:00"))

        assert on_going.status is JobStatus.QUALITY_INSPECTION
        assert on_going.assigned_technician == other
        (event,) = on_going.get_domain_events()
        assert event.reassigned
        assert event.previous_technician_id == technician_id

    def test_reassign_unassigned_fails(self, technician_id):
        job = JobOrderFactory.create()

        with pytest.raises(InvalidTransition, match="must be plotted"):
            job.reassign(technician_id, MONDAY, TimeRange(start="09:00", end="10:00"))


class TestCarryOver:
    """Test building the next-day continuation."""

    def test_continuation_fields(self, on_going):
        on_going.is_important = True

        continuation = on_going.carry_over_to(TUESDAY)

        assert continuation.id != on_going.id
        assert continuation.job_number == on_going.job_number
        assert continuation.date == TUESDAY
        assert continuation.status is JobStatus.UNASSIGNED
        assert continuation.assigned_technician is None
        assert not continuation.time_range.is_set
        assert continuation.carried_over
        assert continuation.source_type is SourceType.CARRY_OVER
        assert continuation.is_important
        assert continuation.origin_job_id == on_going.id
        assert continuation.original_created_date == MONDAY
        assert continuation.version == 0

    def test_source_untouched(self, on_going):
        before = on_going.model_dump()

        on_going.carry_over_to(TUESDAY)

        assert on_going.model_dump() == before

    def test_missing_parts_continue_waiting(self, technician_id):
        job = JobOrderFactory.create(parts=unavailable_parts())

        assert job.carry_over_to(TUESDAY).status is JobStatus.WAITING_PARTS

    def test_origin_links_accumulate(self, on_going):
        first = on_going.carry_over_to(TUESDAY)
        second = first.carry_over_to(TUESDAY.replace(day=5))

        assert [link.job_id for link in second.origin_links] == [on_going.id, first.id]
        assert second.origin_links[0].status is JobStatus.ON_GOING
        assert second.original_created_date == MONDAY

    def test_records_carried_over_event(self, on_going):
        continuation = on_going.carry_over_to(TUESDAY)

        (event,) = continuation.get_domain_events()
        assert isinstance(event, JobOrderCarriedOver)
        assert event.source_job_id == on_going.id
        assert (event.from_date, event.to_date) == (MONDAY, TUESDAY)
