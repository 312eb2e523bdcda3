"""
End-to-end scenarios through the WorkshopEngine facade.
"""

import pytest

from workshop.application import workshop_engine
from workshop.application.workshop_engine import WorkshopEngine
from workshop.core.config import settings
from workshop.domain.scheduling.value_objects.enums import JobStatus, QIStatus
from workshop.domain.scheduling.value_objects.time_grid import DEFAULT_GRID
from workshop.domain.shared.exceptions import (
    ConflictError,
    PreconditionFailed,
    SnapshotAlreadyExists,
)
from workshop.tests.factories import (
    MONDAY,
    TUESDAY,
    available_parts,
    finished_tasks,
    unavailable_parts,
    unfinished_tasks,
)


class TestWorkshopScenarios:
    """The reference workshop day, one scenario per test."""

    def test_parts_arrival_unassigns(self, workshop, controller, technician):
        job = workshop.create_job_order(
            controller,
            "JO-100",
            "PRT100",
            MONDAY,
            parts=unavailable_parts("Timing belt"),
            technician_id=technician.id,
            start="09:00",
            end="10:00",
        )
        assert job.status is JobStatus.WAITING_PARTS

        job = workshop.update_parts(controller, job.id, available_parts("Timing belt"))

        assert job.status is JobStatus.UNASSIGNED
        assert job.assigned_technician is None
        assert not job.time_range.is_set

    def test_overlapping_plot_conflicts(self, workshop, controller, technician, plotted_job):
        plotted_job("09:00", "10:30")
        job = workshop.create_job_order(controller, "JO-101", "OVR101", MONDAY)

        with pytest.raises(ConflictError):
            workshop.plot(controller, job.id, technician.id, MONDAY, "10:00", "11:00")

    def test_inspection_and_release(self, workshop, controller, plotted_job):
        job = plotted_job(job_list=finished_tasks("Oil", "Filter"))

        job = workshop.submit_for_qi(controller, job.id)
        assert (job.status, job.qi_status) == (
            JobStatus.QUALITY_INSPECTION,
            QIStatus.PENDING,
        )

        job = workshop.approve_qi(controller, job.id)
        assert job.status is JobStatus.FOR_RELEASE

    def test_unfinished_task_blocks_inspection(self, workshop, controller, plotted_job):
        job = plotted_job(job_list=finished_tasks("Oil") + unfinished_tasks("Brakes"))

        with pytest.raises(PreconditionFailed):
            workshop.submit_for_qi(controller, job.id)

    def test_end_of_day(self, workshop, controller, second_technician, plotted_job):
        for start, end in (("07:00", "08:00"), ("08:00", "09:00"), ("09:00", "10:00")):
            plotted_job(start, end)
        for start, end in (("07:00", "08:00"), ("08:00", "09:00")):
            job = plotted_job(start, end, technician_id=second_technician.id)
            workshop.submit_for_qi(controller, job.id)
            workshop.approve_qi(controller, job.id)
            workshop.complete_job(controller, job.id)
        workshop.create_job_order(
            controller, "JO-WAIT", "WPX001", MONDAY, parts=unavailable_parts()
        )

        snapshot = workshop.run_end_of_day_carry_over(controller, MONDAY)

        assert len(workshop.list_job_orders(TUESDAY)) == 4
        assert snapshot.statistics.total_jobs == 6
        assert snapshot.statistics.carried_over == 4

    def test_end_of_day_rerun(self, workshop, controller, plotted_job):
        plotted_job()
        workshop.run_end_of_day_carry_over(controller, MONDAY)
        jobs_before = len(workshop.list_job_orders(TUESDAY))

        with pytest.raises(SnapshotAlreadyExists):
            workshop.run_end_of_day_carry_over(controller, MONDAY)

        assert len(workshop.list_job_orders(TUESDAY)) == jobs_before


class TestEngineConstruction:
    """Test the engine factories."""

    def test_in_memory_engine(self, users, calendar, controller, technician):
        engine = WorkshopEngine.in_memory(users, calendar, DEFAULT_GRID)

        job = engine.create_job_order(
            controller,
            "JO-110",
            "MEM110",
            MONDAY,
            job_list=finished_tasks(),
            technician_id=technician.id,
            start="07:00",
            end="08:00",
        )

        assert engine.get_job_order(job.id).status is JobStatus.ON_GOING

    def test_separate_engines_do_not_share_state(self, users, calendar, controller):
        first = WorkshopEngine.in_memory(users, calendar)
        second = WorkshopEngine.in_memory(users, calendar)

        first.create_job_order(controller, "JO-111", "MEM111", MONDAY)

        assert second.list_job_orders(MONDAY) == []

    def test_from_settings_configures_logging(self, monkeypatch, users, controller):
        calls = []
        monkeypatch.setattr(workshop_engine, "setup_logging", lambda: calls.append(1))
        monkeypatch.setattr(settings, "DATABASE_URL", "sqlite://")

        engine = WorkshopEngine.from_settings(users)
        job = engine.create_job_order(controller, "JO-112", "SQL112", MONDAY)

        assert calls == [1]
        assert engine.get_job_order(job.id).status is JobStatus.UNASSIGNED
