"""
Tests for board queues and live statistics.
"""

from workshop.domain.scheduling.value_objects.enums import JobStatus
from workshop.tests.factories import MONDAY, unavailable_parts


class TestBoard:
    """Test the read-side board queries."""

    def test_queues_for_day(self, workshop, controller, plotted_job):
        unassigned = workshop.create_job_order(controller, "JO-50", "ABC123", MONDAY)
        important = workshop.create_job_order(
            controller, "JO-51", "ABC124", MONDAY, is_important=True
        )
        waiting = workshop.create_job_order(
            controller, "JO-52", "ABC125", MONDAY, parts=unavailable_parts()
        )
        inspected = plotted_job()
        workshop.submit_for_qi(controller, inspected.id)

        queues = workshop.get_queues(MONDAY)

        assert [j.id for j in queues.unassigned] == [important.id, unassigned.id]
        assert [j.id for j in queues.waiting_parts] == [waiting.id]
        assert [j.id for j in queues.quality_inspection] == [inspected.id]

    def test_toggle_reorders_queue(self, workshop, controller):
        first = workshop.create_job_order(controller, "JO-53", "ABC123", MONDAY)
        second = workshop.create_job_order(controller, "JO-54", "ABC124", MONDAY)

        workshop.toggle_important(controller, second.id)

        assert [j.id for j in workshop.get_queues(MONDAY).unassigned] == [
            second.id,
            first.id,
        ]

    def test_live_statistics(self, workshop, controller, plotted_job):
        plotted_job()
        held = plotted_job("10:00", "11:00")
        workshop.transition_status(controller, held.id, JobStatus.HOLD_WARRANTY)

        stats = workshop.get_statistics(MONDAY)

        assert stats.total_jobs == 2
        assert stats.on_going == 1
        assert stats.on_hold == 1
        assert stats.carried_over == 2
