"""
Unit tests for technician availability queries.
"""

from uuid import uuid4

import pytest

from workshop.domain.scheduling.entities.appointment import Appointment
from workshop.domain.scheduling.services.conflict_detector import ConflictDetector
from workshop.domain.scheduling.value_objects.time_range import TimeRange
from workshop.infrastructure.memory import (
    InMemoryAppointmentRepository,
    InMemoryJobOrderRepository,
    InMemoryStore,
)
from workshop.tests.factories import (
    MONDAY,
    TUESDAY,
    JobOrderFactory,
    unavailable_parts,
)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def job_orders(store):
    return InMemoryJobOrderRepository(store)


@pytest.fixture
def appointments(store):
    return InMemoryAppointmentRepository(store)


@pytest.fixture
def detector(job_orders, appointments, users):
    return ConflictDetector(job_orders, appointments, users)


@pytest.fixture
def book(job_orders, technician):
    """Store a job order occupying a slot for the lunch-break technician."""

    def make(start, end, technician_id=None, on_date=MONDAY, **kwargs):
        job = JobOrderFactory.create(
            technician_id=technician_id or technician.id,
            on_date=on_date,
            start=start,
            end=end,
            **kwargs,
        )
        return job_orders.create(job)

    return make


class TestFindConflicts:
    """Test conflict detection against jobs, appointments and breaks."""

    def test_overlap_with_job(self, detector, book, technician):
        job = book("09:00", "10:00")

        conflicts = detector.find_conflicts(
            technician.id, MONDAY, TimeRange(start="09:30", end="10:30")
        )

        assert conflicts == [
            {
                "type": "job_order",
                "id": str(job.id),
                "job_number": job.job_number,
                "plate_number": job.plate_number,
                "status": "OG",
                "start": "09:00",
                "end": "10:00",
            }
        ]

    def test_back_to_back_is_free(self, detector, book, technician):
        book("09:00", "10:00")

        assert not detector.has_conflict(technician.id, MONDAY, "10:00", "11:00")
        assert not detector.has_conflict(technician.id, MONDAY, "08:00", "09:00")

    def test_exclude_self(self, detector, book, technician):
        job = book("09:00", "10:00")

        assert not detector.has_conflict(
            technician.id, MONDAY, "09:00", "10:30", exclude_id=job.id
        )

    def test_other_day_and_technician_ignored(
        self, detector, book, technician, second_technician
    ):
        book("09:00", "10:00", on_date=TUESDAY)
        book("09:00", "10:00", technician_id=second_technician.id)

        assert not detector.has_conflict(technician.id, MONDAY, "09:00", "10:00")

    def test_non_occupying_job_ignored(self, detector, book, technician):
        job = book("09:00", "10:00", parts=unavailable_parts())

        assert job.assigned_technician == technician.id
        assert not detector.has_conflict(technician.id, MONDAY, "09:00", "10:00")

    def test_break_is_a_conflict(self, detector, technician):
        conflicts = detector.find_conflicts(
            technician.id, MONDAY, TimeRange(start="11:30", end="12:30")
        )

        assert [c["type"] for c in conflicts] == ["break"]
        assert conflicts[0]["description"] == "Lunch"

    def test_appointment_is_a_conflict(self, detector, appointments, technician):
        appointment = Appointment.book(
            "APT001", technician.id, MONDAY, TimeRange(start="14:00", end="15:00"), uuid4()
        )
        appointments.create(appointment)

        assert detector.has_conflict(technician.id, MONDAY, "14:30", "15:30")

        appointment.mark_no_show()
        appointments.save(appointment)

        assert not detector.has_conflict(technician.id, MONDAY, "14:30", "15:30")

    def test_lists_every_overlap(self, detector, book, technician):
        book("10:00", "11:00")
        book("11:00", "12:00")

        conflicts = detector.find_conflicts(
            technician.id, MONDAY, TimeRange(start="10:30", end="12:30")
        )

        assert sorted(c["type"] for c in conflicts) == ["break", "job_order", "job_order"]


class TestFreeSlots:
    """Test the complement of bookings and breaks."""

    def test_free_spans_around_job_and_lunch(self, detector, book, technician):
        book("09:00", "10:00")

        free = detector.free_slots(technician.id, MONDAY)

        assert [str(span) for span in free] == [
            "07:00-09:00",
            "10:00-12:00",
            "13:00-18:00",
        ]

    def test_empty_day(self, detector, second_technician):
        free = detector.free_slots(second_technician.id, MONDAY)

        assert free == [TimeRange(start="07:00", end="18:00")]

    def test_fully_booked_day(self, detector, book, second_technician):
        book("07:00", "12:00", technician_id=second_technician.id)
        book("12:00", "18:00", technician_id=second_technician.id)

        assert detector.free_slots(second_technician.id, MONDAY) == []

    def test_booked_minutes_counts_job_orders(self, detector, book, technician):
        book("09:00", "10:30")
        book("13:00", "14:00")
        book("15:00", "16:00", parts=unavailable_parts())

        assert detector.booked_minutes(technician.id, MONDAY) == 150


class TestWalkInSlots:
    """Test candidate intervals for a walk-in of a given length."""

    def test_candidates_fit_free_spans(self, detector, book, technician):
        book("09:00", "10:00")

        slots = detector.walk_in_slots(MONDAY, 60, [technician])

        starts = [span.start for span in slots[technician.id]]
        assert starts[:6] == ["07:00", "07:30", "08:00", "10:00", "10:30", "11:00"]
        assert "11:30" not in starts
        assert starts[-1] == "17:00"
        assert all(span.duration_minutes() == 60 for span in slots[technician.id])

    def test_technician_without_fit_omitted(
        self, detector, book, technician, second_technician
    ):
        book("07:00", "18:00", technician_id=second_technician.id)

        slots = detector.walk_in_slots(MONDAY, 30, [technician, second_technician])

        assert list(slots) == [technician.id]

    def test_longer_than_any_gap(self, detector, technician):
        assert detector.walk_in_slots(MONDAY, 6 * 60, [technician]) == {}

    @pytest.mark.parametrize("duration", [0, -30])
    def test_duration_must_be_positive(self, detector, technician, duration):
        with pytest.raises(ValueError):
            detector.walk_in_slots(MONDAY, duration, [technician])

    def test_available_technicians(self, detector, book, technician, second_technician):
        book("09:00", "10:00")

        free = detector.available_technicians(
            MONDAY,
            TimeRange(start="09:00", end="09:30"),
            [technician, second_technician],
        )

        assert free == [second_technician]
