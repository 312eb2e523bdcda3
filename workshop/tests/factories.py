"""
Test Data Factories

Builders for users, job orders and work content used across the test suite.
"""

import itertools
from datetime import date
from uuid import UUID, uuid4

from workshop.domain.scheduling.entities.job_order import JobOrder
from workshop.domain.scheduling.value_objects.enums import (
    ActorRole,
    JobItemStatus,
    PartAvailability,
)
from workshop.domain.scheduling.value_objects.time_range import BreakTime, TimeRange
from workshop.domain.scheduling.value_objects.user_profile import UserProfile
from workshop.domain.scheduling.value_objects.work_items import JobItem, Part

# 2025-03-03 is a Monday
MONDAY = date(2025, 3, 3)
TUESDAY = date(2025, 3, 4)
FRIDAY = date(2025, 3, 7)
NEXT_MONDAY = date(2025, 3, 10)

_job_numbers = itertools.count(1001)


def next_job_number() -> str:
    return f"JO-{next(_job_numbers)}"


def finished_tasks(*descriptions: str) -> list[JobItem]:
    return [
        JobItem(description=d, status=JobItemStatus.FINISHED)
        for d in descriptions or ("Change oil",)
    ]


def unfinished_tasks(*descriptions: str) -> list[JobItem]:
    return [JobItem(description=d) for d in descriptions or ("Replace brake pads",)]


def available_parts(*names: str) -> list[Part]:
    return [Part(name=n) for n in names or ("Oil filter",)]


def unavailable_parts(*names: str) -> list[Part]:
    return [
        Part(name=n, availability=PartAvailability.UNAVAILABLE)
        for n in names or ("Brake pads",)
    ]


class UserFactory:
    """Factory for user profiles as the user directory reports them."""

    @staticmethod
    def create(
        role: ActorRole,
        name: str | None = None,
        break_times: tuple[BreakTime, ...] = (),
        **kwargs,
    ) -> UserProfile:
        user_id = kwargs.pop("id", None) or uuid4()
        name = name or f"{role.value.title()} {str(user_id)[:4]}"
        return UserProfile(
            id=user_id,
            name=name,
            email=f"{name.lower().replace(' ', '.')}@workshop.test",
            role=role,
            break_times=break_times,
            **kwargs,
        )

    @staticmethod
    def technician(name: str | None = None, lunch: bool = False) -> UserProfile:
        breaks = (BreakTime(description="Lunch", start="12:00", end="13:00"),)
        return UserFactory.create(
            ActorRole.TECHNICIAN, name, break_times=breaks if lunch else ()
        )


class JobOrderFactory:
    """Factory for JobOrder aggregates built outside the services."""

    @staticmethod
    def create(
        created_by: UUID | None = None,
        on_date: date = MONDAY,
        job_number: str | None = None,
        plate_number: str = "ABC1234",
        job_list: list[JobItem] | None = None,
        parts: list[Part] | None = None,
        technician_id: UUID | None = None,
        start: str | None = None,
        end: str | None = None,
        **kwargs,
    ) -> JobOrder:
        time_range = TimeRange(start=start, end=end) if start and end else None
        job = JobOrder.create(
            job_number=job_number or next_job_number(),
            plate_number=plate_number,
            created_by=created_by or uuid4(),
            on_date=on_date,
            job_list=job_list if job_list is not None else unfinished_tasks(),
            parts=parts if parts is not None else available_parts(),
            assigned_technician=technician_id,
            time_range=time_range,
            **kwargs,
        )
        job.clear_domain_events()
        return job
