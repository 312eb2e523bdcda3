"""
Shared test fixtures.

Every test gets a fresh in-memory store, its own event dispatcher and a
user directory with two technicians, a job controller and a service advisor.
"""

from collections.abc import Callable
from datetime import date

import pytest

from workshop.application.workshop_engine import WorkshopEngine
from workshop.domain.scheduling.entities.job_order import JobOrder
from workshop.domain.scheduling.events.domain_events import (
    DomainEventDispatcher,
    DomainEventHandler,
)
from workshop.domain.scheduling.value_objects.business_calendar import (
    BusinessCalendar,
)
from workshop.domain.scheduling.value_objects.enums import ActorRole
from workshop.domain.scheduling.value_objects.time_grid import DEFAULT_GRID
from workshop.domain.scheduling.value_objects.user_profile import Actor, UserProfile
from workshop.domain.shared.base import DomainEvent
from workshop.infrastructure.memory import (
    InMemoryUnitOfWorkFactory,
    InMemoryUserDirectory,
)
from workshop.tests.factories import (
    MONDAY,
    UserFactory,
    available_parts,
    finished_tasks,
    next_job_number,
)


class EventCollector(DomainEventHandler):
    """Records every dispatched event."""

    def __init__(self):
        self.events: list[DomainEvent] = []

    def can_handle(self, event: DomainEvent) -> bool:
        return True

    def handle(self, event: DomainEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: type) -> list:
        return [e for e in self.events if isinstance(e, event_type)]


@pytest.fixture
def technician() -> UserProfile:
    return UserFactory.technician("Tomas Reyes", lunch=True)


@pytest.fixture
def second_technician() -> UserProfile:
    return UserFactory.technician("Ana Cruz")


@pytest.fixture
def controller_profile() -> UserProfile:
    return UserFactory.create(ActorRole.JOB_CONTROLLER, "Jo Control")


@pytest.fixture
def advisor_profile() -> UserProfile:
    return UserFactory.create(ActorRole.SERVICE_ADVISOR, "Sam Advisor")


@pytest.fixture
def users(
    technician, second_technician, controller_profile, advisor_profile
) -> InMemoryUserDirectory:
    return InMemoryUserDirectory(
        [technician, second_technician, controller_profile, advisor_profile]
    )


@pytest.fixture
def controller(controller_profile) -> Actor:
    return Actor.from_profile(controller_profile)


@pytest.fixture
def tech_actor(technician) -> Actor:
    return Actor.from_profile(technician)


@pytest.fixture
def advisor(advisor_profile) -> Actor:
    return Actor.from_profile(advisor_profile)


@pytest.fixture
def events() -> EventCollector:
    return EventCollector()


@pytest.fixture
def dispatcher(events) -> DomainEventDispatcher:
    dispatcher = DomainEventDispatcher()
    dispatcher.register_handler(events)
    return dispatcher


@pytest.fixture
def calendar() -> BusinessCalendar:
    return BusinessCalendar.standard_calendar()


@pytest.fixture
def uow_factory(dispatcher) -> InMemoryUnitOfWorkFactory:
    return InMemoryUnitOfWorkFactory(dispatcher=dispatcher)


@pytest.fixture
def workshop(uow_factory, users, calendar) -> WorkshopEngine:
    return WorkshopEngine(uow_factory, users, calendar, DEFAULT_GRID)


@pytest.fixture
def plotted_job(workshop, controller, technician) -> Callable[..., JobOrder]:
    """Create a job and plot it, OnGoing with its tasks finished by default."""

    def make(
        start: str = "09:00",
        end: str = "10:00",
        technician_id=None,
        on_date: date = MONDAY,
        **kwargs,
    ) -> JobOrder:
        kwargs.setdefault("job_list", finished_tasks())
        kwargs.setdefault("parts", available_parts())
        return workshop.create_job_order(
            controller,
            kwargs.pop("job_number", None) or next_job_number(),
            kwargs.pop("plate_number", "NBC1234"),
            on_date,
            technician_id=technician_id or technician.id,
            start=start,
            end=end,
            **kwargs,
        )

    return make
