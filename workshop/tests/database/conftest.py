"""
Database Test Configuration and Fixtures

Every test gets its own in-memory SQLite database with the schema created,
and the ``workshop`` fixture is rebound to an engine running on it.
"""

from collections.abc import Generator

import pytest
from sqlalchemy.engine import Engine

from workshop.application.workshop_engine import WorkshopEngine
from workshop.domain.scheduling.value_objects.time_grid import DEFAULT_GRID
from workshop.infrastructure.database import (
    SqlModelUnitOfWorkFactory,
    create_db_and_tables,
    get_engine,
)


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Fresh in-memory database for one test."""
    engine = get_engine("sqlite://")
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def uow_factory(engine, dispatcher) -> SqlModelUnitOfWorkFactory:
    return SqlModelUnitOfWorkFactory(engine, dispatcher=dispatcher)


@pytest.fixture
def workshop(uow_factory, users, calendar) -> WorkshopEngine:
    return WorkshopEngine(uow_factory, users, calendar, DEFAULT_GRID)
