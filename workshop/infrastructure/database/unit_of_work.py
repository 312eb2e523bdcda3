"""
SQLModel Unit of Work.

One session per unit of work. Repositories flush as they go so unique
constraint violations surface at the operation that caused them; nothing is
visible to other sessions until commit.
"""

import logging
from collections.abc import Callable

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from workshop.domain.scheduling.events.domain_events import DomainEventDispatcher
from workshop.domain.scheduling.repositories.unit_of_work import UnitOfWork
from workshop.domain.scheduling.value_objects.time_grid import DEFAULT_GRID, TimeGrid

from .repositories import (
    DatabaseError,
    SqlAppointmentRepository,
    SqlJobOrderRepository,
    SqlSlotReservationRepository,
    SqlSnapshotRepository,
)

logger = logging.getLogger(__name__)


class SqlModelUnitOfWork(UnitOfWork):
    """
    SQLModel-based implementation of Unit of Work pattern.

    Manages database transactions using SQLModel/SQLAlchemy sessions and provides
    access to all repositories within a single transactional boundary.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        dispatcher: DomainEventDispatcher | None = None,
        grid: TimeGrid = DEFAULT_GRID,
    ):
        """
        Initialize the unit of work.

        Args:
            session_factory: Creates the session for each transaction
            dispatcher: Receives the domain events after commit
            grid: Slot grid used to describe reservation conflicts
        """
        super().__init__(dispatcher)
        self._session_factory = session_factory
        self._grid = grid
        self._session: Session | None = None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise DatabaseError("No active session")
        return self._session

    def _begin(self) -> None:
        self._session = self._session_factory()
        self.job_orders = SqlJobOrderRepository(self._session)
        self.appointments = SqlAppointmentRepository(self._session)
        self.snapshots = SqlSnapshotRepository(self._session)
        self.reservations = SqlSlotReservationRepository(self._session, self._grid)

    def _commit(self) -> None:
        """
        Commit the current transaction.

        Raises:
            DatabaseError: If commit fails
        """
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to commit transaction: {str(e)}") from e

    def _rollback(self) -> None:
        if self._session is None:
            return
        logger.debug("Rolling back database transaction")
        try:
            self._session.rollback()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to rollback transaction: {str(e)}") from e

    def _close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None


class SqlModelUnitOfWorkFactory:
    """Callable producing SQLModel units of work over one engine."""

    def __init__(
        self,
        engine: Engine,
        dispatcher: DomainEventDispatcher | None = None,
        grid: TimeGrid = DEFAULT_GRID,
    ):
        self.engine = engine
        self._dispatcher = dispatcher
        self._grid = grid

    def __call__(self) -> SqlModelUnitOfWork:
        return SqlModelUnitOfWork(
            lambda: Session(self.engine, expire_on_commit=False),
            self._dispatcher,
            self._grid,
        )
