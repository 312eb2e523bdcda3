"""In-memory Unit of Work."""

import logging

from workshop.domain.scheduling.events.domain_events import DomainEventDispatcher
from workshop.domain.scheduling.repositories.unit_of_work import UnitOfWork
from workshop.domain.scheduling.value_objects.time_grid import DEFAULT_GRID, TimeGrid

from .repositories import (
    InMemoryAppointmentRepository,
    InMemoryJobOrderRepository,
    InMemorySlotReservationRepository,
    InMemorySnapshotRepository,
)
from .store import InMemoryStore

logger = logging.getLogger(__name__)


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work over an ``InMemoryStore``.

    Holds the store lock for the whole transaction. The store's tables are
    checkpointed on begin and restored on rollback; stored records are never
    mutated in place, so a shallow checkpoint is enough.
    """

    def __init__(
        self,
        store: InMemoryStore,
        dispatcher: DomainEventDispatcher | None = None,
        grid: TimeGrid = DEFAULT_GRID,
    ):
        super().__init__(dispatcher)
        self._store = store
        self._grid = grid
        self._checkpoint: dict | None = None

        self.job_orders = InMemoryJobOrderRepository(store)
        self.appointments = InMemoryAppointmentRepository(store)
        self.snapshots = InMemorySnapshotRepository(store)
        self.reservations = InMemorySlotReservationRepository(store, grid)

    def _begin(self) -> None:
        self._store.lock.acquire()
        self._checkpoint = self._store.checkpoint()

    def _commit(self) -> None:
        self._checkpoint = self._store.checkpoint()

    def _rollback(self) -> None:
        if self._checkpoint is not None:
            logger.debug("Rolling back in-memory transaction")
            self._store.restore(self._checkpoint)

    def _close(self) -> None:
        self._checkpoint = None
        self._store.lock.release()


class InMemoryUnitOfWorkFactory:
    """Callable producing units of work that share one store."""

    def __init__(
        self,
        store: InMemoryStore | None = None,
        dispatcher: DomainEventDispatcher | None = None,
        grid: TimeGrid = DEFAULT_GRID,
    ):
        self.store = store or InMemoryStore()
        self._dispatcher = dispatcher
        self._grid = grid

    def __call__(self) -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(self.store, self._dispatcher, self._grid)
