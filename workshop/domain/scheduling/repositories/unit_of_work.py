"""
Unit of Work contract.

A unit of work groups the repositories touched by one business operation
into a single transaction: it commits on a clean exit from its ``with`` block
and rolls back on any exception, so callers never observe a partial write.
Domain events collected during the transaction are dispatched only after the
commit succeeds.
"""

import logging
from abc import ABC, abstractmethod

from workshop.domain.shared.base import AggregateRoot, DomainEvent

from ..events.domain_events import DomainEventDispatcher, get_event_dispatcher
from .appointment_repository import AppointmentRepository
from .job_order_repository import JobOrderRepository
from .slot_reservation_repository import SlotReservationRepository
from .snapshot_repository import SnapshotRepository

logger = logging.getLogger(__name__)


class UnitOfWork(ABC):
    """
    Abstract base class for Unit of Work pattern.

    Subclasses provide the storage-specific ``_begin``, ``_commit``,
    ``_rollback`` and ``_close`` hooks and bind the repository attributes.
    """

    # Repository properties
    job_orders: JobOrderRepository
    appointments: AppointmentRepository
    snapshots: SnapshotRepository
    reservations: SlotReservationRepository

    def __init__(self, dispatcher: DomainEventDispatcher | None = None):
        self._dispatcher = dispatcher
        self._pending_events: list[DomainEvent] = []

    def __enter__(self):
        """Enter the runtime context and open the transaction."""
        self._pending_events = []
        self._begin()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Commit on success, roll back on error, always release resources."""
        try:
            if exc_type is not None:
                self.rollback()
            else:
                try:
                    self.commit()
                except Exception:
                    self.rollback()
                    raise
        finally:
            self._close()

    def commit(self) -> None:
        """Commit the transaction, then publish the collected domain events."""
        self._commit()
        events, self._pending_events = self._pending_events, []
        if events:
            logger.debug("Publishing %d domain events after commit", len(events))
            (self._dispatcher or get_event_dispatcher()).dispatch_all(events)

    def rollback(self) -> None:
        """Rollback the transaction and drop the collected domain events."""
        self._rollback()
        self._pending_events.clear()

    def collect(self, *aggregates: AggregateRoot) -> None:
        """Move pending domain events from aggregates into this transaction."""
        for aggregate in aggregates:
            self._pending_events.extend(aggregate.get_domain_events())
            aggregate.clear_domain_events()

    def add_domain_event(self, event: DomainEvent) -> None:
        self._pending_events.append(event)

    @abstractmethod
    def _begin(self) -> None:
        pass

    @abstractmethod
    def _commit(self) -> None:
        pass

    @abstractmethod
    def _rollback(self) -> None:
        pass

    @abstractmethod
    def _close(self) -> None:
        pass
