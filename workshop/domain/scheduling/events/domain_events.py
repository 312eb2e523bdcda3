"""
Domain events for job order scheduling.

Events are raised by aggregates and services, collected by the unit of work
and dispatched only after the surrounding transaction commits. Read-side
projections and caches subscribe here instead of polling the repositories.
"""

import logging
from datetime import date
from uuid import UUID

from workshop.domain.shared.base import DomainEvent

from ..value_objects.enums import JobStatus

logger = logging.getLogger(__name__)


class JobOrderCreated(DomainEvent):
    """Raised when a job order enters the system by any intake path."""

    job_id: UUID
    job_number: str
    date: date
    status: JobStatus
    source_type: str


class JobOrderPlotted(DomainEvent):
    """Raised when the scheduler places a job order on a technician's grid."""

    job_id: UUID
    job_number: str
    technician_id: UUID
    date: date
    start: str
    end: str
    previous_technician_id: UUID | None = None
    reassigned: bool = False


class StatusChanged(DomainEvent):
    """Raised on every job order status change."""

    job_id: UUID
    job_number: str
    old_status: JobStatus
    new_status: JobStatus
    actor_id: UUID | None = None
    reason: str | None = None


class JobOrderCarriedOver(DomainEvent):
    job_id: UUID
    job_number: str
    source_job_id: UUID
    from_date: date
    to_date: date


class SnapshotCreated(DomainEvent):
    """Raised once a day has been closed and its board frozen."""

    snapshot_date: date
    total_jobs: int
    carried_over: int
    carry_over_job_ids: list[UUID]


class AppointmentBooked(DomainEvent):
    appointment_id: UUID
    technician_id: UUID
    date: date
    start: str
    end: str


class AppointmentConverted(DomainEvent):
    appointment_id: UUID
    job_id: UUID


class DomainEventHandler:
    """Base interface for domain event handlers."""

    def can_handle(self, event: DomainEvent) -> bool:
        """Check if this handler can handle the given event."""
        raise NotImplementedError

    def handle(self, event: DomainEvent) -> None:
        """Handle the domain event."""
        raise NotImplementedError


class DomainEventDispatcher:
    """Dispatches domain events to registered handlers."""

    def __init__(self):
        self._handlers: list[DomainEventHandler] = []

    def register_handler(self, handler: DomainEventHandler) -> None:
        """Register an event handler."""
        if handler not in self._handlers:
            self._handlers.append(handler)

    def dispatch(self, event: DomainEvent) -> None:
        """Dispatch an event to all capable handlers."""
        for handler in self._handlers:
            if handler.can_handle(event):
                try:
                    handler.handle(event)
                except Exception:
                    # Log error but continue with other handlers
                    logger.exception(
                        "Error handling event %s (%s)", event.event_id, event.event_type
                    )

    def dispatch_all(self, events: list[DomainEvent]) -> None:
        """Dispatch multiple events."""
        for event in events:
            self.dispatch(event)


# Global event dispatcher instance
_global_dispatcher = DomainEventDispatcher()


def get_event_dispatcher() -> DomainEventDispatcher:
    """Get the global event dispatcher."""
    return _global_dispatcher
