from .domain_events import (
    AppointmentBooked,
    AppointmentConverted,
    DomainEventDispatcher,
    DomainEventHandler,
    JobOrderCarriedOver,
    JobOrderCreated,
    JobOrderPlotted,
    SnapshotCreated,
    StatusChanged,
    get_event_dispatcher,
)

__all__ = [
    "AppointmentBooked",
    "AppointmentConverted",
    "DomainEventDispatcher",
    "DomainEventHandler",
    "JobOrderCarriedOver",
    "JobOrderCreated",
    "JobOrderPlotted",
    "SnapshotCreated",
    "StatusChanged",
    "get_event_dispatcher",
]
