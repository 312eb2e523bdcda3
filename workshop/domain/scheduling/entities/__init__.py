from .appointment import Appointment
from .job_order import JobOrder
from .workshop_snapshot import (
    CarryOverRecord,
    PersonRef,
    SnapshotJobOrder,
    SnapshotStatistics,
    WorkshopSnapshot,
)

__all__ = [
    "Appointment",
    "CarryOverRecord",
    "JobOrder",
    "PersonRef",
    "SnapshotJobOrder",
    "SnapshotStatistics",
    "WorkshopSnapshot",
]
