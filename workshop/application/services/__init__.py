from .appointment_service import AppointmentService
from .base_service import ApplicationServiceBase, UnitOfWorkFactory
from .board_service import BoardService
from .carry_over_service import CarryOverSnapshotService
from .lifecycle_service import JobOrderLifecycleService
from .scheduler_service import SchedulerService

__all__ = [
    "AppointmentService",
    "ApplicationServiceBase",
    "BoardService",
    "CarryOverSnapshotService",
    "JobOrderLifecycleService",
    "SchedulerService",
    "UnitOfWorkFactory",
]
