"""Read-side board queries: status queues and day statistics."""

from datetime import date
from uuid import UUID

from workshop.domain.scheduling.entities.job_order import JobOrder
from workshop.domain.scheduling.entities.workshop_snapshot import (
    SnapshotStatistics,
    WorkshopSnapshot,
)
from workshop.domain.scheduling.services.status_queue_projector import (
    StatusQueues,
    project_queues,
)

from .base_service import ApplicationServiceBase


class BoardService(ApplicationServiceBase):
    """Queues and counts over live job orders or a closed day's snapshot."""

    def get_queues(self, source: date | WorkshopSnapshot) -> StatusQueues:
        """
        Project the status queues.

        Args:
            source: A business day (live job orders) or a snapshot (the
                frozen copies it embeds)
        """
        if isinstance(source, WorkshopSnapshot):
            return project_queues(source.job_orders)
        with self._uow_factory() as uow:
            return project_queues(uow.job_orders.find_by_date(source))

    def get_statistics(self, on_date: date) -> SnapshotStatistics:
        """Live counts for a day, computed the same way snapshots compute them."""
        with self._uow_factory() as uow:
            return SnapshotStatistics.from_jobs(uow.job_orders.find_by_date(on_date))

    def list_job_orders(self, on_date: date) -> list[JobOrder]:
        with self._uow_factory() as uow:
            return uow.job_orders.find_by_date(on_date)

    def get_job_order(self, job_id: UUID) -> JobOrder:
        with self._uow_factory() as uow:
            return uow.job_orders.get(job_id)

    def technician_schedule(self, technician_id: UUID, on_date: date) -> list[JobOrder]:
        """A technician's job orders for the day, by start time."""
        with self._uow_factory() as uow:
            jobs = uow.job_orders.find_by_technician_and_date(technician_id, on_date)
        return sorted(jobs, key=lambda job: job.time_range.start_minutes)
