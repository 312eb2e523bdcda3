"""
Status Queue Projector

Pure read-side projection of a set of job orders, live or snapshotted, into
the board's named queues.
"""

from collections.abc import Iterable
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from ..value_objects.enums import JobStatus, QIStatus


class QueueItem(Protocol):
    id: UUID
    status: JobStatus
    qi_status: QIStatus | None
    is_important: bool
    carried_over: bool
    created_at: datetime


@dataclass(frozen=True)
class StatusQueues:
    """Board queues; each is ordered important first, then carried-over, then oldest."""

    quality_inspection: tuple[Any, ...] = ()
    for_release: tuple[Any, ...] = ()
    waiting_parts: tuple[Any, ...] = ()
    unassigned: tuple[Any, ...] = ()
    hold_customer: tuple[Any, ...] = ()
    hold_warranty: tuple[Any, ...] = ()
    hold_insurance: tuple[Any, ...] = ()
    hold_ford: tuple[Any, ...] = ()
    sublet: tuple[Any, ...] = ()
    finished_unclaimed: tuple[Any, ...] = ()
    carried_over: tuple[Any, ...] = ()

    def ids(self) -> dict[str, list[UUID]]:
        return {
            f.name: [job.id for job in getattr(self, f.name)] for f in fields(self)
        }

    def counts(self) -> dict[str, int]:
        return {f.name: len(getattr(self, f.name)) for f in fields(self)}


_STATUS_QUEUES: dict[JobStatus, str] = {
    JobStatus.FOR_RELEASE: "for_release",
    JobStatus.WAITING_PARTS: "waiting_parts",
    JobStatus.UNASSIGNED: "unassigned",
    JobStatus.HOLD_CUSTOMER: "hold_customer",
    JobStatus.HOLD_WARRANTY: "hold_warranty",
    JobStatus.HOLD_INSURANCE: "hold_insurance",
    JobStatus.HOLD_FORD: "hold_ford",
    JobStatus.SUBLET: "sublet",
    JobStatus.FINISHED_UNCLAIMED: "finished_unclaimed",
}


def queue_order_key(job: QueueItem) -> tuple:
    return (not job.is_important, not job.carried_over, job.created_at, str(job.id))


def project_queues(jobs: Iterable[QueueItem]) -> StatusQueues:
    """
    Build the status queues for a set of job orders.

    The result depends only on the jobs' own fields, never on input order
    or the clock, so the same set always yields the same queues.

    Args:
        jobs: Job orders or snapshot job copies

    Returns:
        StatusQueues with every queue sorted by ``queue_order_key``
    """
    buckets: dict[str, list[QueueItem]] = {f.name: [] for f in fields(StatusQueues)}

    for job in sorted(jobs, key=queue_order_key):
        if job.status is JobStatus.QUALITY_INSPECTION:
            if job.qi_status is QIStatus.PENDING:
                buckets["quality_inspection"].append(job)
        elif job.status in _STATUS_QUEUES:
            buckets[_STATUS_QUEUES[job.status]].append(job)

        if job.carried_over and job.status.is_open:
            buckets["carried_over"].append(job)

    return StatusQueues(**{name: tuple(items) for name, items in buckets.items()})
