"""
Workshop snapshot: the immutable record of how a day's board looked at close.

A snapshot embeds a denormalized copy of every job order of the day, with
people resolved to names at snapshot time, so later edits to live job orders
or users never change it.
"""

from collections import Counter
from collections.abc import Iterable
from datetime import date, datetime
from typing import Protocol
from uuid import UUID, uuid4

from pydantic import Field

from ...shared.base import ValueObject, utc_now
from ..value_objects.enums import JobStatus, QIStatus, SourceType
from ..value_objects.time_range import TimeRange
from ..value_objects.work_items import JobItem, OriginLink, Part


class _Classifiable(Protocol):
    status: JobStatus
    is_important: bool


class PersonRef(ValueObject):
    """A user as they were known when the snapshot was taken."""

    id: UUID | None = None
    name: str
    email: str | None = None


class SnapshotJobOrder(ValueObject):
    """Frozen copy of a job order inside a snapshot."""

    id: UUID
    job_number: str
    plate_number: str
    vin: str
    assigned_technician: PersonRef | None = None
    service_advisor: PersonRef | None = None
    created_by: PersonRef
    date: date
    time_range: TimeRange
    actual_end_time: str | None = None
    job_list: tuple[JobItem, ...] = ()
    parts: tuple[Part, ...] = ()
    status: JobStatus
    qi_status: QIStatus | None = None
    hold_customer_remarks: str | None = None
    sublet_remarks: str | None = None
    source_type: SourceType
    carried_over: bool
    original_created_date: date | None = None
    is_important: bool
    origin_job_id: UUID | None = None
    origin_links: tuple[OriginLink, ...] = ()
    created_at: datetime


class SnapshotStatistics(ValueObject):
    """Counts per status bucket."""

    total_jobs: int = 0
    on_going: int = 0
    for_release: int = 0
    on_hold: int = 0
    sublet: int = 0
    unassigned: int = 0
    carried_over: int = 0
    important: int = 0
    quality_inspection: int = 0
    finished_unclaimed: int = 0
    by_status: tuple[tuple[str, int], ...] = ()

    @classmethod
    def from_jobs(cls, jobs: Iterable[_Classifiable]) -> "SnapshotStatistics":
        """
        Compute statistics for a set of job orders.

        ``carried_over`` counts the jobs still open, i.e. the ones rolled
        forward when the day is closed. ``on_hold`` includes WaitingParts and
        ``finished_unclaimed`` includes Complete.
        """
        jobs = list(jobs)
        counts = Counter(job.status for job in jobs)
        return cls(
            total_jobs=len(jobs),
            on_going=counts[JobStatus.ON_GOING],
            for_release=counts[JobStatus.FOR_RELEASE],
            on_hold=sum(
                counts[status]
                for status in (
                    JobStatus.HOLD_CUSTOMER,
                    JobStatus.HOLD_WARRANTY,
                    JobStatus.HOLD_INSURANCE,
                    JobStatus.HOLD_FORD,
                    JobStatus.WAITING_PARTS,
                )
            ),
            sublet=counts[JobStatus.SUBLET],
            unassigned=counts[JobStatus.UNASSIGNED],
            carried_over=sum(1 for job in jobs if job.status.is_open),
            important=sum(1 for job in jobs if job.is_important),
            quality_inspection=counts[JobStatus.QUALITY_INSPECTION],
            finished_unclaimed=counts[JobStatus.FINISHED_UNCLAIMED]
            + counts[JobStatus.COMPLETE],
            by_status=tuple((status.value, counts[status]) for status in JobStatus),
        )

    def count(self, status: JobStatus) -> int:
        """Number of jobs in exactly ``status``."""
        return dict(self.by_status).get(JobStatus(status).value, 0)


class CarryOverRecord(ValueObject):
    """One job rolled forward at day close."""

    job_id: UUID
    job_number: str
    plate_number: str
    status: JobStatus
    reason: str
    carried_to_job_id: UUID | None = None


class WorkshopSnapshot(ValueObject):
    """
    Immutable, one per business day.

    Created once by the carry-over service; there is no update path.
    """

    id: UUID = Field(default_factory=uuid4)
    date: date
    snapshot_date: datetime = Field(default_factory=utc_now)
    created_by: PersonRef
    job_orders: tuple[SnapshotJobOrder, ...] = ()
    statistics: SnapshotStatistics
    carry_over_jobs: tuple[CarryOverRecord, ...] = ()

    def find_job(self, job_id: UUID) -> SnapshotJobOrder | None:
        return next((job for job in self.job_orders if job.id == job_id), None)
