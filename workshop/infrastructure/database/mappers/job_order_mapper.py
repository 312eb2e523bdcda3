"""
Mapper for converting between JobOrder aggregates and job order rows.

Value objects are flattened to columns or JSON; enums are stored by value.
"""

from datetime import datetime, timezone
from typing import Any

from workshop.domain.scheduling.entities.job_order import JobOrder
from workshop.domain.scheduling.value_objects.enums import (
    JobStatus,
    QIStatus,
    SourceType,
)
from workshop.domain.scheduling.value_objects.time_range import TimeRange
from workshop.domain.scheduling.value_objects.work_items import (
    JobItem,
    OriginLink,
    Part,
)
from workshop.infrastructure.database.models import JobOrderRecord


def ensure_utc(value: datetime | None) -> datetime | None:
    """SQLite drops the offset; stored timestamps are always UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class JobOrderMapper:
    """Translates JobOrder aggregates to and from JobOrderRecord rows."""

    @staticmethod
    def to_values(job: JobOrder) -> dict[str, Any]:
        """
        Column values for a job order, without ``seq`` and ``version``.

        Args:
            job: Domain job order

        Returns:
            Mapping of column name to value
        """
        return {
            "id": job.id,
            "job_number": job.job_number,
            "plate_number": job.plate_number,
            "vin": job.vin,
            "assigned_technician": job.assigned_technician,
            "service_advisor": job.service_advisor,
            "created_by": job.created_by,
            "date": job.date,
            "start_time": job.time_range.start,
            "end_time": job.time_range.end,
            "actual_end_time": job.actual_end_time,
            "job_list": [item.model_dump(mode="json") for item in job.job_list],
            "parts": [part.model_dump(mode="json") for part in job.parts],
            "status": job.status.value,
            "qi_status": job.qi_status.value if job.qi_status else None,
            "hold_customer_remarks": job.hold_customer_remarks,
            "sublet_remarks": job.sublet_remarks,
            "source_type": job.source_type.value,
            "carried_over": job.carried_over,
            "original_created_date": job.original_created_date,
            "is_important": job.is_important,
            "origin_job_id": job.origin_job_id,
            "origin_links": [link.model_dump(mode="json") for link in job.origin_links],
            "created_at": job.created_at,
            "updated_at": job.updated_at,
        }

    @staticmethod
    def domain_to_sql(job: JobOrder) -> JobOrderRecord:
        return JobOrderRecord(**JobOrderMapper.to_values(job), version=job.version)

    @staticmethod
    def sql_to_domain(record: JobOrderRecord) -> JobOrder:
        """
        Convert a job order row to a domain job order.

        Args:
            record: Stored row

        Returns:
            Domain job order with no pending events
        """
        return JobOrder(
            id=record.id,
            created_at=ensure_utc(record.created_at),
            updated_at=ensure_utc(record.updated_at),
            job_number=record.job_number,
            plate_number=record.plate_number,
            vin=record.vin,
            assigned_technician=record.assigned_technician,
            service_advisor=record.service_advisor,
            created_by=record.created_by,
            date=record.date,
            time_range=TimeRange(start=record.start_time, end=record.end_time),
            actual_end_time=record.actual_end_time,
            job_list=[JobItem.model_validate(item) for item in record.job_list],
            parts=[Part.model_validate(part) for part in record.parts],
            status=JobStatus(record.status),
            qi_status=QIStatus(record.qi_status) if record.qi_status else None,
            hold_customer_remarks=record.hold_customer_remarks,
            sublet_remarks=record.sublet_remarks,
            source_type=SourceType(record.source_type),
            carried_over=record.carried_over,
            original_created_date=record.original_created_date,
            is_important=record.is_important,
            origin_job_id=record.origin_job_id,
            origin_links=[OriginLink.model_validate(link) for link in record.origin_links],
            version=record.version,
        )
