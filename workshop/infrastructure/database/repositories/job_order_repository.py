"""
Job order repository backed by SQLModel.

Creates rely on the ``(job_number, date)`` unique constraint; saves are a
compare-and-swap on ``version`` so a write based on a stale read matches no
row and is rejected.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select

from workshop.domain.scheduling.entities.job_order import JobOrder
from workshop.domain.scheduling.repositories.job_order_repository import (
    JobOrderRepository,
)
from workshop.domain.scheduling.value_objects.enums import JobStatus
from workshop.domain.shared.base import utc_now
from workshop.domain.shared.exceptions import (
    ConcurrencyError,
    DuplicateJobNumber,
    NotFound,
)
from workshop.infrastructure.database.mappers import JobOrderMapper
from workshop.infrastructure.database.models import JobOrderRecord

from .base import DatabaseError, SqlRepository


class SqlJobOrderRepository(SqlRepository, JobOrderRepository):
    """Repository implementation for JobOrder aggregates."""

    def find_by_id(self, job_id: UUID) -> JobOrder | None:
        try:
            record = self.session.exec(
                select(JobOrderRecord).where(JobOrderRecord.id == job_id)
            ).first()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error finding job order {job_id}: {str(e)}") from e
        return JobOrderMapper.sql_to_domain(record) if record else None

    def find_by_technician_and_date(
        self, technician_id: UUID, on_date: date
    ) -> list[JobOrder]:
        return self._find(
            f"technician {technician_id} on {on_date}",
            JobOrderRecord.assigned_technician == technician_id,
            JobOrderRecord.date == on_date,
        )

    def find_by_status(
        self, status: JobStatus, on_date: date | None = None
    ) -> list[JobOrder]:
        criteria = [JobOrderRecord.status == JobStatus(status).value]
        if on_date is not None:
            criteria.append(JobOrderRecord.date == on_date)
        return self._find(f"status {JobStatus(status).value}", *criteria)

    def find_by_date(self, on_date: date) -> list[JobOrder]:
        return self._find(f"date {on_date}", JobOrderRecord.date == on_date)

    def find_by_job_number(self, job_number: str, on_date: date) -> JobOrder | None:
        found = self._find(
            f"number {job_number}",
            JobOrderRecord.job_number == job_number.strip().upper(),
            JobOrderRecord.date == on_date,
        )
        return found[0] if found else None

    def create(self, job: JobOrder) -> JobOrder:
        if self.find_by_job_number(job.job_number, job.date) is not None:
            raise DuplicateJobNumber(job.job_number, job.date)
        try:
            self.session.add(JobOrderMapper.domain_to_sql(job))
            self.session.flush()
        except IntegrityError as e:
            raise DuplicateJobNumber(job.job_number, job.date) from e
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error creating job order {job.job_number}: {str(e)}"
            ) from e
        return job

    def save(self, job: JobOrder) -> JobOrder:
        values = JobOrderMapper.to_values(job)
        values["updated_at"] = utc_now()
        statement = (
            update(JobOrderRecord)
            .where(JobOrderRecord.id == job.id)
            .where(JobOrderRecord.version == job.version)
            .values(**values, version=job.version + 1)
        )
        try:
            result = self.session.execute(statement)
        except IntegrityError as e:
            raise DuplicateJobNumber(job.job_number, job.date) from e
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error saving job order {job.id}: {str(e)}") from e

        if result.rowcount == 0:
            if self.find_by_id(job.id) is None:
                raise NotFound("JobOrder", job.id)
            raise ConcurrencyError("JobOrder", job.id, job.version)
        job.version += 1
        job.updated_at = values["updated_at"]
        return job

    def _find(self, description: str, *criteria) -> list[JobOrder]:
        try:
            records = self.session.exec(
                select(JobOrderRecord).where(*criteria).order_by(JobOrderRecord.seq)
            ).all()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error finding job orders by {description}: {str(e)}"
            ) from e
        return [JobOrderMapper.sql_to_domain(record) for record in records]
