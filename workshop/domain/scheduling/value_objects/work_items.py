"""Value objects describing the work content and history of a job order."""

from datetime import date
from uuid import UUID

from pydantic import field_validator

from workshop.domain.shared.base import ValueObject

from .enums import JobItemStatus, JobStatus, PartAvailability


class JobItem(ValueObject):
    """One task on a job order's job list."""

    description: str
    status: JobItemStatus = JobItemStatus.UNFINISHED

    @field_validator("description")
    @classmethod
    def _strip_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Task description cannot be empty")
        return v

    @property
    def is_finished(self) -> bool:
        return self.status is JobItemStatus.FINISHED


class Part(ValueObject):
    """A part required by a job order."""

    name: str
    availability: PartAvailability = PartAvailability.AVAILABLE

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Part name cannot be empty")
        return v

    @property
    def is_available(self) -> bool:
        return self.availability is PartAvailability.AVAILABLE


class OriginLink(ValueObject):
    """One hop in a job's history across business days."""

    job_id: UUID
    date: date
    status: JobStatus
