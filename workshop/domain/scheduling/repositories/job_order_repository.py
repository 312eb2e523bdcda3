"""
Job Order Repository Interface

Defines the contract for job order data access operations.
"""

from abc import ABC, abstractmethod
from datetime import date
from uuid import UUID

from workshop.domain.shared.exceptions import NotFound

from ..entities.job_order import JobOrder
from ..value_objects.enums import JobStatus


class JobOrderRepository(ABC):
    """
    Abstract repository interface for JobOrder aggregates.

    Implementations must enforce ``(job_number, date)`` uniqueness on create
    and optimistic versioning on save.
    """

    @abstractmethod
    def find_by_id(self, job_id: UUID) -> JobOrder | None:
        """
        Retrieve a job order by its ID.

        Args:
            job_id: Unique job order identifier

        Returns:
            JobOrder or None if not found

        Raises:
            DatabaseError: If retrieval operation fails
        """

    @abstractmethod
    def find_by_technician_and_date(
        self, technician_id: UUID, on_date: date
    ) -> list[JobOrder]:
        """
        Retrieve every job order assigned to a technician on a day.

        Args:
            technician_id: Technician identifier
            on_date: Business day

        Returns:
            Job orders in insertion order

        Raises:
            DatabaseError: If retrieval operation fails
        """

    @abstractmethod
    def find_by_status(
        self, status: JobStatus, on_date: date | None = None
    ) -> list[JobOrder]:
        """
        Retrieve job orders in a status, optionally restricted to one day.

        Args:
            status: Job status to filter by
            on_date: Optional business day

        Returns:
            Job orders in insertion order

        Raises:
            DatabaseError: If retrieval operation fails
        """

    @abstractmethod
    def find_by_date(self, on_date: date) -> list[JobOrder]:
        """
        Retrieve every job order of a business day, in insertion order.

        Raises:
            DatabaseError: If retrieval operation fails
        """

    @abstractmethod
    def find_by_job_number(self, job_number: str, on_date: date) -> JobOrder | None:
        pass

    @abstractmethod
    def create(self, job: JobOrder) -> JobOrder:
        """
        Persist a new job order.

        Args:
            job: JobOrder to insert

        Returns:
            Stored job order

        Raises:
            DuplicateJobNumber: If the job number is already used that day
            DatabaseError: If the insert fails
        """

    @abstractmethod
    def save(self, job: JobOrder) -> JobOrder:
        """
        Persist changes to an existing job order.

        The stored version must equal ``job.version``; the version is then
        incremented on both the stored record and ``job``.

        Args:
            job: JobOrder with pending changes

        Returns:
            Saved job order

        Raises:
            ConcurrencyError: If another writer saved the job in between
            NotFound: If the job does not exist
            DatabaseError: If the update fails
        """

    def get(self, job_id: UUID) -> JobOrder:
        """Retrieve a job order or raise NotFound."""
        job = self.find_by_id(job_id)
        if job is None:
            raise NotFound("JobOrder", job_id)
        return job
