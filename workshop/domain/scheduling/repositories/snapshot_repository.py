"""
Snapshot Repository Interface

Snapshots are write-once: the contract has no update or delete.
"""

from abc import ABC, abstractmethod
from datetime import date

from ..entities.workshop_snapshot import WorkshopSnapshot


class SnapshotRepository(ABC):
    """Abstract repository interface for WorkshopSnapshot records."""

    @abstractmethod
    def find_by_date(self, snapshot_date: date) -> WorkshopSnapshot | None:
        pass

    @abstractmethod
    def create(self, snapshot: WorkshopSnapshot) -> WorkshopSnapshot:
        """
        Persist a new snapshot.

        Args:
            snapshot: Snapshot to insert

        Returns:
            Stored snapshot

        Raises:
            SnapshotAlreadyExists: If a snapshot for the date is already stored
            DatabaseError: If the insert fails
        """

    @abstractmethod
    def list_all(self) -> list[WorkshopSnapshot]:
        """Retrieve every snapshot, most recent date first."""
