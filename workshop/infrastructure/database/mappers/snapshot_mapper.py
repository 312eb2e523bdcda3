"""
Mapper for workshop snapshots.

The whole snapshot is stored as one JSON document; only the id, the day and
the capture time are columns.
"""

from workshop.domain.scheduling.entities.workshop_snapshot import WorkshopSnapshot
from workshop.infrastructure.database.models import WorkshopSnapshotRecord


class SnapshotMapper:
    @staticmethod
    def domain_to_sql(snapshot: WorkshopSnapshot) -> WorkshopSnapshotRecord:
        return WorkshopSnapshotRecord(
            id=snapshot.id,
            date=snapshot.date,
            snapshot_date=snapshot.snapshot_date,
            payload=snapshot.model_dump(mode="json"),
        )

    @staticmethod
    def sql_to_domain(record: WorkshopSnapshotRecord) -> WorkshopSnapshot:
        return WorkshopSnapshot.model_validate(record.payload)
