"""Write-once snapshot repository backed by SQLModel."""

from datetime import date

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select

from workshop.domain.scheduling.entities.workshop_snapshot import WorkshopSnapshot
from workshop.domain.scheduling.repositories.snapshot_repository import (
    SnapshotRepository,
)
from workshop.domain.shared.exceptions import SnapshotAlreadyExists
from workshop.infrastructure.database.mappers import SnapshotMapper
from workshop.infrastructure.database.models import WorkshopSnapshotRecord

from .base import DatabaseError, SqlRepository


class SqlSnapshotRepository(SqlRepository, SnapshotRepository):
    def find_by_date(self, snapshot_date: date) -> WorkshopSnapshot | None:
        try:
            record = self.session.exec(
                select(WorkshopSnapshotRecord).where(
                    WorkshopSnapshotRecord.date == snapshot_date
                )
            ).first()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error finding snapshot for {snapshot_date}: {str(e)}"
            ) from e
        return SnapshotMapper.sql_to_domain(record) if record else None

    def create(self, snapshot: WorkshopSnapshot) -> WorkshopSnapshot:
        try:
            self.session.add(SnapshotMapper.domain_to_sql(snapshot))
            self.session.flush()
        except IntegrityError as e:
            # Another close of the same day committed first
            raise SnapshotAlreadyExists(snapshot.date) from e
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error creating snapshot for {snapshot.date}: {str(e)}"
            ) from e
        return snapshot

    def list_all(self) -> list[WorkshopSnapshot]:
        try:
            records = self.session.exec(
                select(WorkshopSnapshotRecord).order_by(
                    WorkshopSnapshotRecord.date.desc()
                )
            ).all()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error listing snapshots: {str(e)}") from e
        return [SnapshotMapper.sql_to_domain(record) for record in records]
