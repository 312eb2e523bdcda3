"""
SQLModel table definitions for the scheduling domain.

These tables are persistence shapes only; repositories translate them to and
from the domain aggregates through the mappers. Work content, history links
and snapshot payloads are stored as JSON columns.
"""

import datetime as dt
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class TimestampedModel(SQLModel):
    """Base model with timestamp fields."""

    created_at: dt.datetime = Field(default_factory=_utc_now)
    updated_at: dt.datetime | None = None


class JobOrderRecord(TimestampedModel, table=True):
    """
    One job order row.

    ``seq`` preserves insertion order for queue tie-breaking and listing;
    ``version`` is the optimistic concurrency token.
    """

    __tablename__ = "job_orders"
    __table_args__ = (
        UniqueConstraint("job_number", "date", name="uq_job_orders_number_date"),
    )

    seq: int | None = Field(default=None, primary_key=True)
    id: UUID = Field(default_factory=uuid4, unique=True, index=True)

    job_number: str = Field(max_length=50, index=True)
    plate_number: str = Field(max_length=20)
    vin: str = Field(default="", max_length=17)

    assigned_technician: UUID | None = Field(default=None, index=True)
    service_advisor: UUID | None = None
    created_by: UUID

    date: dt.date = Field(index=True)
    start_time: str = Field(default="00:00", max_length=5)
    end_time: str = Field(default="00:00", max_length=5)
    actual_end_time: str | None = Field(default=None, max_length=5)

    job_list: list[dict] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    parts: list[dict] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    status: str = Field(max_length=2, index=True)
    qi_status: str | None = Field(default=None, max_length=10)
    hold_customer_remarks: str | None = None
    sublet_remarks: str | None = None

    source_type: str = Field(default="direct", max_length=20)
    carried_over: bool = False
    original_created_date: dt.date | None = None
    is_important: bool = False
    origin_job_id: UUID | None = None
    origin_links: list[dict] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )

    version: int = 0


class AppointmentRecord(TimestampedModel, table=True):
    __tablename__ = "appointments"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    plate_number: str = Field(max_length=20)
    assigned_technician: UUID = Field(index=True)
    date: dt.date = Field(index=True)
    start_time: str = Field(max_length=5)
    end_time: str = Field(max_length=5)
    created_by: UUID
    no_show: bool = False


class WorkshopSnapshotRecord(SQLModel, table=True):
    """Write-once day snapshot; the unique date makes a second close fail."""

    __tablename__ = "workshop_snapshots"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    date: dt.date = Field(unique=True, index=True)
    snapshot_date: dt.datetime = Field(default_factory=_utc_now)
    payload: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))


class SlotReservationRecord(SQLModel, table=True):
    """
    One booked grid cell.

    The unique key is the storage-level guard against double-booking.
    """

    __tablename__ = "slot_reservations"
    __table_args__ = (
        UniqueConstraint(
            "technician_id", "date", "slot_index", name="uq_slot_reservations_cell"
        ),
    )

    id: int | None = Field(default=None, primary_key=True)
    owner_id: UUID = Field(index=True)
    owner_type: str = Field(max_length=20)
    technician_id: UUID
    date: dt.date
    slot_index: int
