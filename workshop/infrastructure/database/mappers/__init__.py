"""
Mappers for converting between domain aggregates and SQL rows.
"""

from .appointment_mapper import AppointmentMapper
from .job_order_mapper import JobOrderMapper, ensure_utc
from .snapshot_mapper import SnapshotMapper

__all__ = ["AppointmentMapper", "JobOrderMapper", "SnapshotMapper", "ensure_utc"]
