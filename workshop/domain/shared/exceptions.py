"""
Domain Exceptions

Typed errors raised by the scheduling and lifecycle engine. Every rejected
operation carries enough context in ``details`` for a caller to re-render the
decision (conflicting booking, failed precondition, missing remarks).
"""

from datetime import date
from enum import Enum
from typing import Any
from uuid import UUID


class ErrorType(str, Enum):
    """Error type enumeration for discriminated unions."""

    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_CONFLICT = "resource_conflict"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    REPOSITORY = "repository"
    CONCURRENCY = "concurrency"


class DomainError(Exception):
    """Base class for all domain errors with type discrimination."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "type": self.error_type.value,
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainError):
    """Raised when domain validation rules are violated."""

    def __init__(
        self,
        field_name: str,
        value: Any,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.field_name = field_name
        self.value = value
        details = details or {}
        details.update(
            {"field": field_name, "value": str(value) if value is not None else None}
        )
        super().__init__(
            f"Validation failed for field '{field_name}': {message}",
            ErrorType.VALIDATION,
            details,
        )


class InvalidTimeFormat(ValidationError):
    """Raised when a wall-clock value is not a valid ``HH:MM`` string."""

    def __init__(self, value: Any) -> None:
        super().__init__("time", value, "expected a 24h HH:MM string")


class InvalidInterval(ValidationError):
    """Raised when an interval ends at or before its start."""

    def __init__(self, start: str, end: str, message: str | None = None) -> None:
        self.start = start
        self.end = end
        super().__init__(
            "time_range",
            f"{start}-{end}",
            message or "end must be after start",
            {"start": start, "end": end},
        )


class DuplicateJobNumber(ValidationError):
    """Raised when a job number is already used on the same business day."""

    def __init__(self, job_number: str, on_date: date) -> None:
        super().__init__(
            "job_number",
            job_number,
            f"job number already exists on {on_date.isoformat()}",
            {"date": on_date.isoformat()},
        )


class BusinessRuleError(DomainError):
    """Raised when business rules are violated."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, ErrorType.BUSINESS_RULE, details)


class InvalidTransition(BusinessRuleError):
    """Raised when a status change is not in the transition table."""

    def __init__(
        self, job_id: UUID, current_status: str, attempted_status: str, reason: str = ""
    ) -> None:
        self.job_id = job_id
        self.current_status = current_status
        self.attempted_status = attempted_status
        message = f"Cannot transition job {job_id} from {current_status} to {attempted_status}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message,
            {
                "job_id": str(job_id),
                "current_status": current_status,
                "attempted_status": attempted_status,
            },
        )


class PreconditionFailed(BusinessRuleError):
    """Raised when a guarded operation's precondition does not hold."""

    def __init__(
        self,
        message: str,
        precondition: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.precondition = precondition
        details = details or {}
        details["precondition"] = precondition
        super().__init__(message, details)


class MissingRemarks(PreconditionFailed):
    """Raised when HoldCustomer or Sublet is entered without remarks."""

    def __init__(self, status: str, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(
            f"Remarks are required when entering {status}",
            "remarks_required",
            {"status": status, "field": field_name},
        )


class ResourceConflictError(DomainError):
    """Raised when resource conflicts occur (double booking, etc.)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, ErrorType.RESOURCE_CONFLICT, details)


class ConflictError(ResourceConflictError):
    """Raised when a technician interval is already taken."""

    def __init__(
        self,
        technician_id: UUID,
        on_date: date,
        start: str,
        end: str,
        conflicts: list[dict[str, Any]] | None = None,
        message: str | None = None,
    ) -> None:
        self.technician_id = technician_id
        self.date = on_date
        self.start = start
        self.end = end
        self.conflicts = conflicts or []
        super().__init__(
            message
            or f"Technician {technician_id} is not available on "
            f"{on_date.isoformat()} {start}-{end}",
            {
                "technician_id": str(technician_id),
                "date": on_date.isoformat(),
                "start": start,
                "end": end,
                "conflicts": self.conflicts,
            },
        )


class DailyLimitExceeded(ConflictError):
    """Raised when a booking would push a technician past the daily limit."""

    def __init__(
        self,
        technician_id: UUID,
        on_date: date,
        start: str,
        end: str,
        booked_minutes: int,
        limit_minutes: int,
    ) -> None:
        self.booked_minutes = booked_minutes
        self.limit_minutes = limit_minutes
        super().__init__(
            technician_id,
            on_date,
            start,
            end,
            [
                {
                    "type": "daily_limit",
                    "booked_minutes": booked_minutes,
                    "limit_minutes": limit_minutes,
                }
            ],
            message=(
                f"Technician {technician_id} would exceed the daily limit of "
                f"{limit_minutes} minutes on {on_date.isoformat()}"
            ),
        )


class NotFound(DomainError):
    """Raised when a job order, appointment or snapshot is absent."""

    def __init__(self, entity_type: str, identifier: Any) -> None:
        self.entity_type = entity_type
        self.identifier = identifier
        super().__init__(
            f"{entity_type} not found: {identifier}",
            ErrorType.NOT_FOUND,
            {"entity_type": entity_type, "identifier": str(identifier)},
        )


class SnapshotAlreadyExists(DomainError):
    """Raised when a day has already been closed."""

    def __init__(self, snapshot_date: date) -> None:
        self.snapshot_date = snapshot_date
        super().__init__(
            f"Snapshot for {snapshot_date.isoformat()} already exists",
            ErrorType.RESOURCE_CONFLICT,
            {"date": snapshot_date.isoformat()},
        )


class Forbidden(DomainError):
    """Raised when the actor's role may not perform the requested action."""

    def __init__(self, role: str, action: str) -> None:
        self.role = role
        self.action = action
        super().__init__(
            f"Role '{role}' is not permitted to {action}",
            ErrorType.FORBIDDEN,
            {"role": role, "action": action},
        )


class ConcurrencyError(DomainError):
    """Raised when an aggregate was modified by another writer."""

    def __init__(self, entity_type: str, entity_id: UUID, expected_version: int) -> None:
        self.entity_id = entity_id
        self.expected_version = expected_version
        super().__init__(
            f"{entity_type} {entity_id} was modified concurrently "
            f"(expected version {expected_version})",
            ErrorType.CONCURRENCY,
            {
                "entity_type": entity_type,
                "entity_id": str(entity_id),
                "expected_version": expected_version,
            },
        )
