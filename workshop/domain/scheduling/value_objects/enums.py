"""Domain enums for job order scheduling."""

from enum import Enum


class JobStatus(str, Enum):
    """Job order status enumeration."""

    UNASSIGNED = "UA"
    ON_GOING = "OG"
    WAITING_PARTS = "WP"
    QUALITY_INSPECTION = "QI"
    HOLD_CUSTOMER = "HC"
    HOLD_WARRANTY = "HW"
    HOLD_INSURANCE = "HI"
    HOLD_FORD = "HF"
    SUBLET = "SU"
    FOR_RELEASE = "FR"
    FINISHED_UNCLAIMED = "FU"
    COMPLETE = "CP"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def is_terminal(self) -> bool:
        """Check if job status is terminal (cannot transition further)."""
        return self is JobStatus.COMPLETE

    @property
    def is_active(self) -> bool:
        """Statuses from which any hold or sublet may be entered."""
        return self in ACTIVE_STATUSES

    @property
    def is_hold(self) -> bool:
        return self in HOLD_STATUSES

    @property
    def occupies_slot(self) -> bool:
        """Check if a job in this status holds a technician slot reservation."""
        return self in SLOT_OCCUPYING_STATUSES

    @property
    def is_open(self) -> bool:
        """Check if a job in this status rolls over at day close."""
        return self in OPEN_STATUSES

    @property
    def requires_remarks(self) -> bool:
        return self in {JobStatus.HOLD_CUSTOMER, JobStatus.SUBLET}

    def valid_transitions(self) -> frozenset["JobStatus"]:
        return _TRANSITIONS[self]

    def can_transition_to(self, target_status: "JobStatus") -> bool:
        """Check if job can transition from current status to target status."""
        return target_status in _TRANSITIONS[self]


HOLD_STATUSES = frozenset(
    {
        JobStatus.HOLD_CUSTOMER,
        JobStatus.HOLD_WARRANTY,
        JobStatus.HOLD_INSURANCE,
        JobStatus.HOLD_FORD,
        JobStatus.SUBLET,
    }
)

ACTIVE_STATUSES = frozenset(
    {
        JobStatus.ON_GOING,
        JobStatus.WAITING_PARTS,
        JobStatus.UNASSIGNED,
        JobStatus.QUALITY_INSPECTION,
        JobStatus.FOR_RELEASE,
    }
)

SLOT_OCCUPYING_STATUSES = frozenset(
    {JobStatus.ON_GOING, JobStatus.QUALITY_INSPECTION, JobStatus.FOR_RELEASE}
)

OPEN_STATUSES = frozenset(
    {
        JobStatus.ON_GOING,
        JobStatus.WAITING_PARTS,
        JobStatus.HOLD_CUSTOMER,
        JobStatus.HOLD_WARRANTY,
        JobStatus.HOLD_INSURANCE,
        JobStatus.HOLD_FORD,
        JobStatus.UNASSIGNED,
        JobStatus.SUBLET,
    }
)

_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.ON_GOING: HOLD_STATUSES
    | {JobStatus.WAITING_PARTS, JobStatus.UNASSIGNED, JobStatus.QUALITY_INSPECTION},
    JobStatus.WAITING_PARTS: HOLD_STATUSES | {JobStatus.UNASSIGNED},
    JobStatus.UNASSIGNED: HOLD_STATUSES | {JobStatus.ON_GOING, JobStatus.WAITING_PARTS},
    JobStatus.QUALITY_INSPECTION: HOLD_STATUSES
    | {JobStatus.FOR_RELEASE, JobStatus.UNASSIGNED, JobStatus.WAITING_PARTS},
    JobStatus.FOR_RELEASE: HOLD_STATUSES
    | {
        JobStatus.COMPLETE,
        JobStatus.FINISHED_UNCLAIMED,
        JobStatus.QUALITY_INSPECTION,
        JobStatus.WAITING_PARTS,
    },
    JobStatus.HOLD_CUSTOMER: frozenset(
        {JobStatus.ON_GOING, JobStatus.WAITING_PARTS, JobStatus.UNASSIGNED}
    ),
    JobStatus.HOLD_WARRANTY: frozenset(
        {JobStatus.ON_GOING, JobStatus.WAITING_PARTS, JobStatus.UNASSIGNED}
    ),
    JobStatus.HOLD_INSURANCE: frozenset(
        {JobStatus.ON_GOING, JobStatus.WAITING_PARTS, JobStatus.UNASSIGNED}
    ),
    JobStatus.HOLD_FORD: frozenset(
        {JobStatus.ON_GOING, JobStatus.WAITING_PARTS, JobStatus.UNASSIGNED}
    ),
    JobStatus.SUBLET: frozenset(
        {JobStatus.ON_GOING, JobStatus.WAITING_PARTS, JobStatus.UNASSIGNED}
    ),
    JobStatus.FINISHED_UNCLAIMED: frozenset({JobStatus.COMPLETE}),
    JobStatus.COMPLETE: frozenset(),  # Terminal state
}

_LABELS: dict[JobStatus, str] = {
    JobStatus.UNASSIGNED: "Unassigned",
    JobStatus.ON_GOING: "On Going",
    JobStatus.WAITING_PARTS: "Waiting Parts",
    JobStatus.QUALITY_INSPECTION: "Quality Inspection",
    JobStatus.HOLD_CUSTOMER: "On Hold - Customer",
    JobStatus.HOLD_WARRANTY: "On Hold - Warranty",
    JobStatus.HOLD_INSURANCE: "On Hold - Insurance",
    JobStatus.HOLD_FORD: "On Hold - Ford",
    JobStatus.SUBLET: "Sublet",
    JobStatus.FOR_RELEASE: "For Release",
    JobStatus.FINISHED_UNCLAIMED: "Finished Unclaimed",
    JobStatus.COMPLETE: "Complete",
}


class QIStatus(str, Enum):
    """Quality inspection outcome."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class JobItemStatus(str, Enum):
    FINISHED = "Finished"
    UNFINISHED = "Unfinished"


class PartAvailability(str, Enum):
    AVAILABLE = "Available"
    UNAVAILABLE = "Unavailable"


class SourceType(str, Enum):
    """How a job order record came to exist."""

    APPOINTMENT = "appointment"
    CARRY_OVER = "carry-over"
    DIRECT = "direct"


class ActorRole(str, Enum):
    """Roles of the actors calling the engine."""

    SUPERADMIN = "superadmin"
    ADMINISTRATOR = "administrator"
    JOB_CONTROLLER = "job-controller"
    TECHNICIAN = "technician"
    SERVICE_ADVISOR = "service-advisor"


class ReservationOwner(str, Enum):
    """Kind of record holding a technician slot."""

    JOB_ORDER = "job_order"
    APPOINTMENT = "appointment"
