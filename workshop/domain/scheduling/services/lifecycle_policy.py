"""
Lifecycle role policy.

Authorization is decided outside the engine; this table is a second line of
defense so a caller cannot push a transition its role never allows.
"""

from enum import Enum

from workshop.domain.shared.exceptions import Forbidden

from ..value_objects.enums import ActorRole, JobStatus


class LifecycleAction(str, Enum):
    """Operations gated by actor role."""

    TRANSITION_STATUS = "transition_status"
    SUBMIT_FOR_QI = "submit_for_qi"
    APPROVE_QI = "approve_qi"
    REJECT_QI = "reject_qi"
    COMPLETE_JOB = "complete_job"
    REDO_JOB = "redo_job"
    EDIT_WORK = "edit_work"
    UPDATE_TASK = "update_task"
    CREATE_JOB = "create_job"
    PLOT = "plot"
    REASSIGN = "reassign"
    MANAGE_APPOINTMENTS = "manage_appointments"
    END_OF_DAY = "end_of_day"


_ALL_ACTIONS = frozenset(LifecycleAction)

ROLE_PERMISSIONS: dict[ActorRole, frozenset[LifecycleAction]] = {
    ActorRole.SUPERADMIN: _ALL_ACTIONS,
    ActorRole.ADMINISTRATOR: _ALL_ACTIONS,
    ActorRole.JOB_CONTROLLER: _ALL_ACTIONS,
    ActorRole.TECHNICIAN: frozenset(
        {LifecycleAction.SUBMIT_FOR_QI, LifecycleAction.UPDATE_TASK}
    ),
    ActorRole.SERVICE_ADVISOR: frozenset(),
}


def is_permitted(role: ActorRole, action: LifecycleAction) -> bool:
    return action in ROLE_PERMISSIONS.get(role, frozenset())


def authorize(role: ActorRole | str, action: LifecycleAction) -> None:
    """
    Raise Forbidden unless ``role`` may perform ``action``.

    Args:
        role: Actor role, enum or raw string
        action: Requested operation

    Raises:
        Forbidden: If the role is unknown or lacks the permission
    """
    try:
        role = ActorRole(role)
    except ValueError:
        raise Forbidden(str(role), action.value) from None
    if not is_permitted(role, action):
        raise Forbidden(role.value, action.value)


def action_for_transition(current: JobStatus, target: JobStatus) -> LifecycleAction:
    """Map a raw status change onto the named operation it amounts to."""
    if target is JobStatus.QUALITY_INSPECTION:
        if current is JobStatus.FOR_RELEASE:
            return LifecycleAction.REDO_JOB
        return LifecycleAction.SUBMIT_FOR_QI
    if current is JobStatus.QUALITY_INSPECTION:
        if target is JobStatus.FOR_RELEASE:
            return LifecycleAction.APPROVE_QI
        if target is JobStatus.UNASSIGNED:
            return LifecycleAction.REJECT_QI
    if target in (JobStatus.COMPLETE, JobStatus.FINISHED_UNCLAIMED):
        return LifecycleAction.COMPLETE_JOB
    return LifecycleAction.TRANSITION_STATUS
