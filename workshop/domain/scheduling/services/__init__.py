from .conflict_detector import ConflictDetector
from .lifecycle_policy import (
    LifecycleAction,
    action_for_transition,
    authorize,
    is_permitted,
)
from .status_queue_projector import StatusQueues, project_queues, queue_order_key

__all__ = [
    "ConflictDetector",
    "LifecycleAction",
    "StatusQueues",
    "action_for_transition",
    "authorize",
    "is_permitted",
    "project_queues",
    "queue_order_key",
]
