"""
Observability: structured logging and the audit trail.

Structured logging through structlog on top of the standard library. Modules
log through ``logging.getLogger(__name__)``; lifecycle and scheduling decisions
are written to the ``workshop.audit`` logger as structured records.
"""

import logging
import sys
from typing import Any

import structlog

from .config import settings

AUDIT_LOGGER_NAME = "workshop.audit"


def setup_logging() -> None:
    """Configure structlog and the standard library root logger."""
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
    ]

    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=settings.ENVIRONMENT == "local")
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    if settings.LOG_SQL:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
    else:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def get_audit_logger() -> structlog.BoundLogger:
    return get_logger(AUDIT_LOGGER_NAME)


def audit(action: str, actor_id: Any = None, **context: Any) -> None:
    """Write one audit record for a state-changing action."""
    get_audit_logger().info(
        action,
        actor_id=str(actor_id) if actor_id is not None else None,
        **{key: _stringify(value) for key, value in context.items()},
    )


def _stringify(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if hasattr(value, "value"):
        return value.value
    return str(value)
