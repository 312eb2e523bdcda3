"""
Tests for logging setup and the audit trail.
"""

import logging

import pytest
import structlog
from structlog.testing import capture_logs

from workshop.core import observability
from workshop.core.config import settings


@pytest.fixture
def restore_logging():
    sql_logger = logging.getLogger("sqlalchemy.engine")
    level = sql_logger.level
    yield
    structlog.reset_defaults()
    sql_logger.setLevel(level)


class TestSetupLogging:
    """Test that settings drive the logging configuration."""

    @pytest.mark.parametrize(
        "log_sql, expected", [(True, logging.INFO), (False, logging.WARNING)]
    )
    def test_sql_echo(self, monkeypatch, restore_logging, log_sql, expected):
        monkeypatch.setattr(settings, "LOG_SQL", log_sql)

        observability.setup_logging()

        assert logging.getLogger("sqlalchemy.engine").level == expected

    def test_json_renderer(self, monkeypatch, restore_logging):
        monkeypatch.setattr(settings, "LOG_FORMAT", "json")

        observability.setup_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)


class TestAudit:
    """Test audit records."""

    def test_values_are_flattened(self):
        with capture_logs() as logs:
            observability.audit("job_order.created", None, count=2, status=None)

        (record,) = logs
        assert record["event"] == "job_order.created"
        assert record["actor_id"] is None
        assert record["count"] == 2
