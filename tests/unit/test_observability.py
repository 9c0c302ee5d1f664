"""Unit tests for structured logging"""

import json
import logging
import pytest
from budget_notifier.infrastructure.observability.logging import (
    log_ai_fallback,
    log_notification_scheduled,
    setup_logging,
)


@pytest.fixture
def json_logging(capsys):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    # Handler binds sys.stdout now, after capsys has replaced it
    setup_logging("INFO")
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def test_fallback_log_is_json(json_logging, capsys):
    log_ai_fallback("categorize_transaction", "timeout", "Completion API timeout after 5.0s")

    record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert record["level"] == "WARNING"
    assert record["service"] == "budget-notifier"
    assert record["message"] == "AI Service: Completion API timeout after 5.0s"
    assert record["operation"] == "categorize_transaction"
    assert record["reason"] == "timeout"


def test_scheduled_log_fields(json_logging, capsys):
    log_notification_scheduled("abc-123", "bill-reminder", 3600)

    record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert record["notification_id"] == "abc-123"
    assert record["kind"] == "bill-reminder"
    assert record["delay_seconds"] == 3600
