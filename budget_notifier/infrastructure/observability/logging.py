"""Structured JSON logging"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from budget_notifier.config import settings

logger = logging.getLogger("budget_notifier")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str | None = None) -> None:
    """Configure structured JSON logging"""
    root = logging.getLogger()
    root.setLevel(level or settings.log_level)

    # Remove existing handlers
    root.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)


def log_ai_fallback(operation: str, reason: str, message: str) -> None:
    """Log a completion failure that was answered by a fallback"""
    logger.warning(
        f"AI Service: {message}",
        extra={
            "step": "ai_fallback",
            "operation": operation,
            "reason": reason,
        },
    )


def log_notification_scheduled(identifier: str, kind: str | None, delay_seconds: int) -> None:
    """Log a notification accepted by the substrate"""
    logger.info(
        "Notification scheduled",
        extra={
            "step": "notification_scheduled",
            "notification_id": identifier,
            "kind": kind,
            "delay_seconds": delay_seconds,
        },
    )
