"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args, service_name: str = "credit-health-gateway", **kwargs):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "credit-health-gateway") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_plan_outcome(
    request_id: str,
    user_id: str,
    outcome: str,
    duration_ms: float,
) -> None:
    """Log structured plan generation outcome"""
    logging.info(
        "Plan generation completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "plan_complete",
            "plan_outcome": outcome,
            "duration_ms": duration_ms,
        },
    )


def log_refresh_decision(
    request_id: str,
    user_id: str,
    allowed: bool,
    remaining_minutes: int | None = None,
) -> None:
    """Log account refresh admission decision"""
    logging.info(
        "Refresh admission decided",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "refresh_admission",
            "refresh_outcome": "allowed" if allowed else "rate_limited",
            "remaining_minutes": remaining_minutes,
        },
    )
