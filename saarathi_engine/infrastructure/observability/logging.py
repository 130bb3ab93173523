"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from saarathi_engine.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_projection(
    request_id: str,
    owner_id: str,
    horizon_days: int,
    first_problem_date: Optional[str],
    duration_ms: float,
) -> None:
    """Log structured projection outcome"""
    logging.info(
        "Projection completed",
        extra={
            "request_id": request_id,
            "owner_id": owner_id,
            "step": "projection_complete",
            "horizon_days": horizon_days,
            "first_problem_date": first_problem_date,
            "duration_ms": duration_ms,
        },
    )


def log_health_score(request_id: str, owner_id: str, score: int, status: str, duration_ms: float) -> None:
    logging.info(
        "Health score computed",
        extra={
            "request_id": request_id,
            "owner_id": owner_id,
            "step": "health_score_complete",
            "score": score,
            "health_status": status,
            "duration_ms": duration_ms,
        },
    )


def log_payment(
    request_id: str,
    receivable_id: str,
    amount: int,
    status: str,
    applied: bool,
) -> None:
    """Log payment application against a receivable"""
    logging.info(
        "Payment applied" if applied else "Payment ignored for settled receivable",
        extra={
            "request_id": request_id,
            "receivable_id": receivable_id,
            "step": "payment_applied",
            "amount": amount,
            "receivable_status": status,
        },
    )
