"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pythonjsonlogger import jsonlogger

from guidance_engine.config import settings
from guidance_engine.domain.models import Notification, SimulationSummary


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

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def _top_priority(notifications: List[Notification]) -> Optional[str]:
    if not notifications:
        return None
    return max(notifications, key=lambda n: n.priority.rank).priority.value


def log_evaluation(
    request_id: str,
    rule: str,
    notifications: List[Notification],
    duration_ms: float,
) -> None:
    """Log structured evaluation outcome for analysis"""
    logging.info(
        "Guidance evaluated",
        extra={
            "request_id": request_id,
            "step": "evaluation_complete",
            "rule": rule,
            "notification_count": len(notifications),
            "top_priority": _top_priority(notifications),
            "duration_ms": duration_ms,
        },
    )


def log_simulation(request_id: str, summary: SimulationSummary, duration_ms: float) -> None:
    """Log structured simulation outcome"""
    logging.info(
        "Transaction simulated",
        extra={
            "request_id": request_id,
            "step": "simulation_complete",
            "before_runway": summary.before_runway,
            "after_runway": summary.after_runway,
            "risk_count": len(summary.risks),
            "new_risk_count": len(summary.new_risk_ids),
            "top_priority": _top_priority(summary.risks),
            "duration_ms": duration_ms,
        },
    )
