"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from strafen_gateway.domain.interest import InterestCalculation


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding timestamp, level and service name to every record"""

    def __init__(self, *args: Any, service_name: str = "strafen-gateway", **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "strafen-gateway") -> None:
    """Configure structured JSON logging on the root logger"""
    logger = logging.getLogger()
    logger.setLevel(level)

    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s", service_name=service_name)
    )
    logger.addHandler(handler)


def log_interest_calculation(
    request_id: str,
    club_id: str,
    fine_id: str,
    calculation: InterestCalculation,
) -> None:
    """Log how the interest of a single fine was derived"""
    logging.info(
        "Interest calculated",
        extra={
            "request_id": request_id,
            "club_id": club_id,
            "fine_id": fine_id,
            "step": "interest_calculated",
            "periods": calculation.periods,
            "interest": calculation.interest.encode(),
            "compound_interest": (
                calculation.late_payment_interest.compound_interest
                if calculation.late_payment_interest
                else None
            ),
        },
    )


def log_interest_change(request_id: str, club_id: str, change_type: str, changed: bool) -> None:
    """Log an update or removal of a club's late payment interest"""
    logging.info(
        "Late payment interest changed",
        extra={
            "request_id": request_id,
            "club_id": club_id,
            "step": "interest_changed",
            "change_type": change_type,
            "changed": changed,
        },
    )
