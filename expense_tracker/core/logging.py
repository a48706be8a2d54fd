"""JSON logging with request context.

Every record carries the service name and, while a request is being handled,
the request id set by ``RequestIDMiddleware``. Account ids are passed per call
through ``extra={"account_id": ...}``.
"""

import logging
import sys
from contextvars import ContextVar
from datetime import datetime
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from expense_tracker.core.config import settings

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

LOG_FORMAT = "%(timestamp)s %(level)s %(name)s %(message)s"


class ExpenseTrackerJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.utcnow().isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name

        # an explicit extra={"request_id": ...} wins
        request_id = request_id_var.get()
        if request_id and "request_id" not in log_record:
            log_record["request_id"] = request_id


def setup_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ExpenseTrackerJsonFormatter(LOG_FORMAT))
    root.addHandler(handler)

    # uvicorn's access log duplicates RequestIDMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
