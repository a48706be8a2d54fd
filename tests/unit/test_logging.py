"""Tests for the JSON log formatter"""

import json
import logging

from expense_tracker.core.config import settings
from expense_tracker.core.logging import ExpenseTrackerJsonFormatter, LOG_FORMAT, request_id_var


def _format(**extra) -> dict:
    record = logging.LogRecord("expense_tracker.test", logging.INFO, __file__, 1, "Loan repaid", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return json.loads(ExpenseTrackerJsonFormatter(LOG_FORMAT).format(record))


def test_record_carries_service_and_level():
    payload = _format(account_id="acc-1")

    assert payload["message"] == "Loan repaid"
    assert payload["level"] == "INFO"
    assert payload["service"] == settings.service_name
    assert payload["account_id"] == "acc-1"
    assert "request_id" not in payload


def test_request_id_comes_from_context():
    token = request_id_var.set("req-42")
    try:
        assert _format()["request_id"] == "req-42"
        assert _format(request_id="explicit")["request_id"] == "explicit"
    finally:
        request_id_var.reset(token)
