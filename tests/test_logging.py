"""
Tests for structured logging

Tests:
- JSON formatter fields
- Redaction of sensitive keys
"""
import json
import logging

from ispdesk.shared.infrastructure.logging import CustomJsonFormatter


def format_record(**extra):
    formatter = CustomJsonFormatter("%(name)s %(levelname)s %(message)s", environment="staging")
    record = logging.LogRecord("ispdesk.tickets", logging.INFO, __file__, 1, "Ticket escalated", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return json.loads(formatter.format(record))


class TestCustomJsonFormatter:
    """Test CustomJsonFormatter"""

    def test_standard_fields(self):
        payload = format_record(ticket_id="t-1", correlation_id="req-9")

        assert payload["message"] == "Ticket escalated"
        assert payload["environment"] == "staging"
        assert payload["ticket_id"] == "t-1"
        assert payload["correlation_id"] == "req-9"
        assert payload["timestamp"]

    def test_sensitive_values_redacted(self):
        payload = format_record(webhook_secret="s3cr3t", authorization="Bearer abc")

        assert payload["webhook_secret"] == "***REDACTED***"
        assert payload["authorization"] == "***REDACTED***"
