"""
Tests for the logging processors.
"""

import structlog

from identity_api.utils.logging import (
    CorrelationIDProcessor,
    SensitiveDataProcessor,
    clear_correlation_id,
    set_correlation_id,
)


class TestSensitiveDataProcessor:
    """Test masking of secrets in log events."""

    def test_masks_sensitive_keys(self):
        processor = SensitiveDataProcessor()
        event = processor(None, "info", {
            "event": "login",
            "password": "Str0ng!Pass",
            "password_hash": "$2b$10$abc",
            "Authorization": "Bearer xyz",
            "email": "a@example.com",
        })

        assert event["password"] == "***MASKED***"
        assert event["password_hash"] == "***MASKED***"
        assert event["Authorization"] == "***MASKED***"
        assert event["email"] == "a@example.com"

    def test_masks_nested_values(self):
        processor = SensitiveDataProcessor()
        event = processor(None, "info", {
            "payload": {"access_token": "t", "user": {"jwt_secret": "s"}},
            "items": [{"token": "t"}, "plain"],
        })

        assert event["payload"]["access_token"] == "***MASKED***"
        assert event["payload"]["user"]["jwt_secret"] == "***MASKED***"
        assert event["items"] == [{"token": "***MASKED***"}, "plain"]


class TestCorrelationIDProcessor:
    """Test correlation ID propagation."""

    def test_reads_bound_context(self):
        set_correlation_id("abc-123")
        try:
            event = CorrelationIDProcessor()(None, "info", {"event": "x"})
        finally:
            clear_correlation_id()

        assert event["correlation_id"] == "abc-123"

    def test_absent_when_unbound(self):
        structlog.contextvars.clear_contextvars()
        event = CorrelationIDProcessor()(None, "info", {"event": "x"})
        assert "correlation_id" not in event
