"""Tests for structured logging."""

import structlog

from huddle.observability.logging import PIIRedactor, get_logger, setup_logging


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_json_format(self) -> None:
        """Should configure JSON format for production."""
        setup_logging(level="INFO", format="json", redact_pii=False)
        get_logger("test").info("test_message")

    def test_setup_console_format(self) -> None:
        """Should configure console format for development."""
        setup_logging(level="DEBUG", format="console", redact_pii=False)
        get_logger("test").debug("test_message")

    def test_setup_with_pii_redaction(self) -> None:
        setup_logging(level="INFO", format="json", redact_pii=True)
        get_logger("test").info("test_message", contact="user@example.com")


class TestPIIRedactor:
    """Tests for PIIRedactor processor."""

    def test_redacts_sensitive_keys(self) -> None:
        redactor = PIIRedactor()

        result = redactor(None, "info", {"event": "x", "contact": "a@b.io", "api_token": "t"})

        assert result["contact"] == "[REDACTED]"
        assert result["api_token"] == "[REDACTED]"

    def test_scrubs_emails_in_values(self) -> None:
        redactor = PIIRedactor()

        result = redactor(
            None,
            "info",
            {"event": "x", "error": "no user alice@example.com", "nested": {"to": ["bob@example.com"]}},
        )

        assert result["error"] == "no user [EMAIL]"
        assert result["nested"] == {"to": ["[EMAIL]"]}

    def test_leaves_other_values(self) -> None:
        result = PIIRedactor()(None, "info", {"event": "run_started", "participants": 3})

        assert result == {"event": "run_started", "participants": 3}


class TestContextBinding:
    """Tests for context binding via structlog.contextvars."""

    def test_bound_contextvars(self) -> None:
        with structlog.contextvars.bound_contextvars(thread_id="t-1"):
            assert structlog.contextvars.get_contextvars()["thread_id"] == "t-1"
        assert "thread_id" not in structlog.contextvars.get_contextvars()
