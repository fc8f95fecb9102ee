"""Tests for structured logging."""

import json
from datetime import datetime

import structlog

from accountdir.observability.logging import PIIRedactor, get_logger, setup_logging


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_json_output(self, capsys) -> None:
        """JSON renderer writes one object per event to stderr."""
        setup_logging(level="INFO", format="json", redact_pii=False)
        get_logger("test").info("account_created", primary_id="abc")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "account_created"
        assert event["primary_id"] == "abc"
        assert event["level"] == "info"
        assert "timestamp" in event

    def test_level_filtering(self, capsys) -> None:
        setup_logging(level="WARNING", format="json", redact_pii=False)
        get_logger("test").info("hidden")
        assert "hidden" not in capsys.readouterr().err

    def test_console_format(self, capsys) -> None:
        setup_logging(level="DEBUG", format="console", redact_pii=False)
        get_logger("test").debug("console_event")
        assert "console_event" in capsys.readouterr().err

    def test_redaction_enabled(self, capsys) -> None:
        setup_logging(level="INFO", format="json", redact_pii=True)
        get_logger("test").info("account_created", accountEmail="a@acme.com")

        event = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert event["accountEmail"] == "[REDACTED]"

    def test_redaction_keeps_timestamp_and_ids(self, capsys) -> None:
        """Dates and UUIDs are not mistaken for phone numbers."""
        primary_id = "123e4567-e89b-12d3-a456-426614174000"
        setup_logging(level="INFO", format="json", redact_pii=True)
        get_logger("test").info("account_created", primary_id=primary_id)

        event = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert event["primary_id"] == primary_id
        assert "[PHONE]" not in event["timestamp"]
        assert datetime.fromisoformat(event["timestamp"])

    def test_contextvars_merged(self, capsys) -> None:
        setup_logging(level="INFO", format="json", redact_pii=False)
        structlog.contextvars.bind_contextvars(request_id="req-1")
        get_logger("test").info("with_context")

        event = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert event["request_id"] == "req-1"


class TestPIIRedactor:
    """Tests for PIIRedactor processor."""

    def setup_method(self) -> None:
        self.redactor = PIIRedactor()

    def test_sensitive_keys(self) -> None:
        result = self.redactor(
            None, "info", {"event": "x", "phone": "555-0100", "account_email": "a@b.co"}
        )
        assert result["phone"] == "[REDACTED]"
        assert result["account_email"] == "[REDACTED]"
        assert result["event"] == "x"

    def test_patterns_in_strings(self) -> None:
        result = self.redactor(
            None, "info", {"event": "x", "message": "contact a@acme.com or +1 555 010 0199"}
        )
        assert result["message"] == "contact [EMAIL] or [PHONE]"

    def test_identifier_keys_not_scanned(self) -> None:
        result = self.redactor(
            None,
            "info",
            {"event": "x", "request_id": "5550100199", "externalId": "0015500001234567"},
        )
        assert result["request_id"] == "5550100199"
        assert result["externalId"] == "0015500001234567"

    def test_uuid_inside_string_untouched(self) -> None:
        path = "/accounts/123e4567-e89b-12d3-a456-426614174000"
        result = self.redactor(None, "info", {"event": "x", "path": path})
        assert result["path"] == path

    def test_nested_values(self) -> None:
        result = self.redactor(
            None,
            "info",
            {"event": "x", "payload": {"accountEmail": "a@b.co", "notes": ["a@b.co"]}},
        )
        assert result["payload"]["accountEmail"] == "[REDACTED]"
        assert result["payload"]["notes"] == ["[EMAIL]"]

    def test_non_string_values_untouched(self) -> None:
        result = self.redactor(None, "info", {"event": "x", "modified": 1})
        assert result["modified"] == 1

    def test_custom_keys(self) -> None:
        redactor = PIIRedactor(keys={"CRM_Token"})
        result = redactor(None, "info", {"event": "x", "crm_token": "t", "phone": "1"})
        assert result["crm_token"] == "[REDACTED]"
        assert result["phone"] == "1"

    def test_unknown_level_falls_back_to_info(self, capsys) -> None:
        setup_logging(level="chatty", format="json", redact_pii=False)
        get_logger("test").debug("hidden")
        get_logger("test").info("shown")
        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err
