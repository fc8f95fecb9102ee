"""Structured logging for the account directory.

All modules log through structlog with snake_case event names and keyword
context. Account contact details (emails, phone numbers) are account data
and are masked before rendering unless redaction is switched off.
"""

import logging
import re
import sys
from collections.abc import Iterable, Mapping
from typing import Any, cast

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Compared lowercased against event keys at any nesting depth
SENSITIVE_KEYS: frozenset[str] = frozenset({
    "password",
    "secret",
    "token",
    "authorization",
    "dsn",
    "connection_url",
    "email",
    "accountemail",
    "account_email",
    "phone",
})

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
# Digit runs glued to letters, digits or hyphens (dates, UUID groups) are not phones
PHONE_PATTERN = re.compile(r"(?<![\w-])\+?\d[\d\s\-\(\)]{8,}\d(?![\w-])")

# Values under these keys are never pattern scanned
UNSCANNED_KEYS: frozenset[str] = frozenset({"timestamp", "level", "id"})

REDACTED = "[REDACTED]"


def _is_unscanned(key: str) -> bool:
    return key.lower() in UNSCANNED_KEYS or key.endswith(("_id", "Id"))


class PIIRedactor:
    """structlog processor masking account contact details.

    Values under a sensitive key are replaced wholesale. Other strings are
    scanned and email or phone shaped fragments are substituted.
    Timestamps and identifiers (keys such as primary_id or externalId)
    pass through untouched.

    Args:
        keys: Key names to mask, defaults to SENSITIVE_KEYS
    """

    def __init__(self, keys: Iterable[str] | None = None) -> None:
        self._keys = frozenset(k.lower() for k in (keys or SENSITIVE_KEYS))

    def __call__(
        self, _logger: WrappedLogger, _method_name: str, event_dict: EventDict
    ) -> EventDict:
        return cast(EventDict, self._scrub_mapping(event_dict))

    def _scrub_mapping(self, data: Mapping[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, value in data.items():
            if key.lower() in self._keys:
                result[key] = REDACTED
            elif _is_unscanned(key):
                result[key] = value
            else:
                result[key] = self._scrub(value)
        return result

    def _scrub(self, value: Any) -> Any:
        if isinstance(value, str):
            return PHONE_PATTERN.sub("[PHONE]", EMAIL_PATTERN.sub("[EMAIL]", value))
        if isinstance(value, Mapping):
            return self._scrub_mapping(value)
        if isinstance(value, list | tuple):
            return [self._scrub(item) for item in value]
        return value


def _level_number(level: str) -> int:
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def _renderer(format: str) -> Processor:
    if format == "console":
        return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    return structlog.processors.JSONRenderer()


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    redact_pii: bool = True,
) -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum level name, unknown names fall back to INFO
        format: "json" or "console"
        redact_pii: Mask emails and phone numbers before rendering
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if redact_pii:
        processors.append(PIIRedactor())
    processors.append(_renderer(format))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger named after the calling module."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
