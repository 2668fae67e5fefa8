"""Structured JSON logging configuration using structlog with rotation.

Combines structlog for structured logging with sensitive data masking
(CWE-532 mitigation): values under sensitive keys are masked and
token/password patterns inside free text are redacted.

Author: Barangay Platform Team
Version: 1.0.0
"""

import logging
import re
import sys
from collections.abc import Iterable
from logging.handlers import RotatingFileHandler
from typing import Any

import structlog

from barangay_api.config.settings import Settings, split_csv
from barangay_api.config.settings import settings as default_settings
from barangay_api.security.config import DEFAULT_SENSITIVE_FIELDS, MASK_LITERAL
from barangay_api.security.policies import is_sensitive_key, mask_sensitive_data

# ============================================================================
# SENSITIVE DATA SANITIZATION (CWE-532 mitigation)
# ============================================================================

SENSITIVE_PATTERNS: dict[str, tuple[str, str]] = {
    "jwt": (r"\beyJ[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}", "[JWT_REDACTED]"),
    "bearer_token": (r"Bearer\s+[A-Za-z0-9_\-\.]+", "Bearer [TOKEN_REDACTED]"),
    "password": (
        r'(?i)(?:password|passwd|pwd)["\']?\s*[:=]\s*["\']?([^\s"\']+)',
        r"password=[PASSWORD_REDACTED]",
    ),
    "db_connection": (r"postgres(?:ql)?://([^:]+):([^@]+)@", r"postgresql://[USER]:[PASSWORD]@"),
}


def redact_text(message: str) -> str:
    """Redact token and password patterns from free text."""
    for _pattern_name, (regex, replacement) in SENSITIVE_PATTERNS.items():
        message = re.sub(regex, replacement, message, flags=re.IGNORECASE)
    return message


def _redact_strings(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _redact_strings(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_redact_strings(item) for item in value]
    if isinstance(value, str):
        return redact_text(value)
    return value


def sanitize_for_logging(
    value: Any, sensitive_fields: Iterable[str] = DEFAULT_SENSITIVE_FIELDS
) -> Any:
    """Mask sensitive keys and redact sensitive text, keeping the structure."""
    return _redact_strings(mask_sensitive_data(value, sensitive_fields))


class SensitiveDataProcessor:
    """Structlog processor to sanitize sensitive data from event dictionaries.

    Attributes:
        sensitive_fields: Lowercase key substrings whose values are masked
    """

    def __init__(self, sensitive_fields: Iterable[str] = DEFAULT_SENSITIVE_FIELDS):
        self.sensitive_fields = tuple(f.lower() for f in sensitive_fields)

    def __call__(
        self, _logger: Any, _method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        for key, value in list(event_dict.items()):
            if key != "event" and is_sensitive_key(key, self.sensitive_fields):
                event_dict[key] = MASK_LITERAL
            elif isinstance(value, str | dict | list | tuple):
                event_dict[key] = sanitize_for_logging(value, self.sensitive_fields)
        return event_dict


sanitize_event_dict = SensitiveDataProcessor()


# ============================================================================
# LOGGING SETUP
# ============================================================================

BYTES_PER_MB = 1024 * 1024

_logging_configured = False


def setup_logging(
    app_settings: Settings | None = None,
    sensitive_fields: Iterable[str] | None = None,
    force: bool = False,
) -> None:
    """Configure structured logging with rotation and sensitive data sanitization.

    Logging is process-wide: the first call wins unless ``force`` is set.

    Args:
        app_settings: Level, console and file options (defaults to the
            environment-derived singleton).
        sensitive_fields: Key substrings masked in every event (defaults to
            ``SENSITIVE_FIELDS`` from the settings).
        force: Reconfigure even if logging was already set up.
    """
    global _logging_configured  # noqa: PLW0603
    if _logging_configured and not force:
        return
    _logging_configured = True

    settings = app_settings or default_settings
    if sensitive_fields is None:
        sensitive_fields = split_csv(settings.sensitive_fields)

    log_level = getattr(logging, settings.log_level, logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        SensitiveDataProcessor(sensitive_fields),  # type: ignore[list-item]
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=shared_processors,
    )

    console_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(colors=True),
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if settings.log_console_enabled:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(console_formatter)
        console_handler.setLevel(log_level)
        root_logger.addHandler(console_handler)

    if settings.log_to_file:
        log_dir = settings.log_dir
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=log_dir / "barangay-api.log",
            maxBytes=settings.log_file_max_mb * BYTES_PER_MB,
            backupCount=settings.log_file_backup_count,
            encoding="utf-8",
        )
        file_formatter = json_formatter if settings.log_json_format else console_formatter
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)  # type: ignore[no-any-return]
