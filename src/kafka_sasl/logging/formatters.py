"""Log formatters for JSON and console output."""

import json
import logging
import re
import sys
from datetime import UTC, datetime
from typing import Any

from kafka_sasl.logging.context import get_log_context


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter with context injection.

    Produces one JSON object per line for easy parsing with jq/grep.
    Redacts presigned query parameters so signatures and session tokens
    never reach log storage.
    """

    # Fields to extract from LogRecord extras
    EXTRA_FIELDS = [
        # Handshake
        "sasl_mechanism",
        "handshake_state",
        "from_state",
        "to_state",
        "broker_host",
        "broker_port",
        "region",
        "expiry_seconds",
        "step",
        "challenge_length",
        "response_length",
        "request_id",
        "duration_ms",
        # Credentials
        "auth_mode",
        "profile",
        # Errors
        "error_category",
        "error_message",
        "error",
        "error_type",
        # Config
        "config_path",
    ]

    NUMERIC_FIELDS = {
        "duration_ms": float,
        "expiry_seconds": int,
        "step": int,
        "challenge_length": int,
        "response_length": int,
    }

    # Pattern to match sensitive query parameters in presigned URLs
    SENSITIVE_PARAMS_PATTERN = re.compile(
        r"([?&])(X-Amz-Signature|X-Amz-Security-Token|X-Amz-Credential)=[^&]*",
        re.IGNORECASE,
    )

    def _sanitize_value(self, value: Any) -> Any:
        if isinstance(value, str):
            return self.SENSITIVE_PARAMS_PATTERN.sub(r"\1\2=[REDACTED]", value)
        return value

    def _ensure_type(self, field: str, value: Any) -> Any:
        if field not in self.NUMERIC_FIELDS or value is None:
            return value

        try:
            return self.NUMERIC_FIELDS[field](value)
        except (ValueError, TypeError):
            return None

    @staticmethod
    def _base_log_entry(record: logging.LogRecord) -> dict[str, Any]:
        return {
            "ts": datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

    @staticmethod
    def _inject_context(log_entry: dict[str, Any], log_context: dict[str, Any]) -> None:
        for field, value in log_context.items():
            if value:
                log_entry[field] = value

    @staticmethod
    def _should_include_source_location(record: logging.LogRecord) -> bool:
        return record.levelno in (logging.DEBUG, logging.ERROR, logging.CRITICAL)

    def _inject_extra_fields(self, log_entry: dict[str, Any], record: logging.LogRecord) -> None:
        for field in self.EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_entry[field] = self._sanitize_value(self._ensure_type(field, value))

    def _inject_exception(self, log_entry: dict[str, Any], record: logging.LogRecord) -> None:
        if not record.exc_info:
            return

        exc_type, exc_value, _ = record.exc_info
        log_entry["exception"] = {
            "type": exc_type.__name__ if exc_type else None,
            "message": str(exc_value) if exc_value else None,
            "stacktrace": self.formatException(record.exc_info),
        }

    def format(self, record: logging.LogRecord) -> str:
        log_entry = self._base_log_entry(record)
        log_entry["message"] = self._sanitize_value(log_entry["message"])

        self._inject_context(log_entry, get_log_context())

        if self._should_include_source_location(record):
            log_entry["file"] = f"{record.filename}:{record.lineno}"

        self._inject_extra_fields(log_entry, record)
        self._inject_exception(log_entry, record)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable console formatter with color-coded log levels.

    Colors are auto-disabled when output is not a TTY (pipes, files).
    """

    # ANSI color codes
    COLORS = {
        logging.DEBUG: "\033[36m",  # Cyan
        logging.INFO: "\033[32m",  # Green
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",  # Red
        logging.CRITICAL: "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._use_colors = sys.stdout.isatty()

    def _format_level_name(self, record: logging.LogRecord) -> str:
        level_name = record.levelname
        if not self._use_colors:
            return level_name

        color = self.COLORS.get(record.levelno, "")
        if not color:
            return level_name

        return f"{color}{level_name}{self.RESET}"

    @staticmethod
    def _build_prefix(level_name: str, log_context: dict[str, Any]) -> str:
        parts = [
            datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            level_name,
        ]

        if log_context["sasl_mechanism"]:
            parts.append(f"[{log_context['sasl_mechanism']}]")
        if log_context["broker_host"]:
            parts.append(f"[{log_context['broker_host']}]")

        return " - ".join(parts)

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for console output with optional color coding."""
        log_context = get_log_context()

        level_name = self._format_level_name(record)
        prefix = self._build_prefix(level_name, log_context)

        handshake_id = getattr(record, "handshake_id", None) or log_context.get("handshake_id")
        if handshake_id:
            return f"{prefix} - [{handshake_id}] {record.getMessage()}"

        return f"{prefix} - {record.getMessage()}"
