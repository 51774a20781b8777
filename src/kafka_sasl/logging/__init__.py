"""
Structured logging module.

Provides JSON logging with per-handshake context propagation.
"""

from kafka_sasl.logging.context import (
    HandshakeLogContext,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from kafka_sasl.logging.formatters import ConsoleFormatter, JSONFormatter
from kafka_sasl.logging.setup import (
    generate_handshake_id,
    get_logger,
    setup_logging,
)

__all__ = [
    # Setup
    "setup_logging",
    "get_logger",
    "generate_handshake_id",
    # Formatters
    "JSONFormatter",
    "ConsoleFormatter",
    # Context
    "set_log_context",
    "get_log_context",
    "clear_log_context",
    "HandshakeLogContext",
]
