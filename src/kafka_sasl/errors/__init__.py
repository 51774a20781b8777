"""
Error classification and exception hierarchy.

Provides:
- SaslError hierarchy for typed exceptions
- Classification utilities for caller-side retry decisions
"""

from kafka_sasl.errors.exceptions import (
    # Protocol errors
    BadChallengeError,
    # Upstream errors
    CredentialsUnavailableError,
    FailedServerChallengeError,
    InvalidStateError,
    MissingConnectionMetadataError,
    # Configuration errors
    SaslConfigurationError,
    # Base class
    SaslError,
    SigningError,
    # Classification utilities
    classify_exception,
    is_auth_error,
    is_retryable_error,
)
from kafka_sasl.types import ErrorCategory

__all__ = [
    "ErrorCategory",
    "SaslError",
    "SaslConfigurationError",
    "MissingConnectionMetadataError",
    "BadChallengeError",
    "FailedServerChallengeError",
    "InvalidStateError",
    "SigningError",
    "CredentialsUnavailableError",
    "classify_exception",
    "is_auth_error",
    "is_retryable_error",
]
