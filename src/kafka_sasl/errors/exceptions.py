"""
Unified exception hierarchy for kafka_sasl.

Provides typed exceptions with error classification so callers can tell a
misconfigured client from a protocol violation, a rejected server challenge,
or an upstream credential/signing failure.
"""

import asyncio

from botocore.exceptions import (
    BotoCoreError,
    ConnectionError as BotoConnectionError,
    CredentialRetrievalError,
    NoCredentialsError,
    PartialCredentialsError,
)

from kafka_sasl.types import ErrorCategory


class SaslError(Exception):
    """
    Base exception for all SASL mechanism errors.

    Attributes:
        message: Human-readable error description
        category: Error classification for handling decisions
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN
    reason: str = ""

    def __init__(
        self,
        message: str | None = None,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        if message and self.reason:
            message = f"{message}: {self.reason}"
        self.message = message or self.reason or self.__class__.__name__
        self.cause = cause
        self.context = context or {}
        super().__init__(self.message)

    @property
    def is_retryable(self) -> bool:
        """Whether a fresh connection (and fresh mechanism) may succeed."""
        return self.category in (
            ErrorCategory.TRANSIENT,
            ErrorCategory.AUTH,
            ErrorCategory.UNKNOWN,
        )

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


# =============================================================================
# Configuration Errors
# =============================================================================


class SaslConfigurationError(SaslError):
    """Mechanism is missing required configuration (region, credentials)."""

    category = ErrorCategory.PERMANENT


class MissingConnectionMetadataError(SaslError):
    """No broker host was supplied for the connection being authenticated."""

    category = ErrorCategory.PERMANENT
    reason = "missing sasl metadata"


# =============================================================================
# Protocol Errors
# =============================================================================


class BadChallengeError(SaslError):
    """Challenge emptiness does not match the handshake state."""

    category = ErrorCategory.PERMANENT
    reason = "invalid challenge data provided"


class FailedServerChallengeError(SaslError):
    """Server challenge could not be decoded or carried an unknown version."""

    category = ErrorCategory.AUTH
    reason = "failed server challenge"


class InvalidStateError(SaslError):
    """Mechanism was invoked outside of an active handshake."""

    category = ErrorCategory.PERMANENT
    reason = "invalid state reached"


# =============================================================================
# Upstream Errors
# =============================================================================


class SigningError(SaslError):
    """Presigning the connect request failed."""

    category = ErrorCategory.AUTH
    reason = "failed to presign request"


class CredentialsUnavailableError(SaslError):
    """No AWS credentials could be resolved."""

    category = ErrorCategory.AUTH
    reason = "unable to locate AWS credentials"


# =============================================================================
# Error Classification Utilities
# =============================================================================

_AUTH_EXCEPTIONS = (
    NoCredentialsError,
    PartialCredentialsError,
    CredentialRetrievalError,
)

_TRANSIENT_EXCEPTIONS = (
    BotoConnectionError,
    asyncio.TimeoutError,
    TimeoutError,
    ConnectionError,
)


def classify_exception(exc: BaseException) -> ErrorCategory:
    """Classify an exception raised during a handshake into an error category."""
    if isinstance(exc, SaslError):
        return exc.category

    if isinstance(exc, _AUTH_EXCEPTIONS):
        return ErrorCategory.AUTH

    if isinstance(exc, _TRANSIENT_EXCEPTIONS):
        return ErrorCategory.TRANSIENT

    # Remaining botocore errors are configuration problems (bad profile, etc.)
    if isinstance(exc, BotoCoreError):
        return ErrorCategory.PERMANENT

    return ErrorCategory.UNKNOWN


def is_auth_error(exc: BaseException) -> bool:
    return classify_exception(exc) == ErrorCategory.AUTH


def is_retryable_error(exc: BaseException) -> bool:
    """
    Check if a new handshake on a fresh connection is worth attempting.

    Retrying never happens inside a mechanism; this only guides callers.
    """
    if isinstance(exc, SaslError):
        return exc.is_retryable

    return classify_exception(exc) in (
        ErrorCategory.TRANSIENT,
        ErrorCategory.AUTH,
        ErrorCategory.UNKNOWN,
    )
