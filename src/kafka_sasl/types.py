"""
Core types and protocols used across modules.

This module provides base types, enums, and protocol definitions that are
shared across the library so mechanisms, credential sources and signers can
be swapped independently.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional, Protocol

if TYPE_CHECKING:
    from botocore.awsrequest import AWSRequest
    from botocore.credentials import ReadOnlyCredentials

    from kafka_sasl.auth.metadata import SASLMetadata


# Returns the current time used for signing
Clock = Callable[[], datetime]


class ErrorCategory(Enum):
    """
    Classification of error types for handling decisions.

    Categories:
        TRANSIENT: Temporary failures that may succeed on a fresh connection
                   (e.g., network timeouts while resolving credentials)
        AUTH: Authentication failures (rejected challenge, expired or
              missing credentials, signing failures)
        PERMANENT: Failures that won't succeed without a code or config
                   change (e.g., protocol violations, missing region)
        UNKNOWN: Unclassified errors
    """

    TRANSIENT = "transient"
    AUTH = "auth"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


class SASLMechanism(Protocol):
    """
    Protocol for client-side SASL mechanisms.

    A mechanism instance drives exactly one handshake: one `begin`, then
    `step` calls until `done` returns True or a step raises.
    """

    name: str

    async def begin(self, username: str = "", password: str = "", authz_id: str = "") -> None:
        ...

    async def step(self, challenge: str, metadata: Optional["SASLMetadata"] = None) -> str:
        ...

    def done(self) -> bool:
        ...


class CredentialsProvider(Protocol):
    """
    Protocol for AWS credential sources.

    Implementations return a short-lived access key / secret / session token
    triple, or raise when credentials cannot be resolved.
    """

    async def retrieve(self) -> "ReadOnlyCredentials":
        ...


class Signer(Protocol):
    """
    Protocol for SigV4 presigners.

    Given a request, credentials, payload hash, service, region and signing
    time, returns the presigned URL and the headers that were signed.
    """

    async def presign(
        self,
        request: "AWSRequest",
        credentials: "ReadOnlyCredentials",
        payload_hash: str,
        service: str,
        region: str,
        signing_time: datetime,
    ) -> tuple[str, dict[str, str]]:
        ...


__all__ = [
    "Clock",
    "CredentialsProvider",
    "ErrorCategory",
    "SASLMechanism",
    "Signer",
]
