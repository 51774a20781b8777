"""
Per-connection SASL metadata.

The broker host being authenticated is connection-scoped: a mechanism can be
built before the transport knows which broker it will dial. The transport
supplies it either explicitly to `step()` or by installing it for the current
task with `sasl_metadata()`.

Example:
    >>> with sasl_metadata(SASLMetadata(host="b-1.demo.kafka.us-east-1.amazonaws.com", port="9098")):
    ...     payload = await mechanism.step("")
"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass(frozen=True)
class SASLMetadata:
    """
    Connection details for the broker being authenticated.

    Attributes:
        host: Broker host name (required by the IAM payload builder)
        port: Broker port; carried for transports, unused when signing
    """

    host: str
    port: str = ""


_sasl_metadata: ContextVar[Optional[SASLMetadata]] = ContextVar("sasl_metadata", default=None)


def get_sasl_metadata() -> Optional[SASLMetadata]:
    """Return the metadata installed for the current task, if any."""
    return _sasl_metadata.get()


@contextmanager
def sasl_metadata(metadata: SASLMetadata) -> Iterator[SASLMetadata]:
    """Install connection metadata for the duration of the block."""
    token = _sasl_metadata.set(metadata)
    try:
        yield metadata
    finally:
        _sasl_metadata.reset(token)


def resolve_sasl_metadata(metadata: Optional[SASLMetadata] = None) -> Optional[SASLMetadata]:
    """Prefer explicitly passed metadata, falling back to the task's context."""
    if metadata is not None:
        return metadata
    return get_sasl_metadata()


__all__ = [
    "SASLMetadata",
    "get_sasl_metadata",
    "resolve_sasl_metadata",
    "sasl_metadata",
]
