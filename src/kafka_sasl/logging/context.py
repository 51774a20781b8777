"""Context variables for structured logging."""

from contextvars import ContextVar
from typing import Dict, Optional

_mechanism: ContextVar[str] = ContextVar("sasl_mechanism", default="")
_broker_host: ContextVar[str] = ContextVar("broker_host", default="")
_handshake_id: ContextVar[str] = ContextVar("handshake_id", default="")


def set_log_context(
    mechanism: Optional[str] = None,
    broker_host: Optional[str] = None,
    handshake_id: Optional[str] = None,
) -> None:
    if mechanism is not None:
        _mechanism.set(mechanism)
    if broker_host is not None:
        _broker_host.set(broker_host)
    if handshake_id is not None:
        _handshake_id.set(handshake_id)


def get_log_context() -> Dict[str, str]:
    return {
        "sasl_mechanism": _mechanism.get(),
        "broker_host": _broker_host.get(),
        "handshake_id": _handshake_id.get(),
    }


def clear_log_context() -> None:
    _mechanism.set("")
    _broker_host.set("")
    _handshake_id.set("")


class HandshakeLogContext:
    """
    Context manager that tags every log line of one handshake.

    Previous values are restored on exit so nested or sequential handshakes
    in the same task don't leak context into each other.

    Usage:
        with HandshakeLogContext(mechanism="AWS_MSK_IAM", broker_host="b-1..."):
            await authenticate(mechanism, exchange)
    """

    def __init__(
        self,
        mechanism: Optional[str] = None,
        broker_host: Optional[str] = None,
        handshake_id: Optional[str] = None,
    ):
        self.mechanism = mechanism
        self.broker_host = broker_host
        self.handshake_id = handshake_id
        self._tokens = []

    def __enter__(self):
        for var, value in (
            (_mechanism, self.mechanism),
            (_broker_host, self.broker_host),
            (_handshake_id, self.handshake_id),
        ):
            if value is not None:
                self._tokens.append((var, var.set(value)))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens.clear()
        return False
