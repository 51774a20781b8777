"""
SASL handshake driver.

Runs a mechanism to completion against a transport-provided exchange
function: the driver calls `begin`, then alternates `step` with sending the
step's response and reading the broker's reply, until the mechanism reports
`done`.

Example:
    >>> async def exchange(token: str) -> str:
    ...     await connection.send_sasl_token(token)
    ...     return await connection.read_sasl_token()
    >>>
    >>> mechanism = build_sasl_mechanism(config)
    >>> await authenticate(mechanism, exchange, metadata=SASLMetadata(host=broker))
"""

import contextlib
import logging
import time
from typing import Awaitable, Callable, Optional

from kafka_sasl.auth.metadata import SASLMetadata, sasl_metadata
from kafka_sasl.errors.exceptions import classify_exception
from kafka_sasl.logging.context import HandshakeLogContext
from kafka_sasl.logging.setup import generate_handshake_id
from kafka_sasl.types import SASLMechanism

logger = logging.getLogger(__name__)


# Sends a client token and returns the broker's reply
TokenExchange = Callable[[str], Awaitable[str]]


async def authenticate(
    mechanism: SASLMechanism,
    exchange: TokenExchange,
    *,
    username: str = "",
    password: str = "",
    authz_id: str = "",
    metadata: Optional[SASLMetadata] = None,
) -> None:
    """
    Drive one SASL handshake to completion.

    Args:
        mechanism: Fresh mechanism instance for this connection
        exchange: Coroutine function sending a token and returning the reply
        username: Passed to `begin` (ignored by AWS_MSK_IAM)
        password: Passed to `begin` (ignored by AWS_MSK_IAM)
        authz_id: Passed to `begin`
        metadata: Broker connection details for this connection

    Raises:
        Any error raised by the mechanism or the exchange, unchanged.
    """
    handshake_id = generate_handshake_id()
    start = time.perf_counter()

    with contextlib.ExitStack() as stack:
        stack.enter_context(
            HandshakeLogContext(
                mechanism=mechanism.name,
                broker_host=metadata.host if metadata else None,
                handshake_id=handshake_id,
            )
        )
        if metadata is not None:
            stack.enter_context(sasl_metadata(metadata))

        logger.info("Starting SASL handshake", extra={"sasl_mechanism": mechanism.name})

        step = 0
        try:
            await mechanism.begin(username, password, authz_id)

            challenge = ""
            while True:
                step += 1
                response = await mechanism.step(challenge, metadata)
                if mechanism.done():
                    break
                logger.debug(
                    "Sending SASL token",
                    extra={"step": step, "response_length": len(response)},
                )
                challenge = await exchange(response)
        except Exception as e:
            logger.error(
                "SASL handshake failed",
                extra={
                    "sasl_mechanism": mechanism.name,
                    "step": step,
                    "error_category": classify_exception(e).value,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            raise

        logger.info(
            "SASL handshake complete",
            extra={
                "sasl_mechanism": mechanism.name,
                "step": step,
                "duration_ms": (time.perf_counter() - start) * 1000,
            },
        )


__all__ = ["TokenExchange", "authenticate"]
