"""
Kafka SASL/AWS_MSK_IAM client mechanism.

Authenticates a Kafka client against an Amazon MSK cluster that enforces IAM
access control. The handshake has two steps:

1. The client sends a JSON payload built from a SigV4 presigned
   `kafka-cluster:Connect` request for the broker it is connecting to.
2. The server answers with `{"version": ..., "request-id": ...}`; the client
   checks the version and the handshake is complete.

Example:
    >>> from kafka_sasl.auth import AwsMskIamMechanism, SASLMetadata
    >>> from kafka_sasl.auth.credentials import BotocoreCredentialsProvider
    >>>
    >>> mechanism = AwsMskIamMechanism(
    ...     credentials=BotocoreCredentialsProvider(),
    ...     region="us-east-1",
    ... )
    >>> await mechanism.begin()
    >>> payload = await mechanism.step("", SASLMetadata(host="b-1.demo.kafka.us-east-1.amazonaws.com"))
    >>> # send payload, receive server challenge
    >>> await mechanism.step(server_challenge)
    >>> mechanism.done()
    True

Security Notes:
    - Payloads embed a signing timestamp and are valid only until expiry;
      they are built per handshake and never cached
    - Credentials, signatures and session tokens are never logged
    - A mechanism instance serves one handshake; failures are terminal
"""

import asyncio
import json
import logging
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Optional
from urllib.parse import parse_qs, urlsplit

from botocore.awsrequest import AWSRequest
from pydantic import ValidationError

from kafka_sasl.auth.metadata import SASLMetadata, resolve_sasl_metadata
from kafka_sasl.auth.schemas import ServerResponse
from kafka_sasl.auth.signer import EXPIRES_PARAM, BotocoreSigner
from kafka_sasl.errors.exceptions import (
    BadChallengeError,
    FailedServerChallengeError,
    InvalidStateError,
    MissingConnectionMetadataError,
    SaslConfigurationError,
    SigningError,
)
from kafka_sasl.types import Clock, CredentialsProvider, Signer

logger = logging.getLogger(__name__)


MECHANISM_NAME = "AWS_MSK_IAM"

SIGN_SERVICE = "kafka-cluster"
SIGN_VERSION = "2020_10_22"
SIGN_ACTION = "kafka-cluster:Connect"

SIGN_HOST_KEY = "host"
SIGN_USER_AGENT_KEY = "user-agent"
SIGN_VERSION_KEY = "version"
QUERY_ACTION_KEY = "Action"

# SHA-256 of an empty body; the connect request carries no payload
EMPTY_PAYLOAD_HASH = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

DEFAULT_EXPIRY = timedelta(minutes=5)


class HandshakeState(Enum):
    """
    Position of a mechanism in its handshake.

    A step while UNINITIALIZED (before begin) raises InvalidStateError.
    FAILED and COMPLETE are terminal.
    """

    UNINITIALIZED = "uninitialized"
    AWAITING_INITIAL_REQUEST = "awaiting_initial_request"
    AWAITING_SERVER_RESPONSE = "awaiting_server_response"
    COMPLETE = "complete"
    FAILED = "failed"


def _utc_now() -> datetime:
    return datetime.now(UTC)


def validate_server_response(challenge: str) -> ServerResponse:
    """
    Decode and check the server's step-two challenge.

    Args:
        challenge: Raw JSON challenge from the broker

    Returns:
        ServerResponse with the broker's version and request id

    Raises:
        FailedServerChallengeError: Challenge is not a JSON object or its
            version is not the one this client speaks
    """
    try:
        response = ServerResponse.model_validate_json(challenge)
    except ValidationError as e:
        raise FailedServerChallengeError(
            "unable to process msk challenge response", cause=e
        ) from e

    if response.version != SIGN_VERSION:
        raise FailedServerChallengeError(
            "unknown version found in response",
            context={"version": response.version},
        )

    return response


class AwsMskIamMechanism:
    """
    Client for AWS_MSK_IAM SASL authentication.

    One instance drives one handshake: `begin`, then `step("")` to produce
    the signed payload, then `step(server_challenge)` to finish. Any error
    moves the instance to FAILED for good; callers retry with a new
    instance on a new connection.

    Attributes:
        region: AWS region hosting the MSK cluster, e.g. "us-east-1"
        expiry: How long the presigned request stays valid (default 5 min)
        user_agent: Reported to the broker verbatim; usable in IAM policies
            through the aws:userAgent condition key
        state: Current HandshakeState
    """

    name = MECHANISM_NAME

    def __init__(
        self,
        credentials: Optional[CredentialsProvider],
        region: str,
        expiry: Optional[timedelta] = None,
        user_agent: str = "",
        signer: Optional[Signer] = None,
        clock: Optional[Clock] = None,
    ):
        if expiry is None or expiry <= timedelta(0):
            expiry = DEFAULT_EXPIRY

        self.credentials = credentials
        self.region = region
        self.expiry = expiry
        self.user_agent = user_agent
        self.signer: Signer = signer or BotocoreSigner()
        self.clock: Clock = clock or _utc_now
        self.state = HandshakeState.UNINITIALIZED

    def _transition(self, new_state: HandshakeState) -> None:
        logger.debug(
            "SASL handshake state change",
            extra={
                "sasl_mechanism": self.name,
                "from_state": self.state.value,
                "to_state": new_state.value,
            },
        )
        self.state = new_state

    async def begin(self, username: str = "", password: str = "", authz_id: str = "") -> None:
        """
        Prepare the mechanism for a handshake.

        Username, password and authorization id are accepted for interface
        compatibility only; the IAM identity comes from the credentials.

        Raises:
            SaslConfigurationError: Credentials provider or region missing
            InvalidStateError: The handshake has already started
        """
        if self.credentials is None:
            raise SaslConfigurationError("missing required credentials provider")
        if not self.region:
            raise SaslConfigurationError("missing AWS region")
        if self.state not in (HandshakeState.UNINITIALIZED, HandshakeState.AWAITING_INITIAL_REQUEST):
            raise InvalidStateError(
                "begin called on a handshake already in progress",
                context={"handshake_state": self.state.value},
            )

        self._transition(HandshakeState.AWAITING_INITIAL_REQUEST)

    async def step(self, challenge: str, metadata: Optional[SASLMetadata] = None) -> str:
        """
        Advance the handshake by one message.

        Args:
            challenge: Data received from the broker ("" for the first step)
            metadata: Broker connection details; defaults to the metadata
                installed with `sasl_metadata()`

        Returns:
            Response to send to the broker ("" once complete)

        Raises:
            BadChallengeError: Challenge presence doesn't match the state
            FailedServerChallengeError: Server challenge rejected
            InvalidStateError: Called before begin or after the handshake ended
            MissingConnectionMetadataError: No broker host available
            SigningError: Presigning failed
            Exception: Credential provider failures propagate unchanged
        """
        if self.state == HandshakeState.AWAITING_INITIAL_REQUEST:
            if challenge:
                self._transition(HandshakeState.FAILED)
                raise BadChallengeError("challenge must be empty for initial request")

            try:
                payload = await self._build_auth_payload(metadata)
            except (Exception, asyncio.CancelledError) as e:
                self._transition(HandshakeState.FAILED)
                logger.warning(
                    "Failed to build AWS_MSK_IAM auth payload",
                    extra={
                        "sasl_mechanism": self.name,
                        "region": self.region,
                        "error_type": type(e).__name__,
                    },
                )
                raise

            self._transition(HandshakeState.AWAITING_SERVER_RESPONSE)
            return payload

        if self.state == HandshakeState.AWAITING_SERVER_RESPONSE:
            if not challenge:
                self._transition(HandshakeState.FAILED)
                raise BadChallengeError("challenge must not be empty for server response")

            try:
                response = validate_server_response(challenge)
            except FailedServerChallengeError:
                self._transition(HandshakeState.FAILED)
                raise

            self._transition(HandshakeState.COMPLETE)
            logger.debug(
                "AWS_MSK_IAM handshake complete",
                extra={"sasl_mechanism": self.name, "request_id": response.request_id},
            )
            return ""

        raise InvalidStateError(
            "invalid invocation",
            context={"handshake_state": self.state.value},
        )

    def done(self) -> bool:
        """True once the server challenge has been accepted."""
        return self.state == HandshakeState.COMPLETE

    async def _build_auth_payload(self, metadata: Optional[SASLMetadata]) -> str:
        metadata = resolve_sasl_metadata(metadata)
        if metadata is None or not metadata.host:
            raise MissingConnectionMetadataError()

        expiry_seconds = int(self.expiry.total_seconds())
        request = AWSRequest(
            method="GET",
            url=f"kafka://{metadata.host}/",
            params={
                QUERY_ACTION_KEY: SIGN_ACTION,
                EXPIRES_PARAM: str(expiry_seconds),
            },
        )

        # Credential provider errors propagate unwrapped
        credentials = await self.credentials.retrieve()

        signed_url, signed_headers = await self.signer.presign(
            request,
            credentials,
            EMPTY_PAYLOAD_HASH,
            SIGN_SERVICE,
            self.region,
            self.clock(),
        )

        try:
            url = urlsplit(signed_url)
            query = parse_qs(url.query, keep_blank_values=True)
        except (TypeError, ValueError) as e:
            raise SigningError("signer returned a malformed URL", cause=e) from e
        if not url.netloc:
            raise SigningError("signer returned a URL without a host")

        signed_map = {
            SIGN_VERSION_KEY: SIGN_VERSION,
            SIGN_HOST_KEY: url.netloc,
            SIGN_USER_AGENT_KEY: self.user_agent,
        }
        # The protocol requires lowercase keys; query params win on collision
        for key, value in signed_headers.items():
            signed_map[key.lower()] = value
        for key, values in query.items():
            signed_map[key.lower()] = values[0]

        logger.debug(
            "Built AWS_MSK_IAM auth payload",
            extra={
                "sasl_mechanism": self.name,
                "broker_host": metadata.host,
                "region": self.region,
                "expiry_seconds": expiry_seconds,
            },
        )
        return json.dumps(signed_map, separators=(",", ":"))


__all__ = [
    "AwsMskIamMechanism",
    "DEFAULT_EXPIRY",
    "EMPTY_PAYLOAD_HASH",
    "HandshakeState",
    "MECHANISM_NAME",
    "ServerResponse",
    "SIGN_ACTION",
    "SIGN_SERVICE",
    "SIGN_VERSION",
    "validate_server_response",
]
