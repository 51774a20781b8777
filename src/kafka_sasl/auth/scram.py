"""
Kafka SASL/SCRAM client mechanism.

Thin adapter exposing a `scramp.ScramClient` conversation through the same
begin/step/done contract as AwsMskIamMechanism, so transports can drive
either mechanism the same way.
"""

import logging
from typing import Optional

from scramp import ScramClient, ScramException

from kafka_sasl.auth.metadata import SASLMetadata
from kafka_sasl.errors.exceptions import InvalidStateError, SaslConfigurationError

logger = logging.getLogger(__name__)


SCRAM_SHA_256 = "SCRAM-SHA-256"
SCRAM_SHA_512 = "SCRAM-SHA-512"
SUPPORTED_MECHANISMS = (SCRAM_SHA_256, SCRAM_SHA_512)


class ScramMechanism:
    """
    Client for SCRAM-SHA-256 / SCRAM-SHA-512 authentication.

    Step sequence:
        step("")            -> client-first message
        step(server_first)  -> client-final message
        step(server_final)  -> "" (server signature verified, done)

    A SCRAM error ends the conversation; later steps raise InvalidStateError.

    Attributes:
        username: Default user when begin() is called without one
        password: Default password when begin() is called without one
    """

    def __init__(self, mechanism: str = SCRAM_SHA_512, username: str = "", password: str = ""):
        self.name = mechanism
        self.username = username
        self.password = password
        self._client: Optional[ScramClient] = None
        self._step = 0
        self._done = False
        self._failed = False

    async def begin(self, username: str = "", password: str = "", authz_id: str = "") -> None:
        """
        Start a SCRAM conversation for the given user.

        Empty username or password fall back to the ones given at construction.

        Raises:
            SaslConfigurationError: Unsupported mechanism, or an authorization
                identity was requested (not supported by the SCRAM engine)
        """
        if self.name not in SUPPORTED_MECHANISMS:
            raise SaslConfigurationError(f"unsupported SCRAM mechanism: {self.name}")
        if authz_id:
            raise SaslConfigurationError("SCRAM authorization identity is not supported")

        self._client = ScramClient(
            [self.name],
            username or self.username,
            password or self.password,
        )
        self._step = 0
        self._done = False
        self._failed = False

    async def step(self, challenge: str, metadata: Optional[SASLMetadata] = None) -> str:
        """Forward one message to the SCRAM conversation."""
        if self._client is None or self._done or self._failed:
            raise InvalidStateError("invalid invocation")

        self._step += 1
        try:
            if self._step == 1:
                return self._client.get_client_first()
            if self._step == 2:
                self._client.set_server_first(challenge)
                return self._client.get_client_final()

            self._client.set_server_final(challenge)
        except ScramException as e:
            self._failed = True
            logger.warning(
                "SCRAM conversation failed",
                extra={"sasl_mechanism": self.name, "step": self._step, "error": str(e)},
            )
            raise

        self._done = True
        logger.debug("SCRAM handshake complete", extra={"sasl_mechanism": self.name})
        return ""

    def done(self) -> bool:
        return self._done


__all__ = [
    "SCRAM_SHA_256",
    "SCRAM_SHA_512",
    "SUPPORTED_MECHANISMS",
    "ScramMechanism",
]
