"""Builds SASL mechanism instances from configuration."""

import logging
from datetime import timedelta
from typing import Optional

from kafka_sasl.auth.aws_msk_iam import AwsMskIamMechanism
from kafka_sasl.auth.credentials import BotocoreCredentialsProvider
from kafka_sasl.auth.scram import ScramMechanism
from kafka_sasl.config.config import AWS_MSK_IAM, SCRAM_MECHANISMS, SaslConfig
from kafka_sasl.errors.exceptions import SaslConfigurationError
from kafka_sasl.types import CredentialsProvider, SASLMechanism

logger = logging.getLogger(__name__)


def build_sasl_mechanism(
    config: SaslConfig,
    credentials: Optional[CredentialsProvider] = None,
) -> SASLMechanism:
    """Build a new mechanism for one connection attempt.

    Mechanisms hold handshake state, so call this once per connection.

    Args:
        config: SASL configuration
        credentials: AWS credential source for AWS_MSK_IAM; defaults to the
            botocore credential chain (using config.aws_profile if set)

    Raises:
        SaslConfigurationError: Unknown mechanism
    """
    logger.debug("Building SASL mechanism", extra={"sasl_mechanism": config.mechanism})

    if config.mechanism == AWS_MSK_IAM:
        if credentials is None:
            credentials = BotocoreCredentialsProvider(profile=config.aws_profile or None)
        return AwsMskIamMechanism(
            credentials=credentials,
            region=config.region,
            expiry=timedelta(seconds=config.expiry_seconds),
            user_agent=config.user_agent,
        )

    if config.mechanism in SCRAM_MECHANISMS:
        return ScramMechanism(config.mechanism, username=config.username, password=config.password)

    raise SaslConfigurationError(f"unsupported SASL mechanism: {config.mechanism}")


__all__ = ["build_sasl_mechanism"]
