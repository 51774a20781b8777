"""
Authentication module.

Client-side SASL mechanisms for Kafka.

Components:
    - AwsMskIamMechanism: AWS_MSK_IAM, SigV4-presigned connect payload
    - ScramMechanism: SCRAM-SHA-256/512 backed by scramp
    - Credential providers: static and botocore credential chain
    - SASLMetadata: per-connection broker host/port
    - authenticate(): drives a mechanism over a token exchange
    - build_sasl_mechanism(): mechanism selection from SaslConfig
"""

from .aws_msk_iam import (
    DEFAULT_EXPIRY,
    SIGN_ACTION,
    SIGN_SERVICE,
    SIGN_VERSION,
    AwsMskIamMechanism,
    HandshakeState,
    ServerResponse,
    validate_server_response,
)
from .credentials import BotocoreCredentialsProvider, StaticCredentialsProvider
from .factory import build_sasl_mechanism
from .handshake import TokenExchange, authenticate
from .metadata import SASLMetadata, get_sasl_metadata, sasl_metadata
from .scram import SCRAM_SHA_256, SCRAM_SHA_512, ScramMechanism
from .signer import BotocoreSigner

__all__ = [
    # AWS_MSK_IAM
    "AwsMskIamMechanism",
    "HandshakeState",
    "ServerResponse",
    "validate_server_response",
    "DEFAULT_EXPIRY",
    "SIGN_ACTION",
    "SIGN_SERVICE",
    "SIGN_VERSION",
    # SCRAM
    "ScramMechanism",
    "SCRAM_SHA_256",
    "SCRAM_SHA_512",
    # Credentials and signing
    "BotocoreCredentialsProvider",
    "StaticCredentialsProvider",
    "BotocoreSigner",
    # Connection metadata
    "SASLMetadata",
    "get_sasl_metadata",
    "sasl_metadata",
    # Driver and factory
    "TokenExchange",
    "authenticate",
    "build_sasl_mechanism",
]
