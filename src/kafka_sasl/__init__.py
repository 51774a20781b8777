"""
kafka_sasl: client-side SASL mechanisms for Kafka.

Modules:
    auth     - AWS_MSK_IAM and SCRAM mechanisms, credential providers, handshake driver
    config   - YAML configuration with environment variable expansion
    errors   - Exception hierarchy and error classification
    logging  - Structured JSON logging with per-handshake context

Design Principles:
    - One mechanism instance per connection attempt; failures are terminal
    - No dependency on a particular Kafka client or transport
    - Async-first so credential lookups can be cancelled
"""

from .types import Clock, CredentialsProvider, ErrorCategory, SASLMechanism, Signer

__version__ = "0.1.0"

__all__ = [
    "Clock",
    "CredentialsProvider",
    "ErrorCategory",
    "SASLMechanism",
    "Signer",
]
