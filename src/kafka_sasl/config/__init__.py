"""Configuration loading for Kafka SASL mechanisms.

Usage:
    >>> from kafka_sasl.config import load_config
    >>> config = load_config(Path("config.yaml"))
    >>> config.mechanism
    'AWS_MSK_IAM'
"""

from kafka_sasl.config.config import (
    AWS_MSK_IAM,
    DEFAULT_EXPIRY_SECONDS,
    SCRAM_MECHANISMS,
    VALID_MECHANISMS,
    SaslConfig,
    get_config,
    load_config,
    reset_config,
    set_config,
)

__all__ = [
    "AWS_MSK_IAM",
    "DEFAULT_EXPIRY_SECONDS",
    "SCRAM_MECHANISMS",
    "VALID_MECHANISMS",
    "SaslConfig",
    "get_config",
    "load_config",
    "reset_config",
    "set_config",
]
