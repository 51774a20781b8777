"""Tests for building mechanisms from configuration."""

from datetime import timedelta
from unittest.mock import patch

import pytest

from kafka_sasl.auth.aws_msk_iam import AwsMskIamMechanism, HandshakeState
from kafka_sasl.auth.credentials import BotocoreCredentialsProvider
from kafka_sasl.auth.factory import build_sasl_mechanism
from kafka_sasl.auth.scram import ScramMechanism
from kafka_sasl.config import SaslConfig
from kafka_sasl.errors.exceptions import SaslConfigurationError


class TestBuildSaslMechanism:

    def test_iam_mechanism(self, static_credentials):
        config = SaslConfig(region="eu-central-1", expiry_seconds=600, user_agent="svc/1.0")

        mechanism = build_sasl_mechanism(config, credentials=static_credentials)

        assert isinstance(mechanism, AwsMskIamMechanism)
        assert mechanism.region == "eu-central-1"
        assert mechanism.expiry == timedelta(minutes=10)
        assert mechanism.user_agent == "svc/1.0"
        assert mechanism.credentials is static_credentials
        assert mechanism.state == HandshakeState.UNINITIALIZED

    def test_zero_expiry_falls_back_to_default(self, static_credentials):
        config = SaslConfig(region="us-east-1", expiry_seconds=0)

        mechanism = build_sasl_mechanism(config, credentials=static_credentials)

        assert mechanism.expiry == timedelta(minutes=5)

    @patch("kafka_sasl.auth.factory.BotocoreCredentialsProvider")
    def test_iam_defaults_to_botocore_chain(self, mock_provider_class):
        config = SaslConfig(region="us-east-1", aws_profile="msk")

        mechanism = build_sasl_mechanism(config)

        mock_provider_class.assert_called_once_with(profile="msk")
        assert mechanism.credentials is mock_provider_class.return_value

    @patch("kafka_sasl.auth.factory.BotocoreCredentialsProvider", spec=BotocoreCredentialsProvider)
    def test_empty_profile_uses_default_chain(self, mock_provider_class):
        build_sasl_mechanism(SaslConfig(region="us-east-1"))

        mock_provider_class.assert_called_once_with(profile=None)

    @pytest.mark.parametrize("name", ["SCRAM-SHA-256", "SCRAM-SHA-512"])
    def test_scram_mechanism(self, name):
        mechanism = build_sasl_mechanism(SaslConfig(mechanism=name, username="u", password="p"))

        assert isinstance(mechanism, ScramMechanism)
        assert mechanism.name == name

    @pytest.mark.asyncio
    async def test_scram_uses_configured_credentials(self):
        config = SaslConfig(mechanism="SCRAM-SHA-256", username="alice", password="pw")
        mechanism = build_sasl_mechanism(config)

        await mechanism.begin()
        client_first = await mechanism.step("")

        assert "n=alice" in client_first

    def test_each_call_returns_new_instance(self, static_credentials):
        config = SaslConfig(region="us-east-1")

        first = build_sasl_mechanism(config, credentials=static_credentials)
        second = build_sasl_mechanism(config, credentials=static_credentials)

        assert first is not second

    def test_unknown_mechanism(self):
        with pytest.raises(SaslConfigurationError, match="unsupported SASL mechanism"):
            build_sasl_mechanism(SaslConfig(mechanism="PLAIN"))
