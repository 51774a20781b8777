"""Tests for the SASL handshake driver."""

import json
import logging

import pytest
from scramp import ScramMechanism as ScramServerMechanism

from kafka_sasl.auth.aws_msk_iam import AwsMskIamMechanism
from kafka_sasl.auth.handshake import authenticate
from kafka_sasl.auth.metadata import get_sasl_metadata
from kafka_sasl.auth.scram import SCRAM_SHA_256, ScramMechanism
from kafka_sasl.errors.exceptions import FailedServerChallengeError, MissingConnectionMetadataError


class FakeMskBroker:
    """Answers the AWS_MSK_IAM payload like an MSK broker would."""

    def __init__(self, version="2020_10_22"):
        self.version = version
        self.tokens = []
        self.metadata_seen = []

    async def exchange(self, token):
        self.tokens.append(json.loads(token))
        self.metadata_seen.append(get_sasl_metadata())
        return json.dumps({"version": self.version, "request-id": "req-1"})


class TestAuthenticate:

    @pytest.mark.asyncio
    async def test_iam_handshake_completes(self, static_credentials, broker_metadata, fixed_clock):
        mechanism = AwsMskIamMechanism(static_credentials, "us-east-1", clock=fixed_clock)
        broker = FakeMskBroker()

        await authenticate(mechanism, broker.exchange, metadata=broker_metadata)

        assert mechanism.done() is True
        assert len(broker.tokens) == 1
        assert broker.tokens[0]["host"] == broker_metadata.host
        assert broker.tokens[0]["action"] == "kafka-cluster:Connect"

    @pytest.mark.asyncio
    async def test_metadata_installed_during_handshake(self, static_credentials, broker_metadata):
        mechanism = AwsMskIamMechanism(static_credentials, "us-east-1")
        broker = FakeMskBroker()

        await authenticate(mechanism, broker.exchange, metadata=broker_metadata)

        assert broker.metadata_seen == [broker_metadata]
        assert get_sasl_metadata() is None

    @pytest.mark.asyncio
    async def test_rejected_challenge_propagates(self, static_credentials, broker_metadata):
        mechanism = AwsMskIamMechanism(static_credentials, "us-east-1")
        broker = FakeMskBroker(version="2022_10_22")

        with pytest.raises(FailedServerChallengeError):
            await authenticate(mechanism, broker.exchange, metadata=broker_metadata)

        assert mechanism.done() is False

    @pytest.mark.asyncio
    async def test_missing_metadata_fails_before_exchange(self, static_credentials):
        mechanism = AwsMskIamMechanism(static_credentials, "us-east-1")
        broker = FakeMskBroker()

        with pytest.raises(MissingConnectionMetadataError):
            await authenticate(mechanism, broker.exchange)

        assert broker.tokens == []

    @pytest.mark.asyncio
    async def test_exchange_errors_propagate(self, static_credentials, broker_metadata):
        async def exchange(token):
            raise ConnectionResetError("broker went away")

        mechanism = AwsMskIamMechanism(static_credentials, "us-east-1")

        with pytest.raises(ConnectionResetError):
            await authenticate(mechanism, exchange, metadata=broker_metadata)

    @pytest.mark.asyncio
    async def test_failure_is_logged(self, static_credentials, broker_metadata, caplog):
        mechanism = AwsMskIamMechanism(static_credentials, "us-east-1")
        broker = FakeMskBroker(version="bogus")

        with caplog.at_level(logging.ERROR, logger="kafka_sasl.auth.handshake"):
            with pytest.raises(FailedServerChallengeError):
                await authenticate(mechanism, broker.exchange, metadata=broker_metadata)

        record = next(r for r in caplog.records if r.message == "SASL handshake failed")
        assert record.error_category == "auth"
        assert record.error_type == "FailedServerChallengeError"

    @pytest.mark.asyncio
    async def test_scram_handshake_completes(self):
        server_mechanism = ScramServerMechanism(SCRAM_SHA_256)
        auth_info = server_mechanism.make_auth_info("pencil", iteration_count=4096)
        server = server_mechanism.make_server(lambda username: auth_info)
        replies = []

        async def exchange(token):
            if not replies:
                server.set_client_first(token)
                replies.append(server.get_server_first())
            else:
                server.set_client_final(token)
                replies.append(server.get_server_final())
            return replies[-1]

        mechanism = ScramMechanism(SCRAM_SHA_256)
        await authenticate(mechanism, exchange, username="user", password="pencil")

        assert mechanism.done() is True
        assert len(replies) == 2
