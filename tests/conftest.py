"""
pytest configuration for kafka_sasl tests.

Adds src directory to Python path for imports and provides shared fixtures.
"""

import sys
from datetime import UTC, datetime
from pathlib import Path

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

from kafka_sasl.auth.credentials import StaticCredentialsProvider  # noqa: E402
from kafka_sasl.auth.metadata import SASLMetadata  # noqa: E402
from kafka_sasl.logging.context import clear_log_context  # noqa: E402

ACCESS_KEY_ID = "ACCESS_KEY_ID"
SECRET_ACCESS_KEY = "SECRET_ACCESS_KEY"
SESSION_TOKEN = "SESSION_TOKEN"
BROKER_HOST = "xxxxxx.xx.kafka.us-east-1.amazonaws.com"
BROKER_PORT = "9098"
REGION = "us-east-1"
USER_AGENT = "kafka-sasl-tests"
SIGNING_TIME = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)


@pytest.fixture
def static_credentials():
    return StaticCredentialsProvider(ACCESS_KEY_ID, SECRET_ACCESS_KEY, SESSION_TOKEN)


@pytest.fixture
def broker_metadata():
    return SASLMetadata(host=BROKER_HOST, port=BROKER_PORT)


@pytest.fixture
def fixed_clock():
    return lambda: SIGNING_TIME


@pytest.fixture(autouse=True)
def _clear_log_context():
    clear_log_context()
    yield
    clear_log_context()
