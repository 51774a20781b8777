"""Tests for JSON and console log formatters."""

import json
import logging
import sys

from kafka_sasl.logging.context import set_log_context
from kafka_sasl.logging.formatters import ConsoleFormatter, JSONFormatter


def _make_record(
    msg="test message",
    level=logging.INFO,
    name="test.logger",
    exc_info=None,
    **extras,
):
    record = logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extras.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:

    def test_formats_basic_json_with_required_fields(self):
        output = json.loads(JSONFormatter().format(_make_record()))

        assert output["level"] == "INFO"
        assert output["logger"] == "test.logger"
        assert output["message"] == "test message"
        assert output["ts"].endswith("Z")

    def test_includes_handshake_context(self):
        set_log_context(mechanism="AWS_MSK_IAM", broker_host="b-1.example.com", handshake_id="h-1")

        output = json.loads(JSONFormatter().format(_make_record()))

        assert output["sasl_mechanism"] == "AWS_MSK_IAM"
        assert output["broker_host"] == "b-1.example.com"
        assert output["handshake_id"] == "h-1"

    def test_omits_empty_context(self):
        output = json.loads(JSONFormatter().format(_make_record()))

        assert "sasl_mechanism" not in output
        assert "broker_host" not in output

    def test_extra_fields(self):
        record = _make_record(from_state="AWAITING_INITIAL_REQUEST", to_state="AWAITING_SERVER_RESPONSE")

        output = json.loads(JSONFormatter().format(record))

        assert output["from_state"] == "AWAITING_INITIAL_REQUEST"
        assert output["to_state"] == "AWAITING_SERVER_RESPONSE"

    def test_numeric_fields_coerced(self):
        record = _make_record(duration_ms="12.5", expiry_seconds="300", step="bogus")

        output = json.loads(JSONFormatter().format(record))

        assert output["duration_ms"] == 12.5
        assert output["expiry_seconds"] == 300
        assert output["step"] is None

    def test_source_location_only_for_debug_and_error(self):
        info = json.loads(JSONFormatter().format(_make_record(level=logging.INFO)))
        error = json.loads(JSONFormatter().format(_make_record(level=logging.ERROR)))

        assert "file" not in info
        assert error["file"] == "test.py:42"

    def test_redacts_presigned_parameters(self):
        url = (
            "kafka://b-1/?Action=kafka-cluster%3AConnect"
            "&X-Amz-Credential=AKIA%2F20240102&X-Amz-Signature=abc123&X-Amz-Security-Token=tok"
        )
        record = _make_record(msg=f"signed {url}", error=url)

        output = json.loads(JSONFormatter().format(record))

        for value in (output["message"], output["error"]):
            assert "abc123" not in value
            assert "=tok" not in value
            assert "AKIA" not in value
            assert "X-Amz-Signature=[REDACTED]" in value
            assert "Action=kafka-cluster%3AConnect" in value

    def test_includes_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _make_record(level=logging.ERROR, exc_info=sys.exc_info())

        output = json.loads(JSONFormatter().format(record))

        assert output["exception"]["type"] == "ValueError"
        assert output["exception"]["message"] == "boom"
        assert "Traceback" in output["exception"]["stacktrace"]


class TestConsoleFormatter:

    def _formatter(self):
        formatter = ConsoleFormatter()
        formatter._use_colors = False
        return formatter

    def test_plain_message(self):
        output = self._formatter().format(_make_record(level=logging.WARNING))

        assert output.endswith(" - WARNING - test message")

    def test_prefix_includes_context(self):
        set_log_context(mechanism="SCRAM-SHA-512", broker_host="b-2")

        output = self._formatter().format(_make_record())

        assert "[SCRAM-SHA-512] - [b-2]" in output

    def test_handshake_id_shown_in_full(self):
        set_log_context(handshake_id="h-20260101-120000-abcd")

        output = self._formatter().format(_make_record())

        assert output.endswith("[h-20260101-120000-abcd] test message")

    def test_handshakes_in_same_month_distinguishable(self):
        set_log_context(handshake_id="h-20260101-120000-abcd")
        first = self._formatter().format(_make_record())
        set_log_context(handshake_id="h-20260115-093000-ef01")
        second = self._formatter().format(_make_record())

        assert "abcd" in first
        assert "ef01" in second

    def test_colors_applied_when_enabled(self):
        formatter = ConsoleFormatter()
        formatter._use_colors = True

        output = formatter.format(_make_record(level=logging.ERROR))

        assert "\033[31mERROR\033[0m" in output
