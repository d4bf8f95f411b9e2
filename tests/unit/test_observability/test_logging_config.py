"""Unit tests for structured logging and the wire dump."""

import io
import json
import logging

import pytest
import structlog

from httpget.observability import (
    bind_request_context,
    clear_request_context,
    configure_logging,
)
from httpget.protocol import RequestInfo, send_request
from tests.helpers.fake_socket import fake_connection


def json_lines(stream: io.StringIO) -> list[dict[str, object]]:
    """Decode one JSON object per output line."""
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.mark.unit
    def test_json_output(self) -> None:
        """Test JSON rendering with level, timestamp and bound context."""
        stream = io.StringIO()
        configure_logging(level=logging.INFO, output=stream, json_format=True)
        bind_request_context("req-1")
        try:
            structlog.get_logger().info("download_started", host="h")
        finally:
            clear_request_context()

        (event,) = json_lines(stream)
        assert event["event"] == "download_started"
        assert event["level"] == "info"
        assert event["host"] == "h"
        assert event["request_id"] == "req-1"
        assert "timestamp" in event

    @pytest.mark.unit
    def test_level_filtering(self) -> None:
        """Test that events below the configured level are dropped."""
        stream = io.StringIO()
        configure_logging(level=logging.WARNING, output=stream, json_format=True)

        structlog.get_logger().debug("hidden")
        structlog.get_logger().warning("shown")

        assert [e["event"] for e in json_lines(stream)] == ["shown"]


class TestWireDump:
    """Tests for the debug dump of request headers."""

    @pytest.mark.unit
    def test_authorization_redacted(self) -> None:
        """Test that the dump never contains the encoded credentials."""
        stream = io.StringIO()
        configure_logging(level=logging.DEBUG, output=stream, json_format=True)
        conn, sock = fake_connection()

        send_request(conn, RequestInfo(host="h", credentials="user:pass"))

        events = json_lines(stream)
        headers = {
            e["field"]: e["value"] for e in events if e["event"] == "request_header"
        }
        assert headers["Authorization"] == "[REDACTED]"
        assert headers["Host"] == "h"
        assert "dXNlcjpwYXNz" not in stream.getvalue()
        assert b"dXNlcjpwYXNz" in sock.sent
