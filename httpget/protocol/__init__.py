"""HTTP/1.1 request framing and response parsing.

This module provides:
- RequestInfo, the definition of a bodiless request
- Request serialization with Host, Basic auth, Connection and Range headers
- Status line and header parsing with per-header handlers
- Length-delimited and chunked body readers
- Header redaction for the wire dump
"""

from httpget.protocol.body import BodyReader, ChunkedBodyReader, LengthBodyReader
from httpget.protocol.constants import (
    DEFAULT_MAX_REDIRECTIONS,
    HTTP_SCHEME,
    PROTOCOL_VERSIONS,
    UNLIMITED_REDIRECTIONS,
)
from httpget.protocol.models import RequestInfo
from httpget.protocol.redact import REDACTED_VALUE, redact_credentials
from httpget.protocol.request import build_request_headers, send_request
from httpget.protocol.response import Response, parse_response


__all__ = [
    # Models
    "RequestInfo",
    "Response",
    # Framing
    "build_request_headers",
    "send_request",
    "parse_response",
    # Body
    "BodyReader",
    "ChunkedBodyReader",
    "LengthBodyReader",
    # Constants
    "DEFAULT_MAX_REDIRECTIONS",
    "HTTP_SCHEME",
    "PROTOCOL_VERSIONS",
    "UNLIMITED_REDIRECTIONS",
    # Redaction
    "REDACTED_VALUE",
    "redact_credentials",
]
