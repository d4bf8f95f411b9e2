"""HTTP response model and status/header parser."""

import re
from collections.abc import Callable, Iterator
from types import TracebackType

import structlog

from httpget.errors import (
    HeaderValueError,
    HttpGetError,
    InvalidHeaderError,
    InvalidStatusLineError,
    UnknownProtocolVersionError,
    UrlParseError,
)
from httpget.observability.metrics import TransferMetrics
from httpget.protocol.body import BodyReader, ChunkedBodyReader, LengthBodyReader
from httpget.protocol.constants import (
    CHUNKED_CODING,
    COMPONENT_PROTOCOL,
    HEADER_CONTENT_LENGTH,
    HEADER_CONTENT_RANGE,
    HEADER_LOCATION,
    HEADER_TRANSFER_ENCODING,
    HTTP_STATUS_MIN,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_REDIRECT_MAX,
    HTTP_STATUS_REDIRECT_MIN,
    PROTOCOL_VERSIONS,
    WHITESPACE,
)
from httpget.protocol.redact import REDACTED_VALUE, is_sensitive_header
from httpget.transport.connection import Connection
from httpget.url.models import Url
from httpget.url.parser import parse_url


logger = structlog.get_logger()

VERSION_PATTERN = re.compile(r"\S*", re.ASCII)
STATUS_CODE_PATTERN = re.compile(r"([0-9]{3})\s", re.ASCII)
CONTENT_LENGTH_PATTERN = re.compile(r"[0-9]+")
CONTENT_RANGE_PATTERN = re.compile(r"bytes ([0-9]+)-([0-9]+)/([0-9]+)")


class Response:
    """A parsed response whose body is read from the embedded connection.

    Attributes:
        version: Protocol version; 9 for 0.9, 10 for 1.0, 11 for 1.1.
        status: Status code.
        reason: Reason phrase.
        body_size: Content length; 0 if unknown.
        body_read: Number of body bytes read so far.
        ranged: Whether the body is a byte range (Content-Range seen).
        range_first / range_last / range_total: Content-Range values.
        chunked: Whether the body uses chunked transfer coding.
        chunk_size: Bytes left in the current chunk; 0 once done.
        location: Redirect target, if a Location header was present.
    """

    def __init__(self, connection: Connection) -> None:
        self.connection = connection
        self.version = 0
        self.status = 0
        self.reason = ""
        self.body_size = 0
        self.body_read = 0
        self.ranged = False
        self.range_first = 0
        self.range_last = 0
        self.range_total = 0
        self.chunked = False
        self.chunk_size = 0
        self.location: Url | None = None
        self._reader: BodyReader | None = None
        self._metrics = TransferMetrics.get_instance()

    @property
    def is_ok(self) -> bool:
        """Check for a 2xx status."""
        return HTTP_STATUS_OK_MIN <= self.status < HTTP_STATUS_OK_MAX

    @property
    def is_redirect(self) -> bool:
        """Check for a 3xx status."""
        return HTTP_STATUS_REDIRECT_MIN <= self.status < HTTP_STATUS_REDIRECT_MAX

    def open_body(self) -> BodyReader:
        """Select the body reader; for chunked bodies, read the first size.

        Returns:
            The active body reader.

        Raises:
            ChunkSizeError: If the first chunk-size line is malformed.
        """
        if self._reader is None:
            if self.chunked:
                reader = ChunkedBodyReader(self)
                reader.prime()
                self._reader = reader
            else:
                self._reader = LengthBodyReader(self)
        return self._reader

    def read(self, max_bytes: int) -> bytes:
        """Read up to max_bytes of the body.

        Args:
            max_bytes: Maximum number of bytes to return.

        Returns:
            Body bytes; empty once the body is complete.

        Raises:
            HttpGetError: On transport failure or malformed framing.
        """
        if max_bytes <= 0:
            msg = f"max_bytes must be positive, got {max_bytes}"
            raise ValueError(msg)
        self.connection.ensure_open()
        reader = self.open_body()

        try:
            data = reader.read(max_bytes)
        except HttpGetError as e:
            self._metrics.record_failure(e.error_class)
            self.connection.abort(e)
            raise

        self._metrics.record_body_bytes(len(data))
        return data

    def iter_bytes(self, chunk_size: int) -> Iterator[bytes]:
        """Iterate over the body in pieces of at most chunk_size bytes."""
        while data := self.read(chunk_size):
            yield data

    def detach_location(self) -> Url | None:
        """Move the Location out of the response before it is closed."""
        location, self.location = self.location, None
        return location

    def close(self) -> None:
        """Release the connection and any retained Location."""
        self.connection.close()
        self.location = None

    def __enter__(self) -> "Response":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def _handle_content_length(resp: Response, value: str) -> None:
    if resp.chunked:
        return
    if not CONTENT_LENGTH_PATTERN.fullmatch(value):
        raise HeaderValueError("Content-Length", value)
    resp.body_size = int(value)


def _handle_transfer_encoding(resp: Response, value: str) -> None:
    # Suffix match: "gzip, chunked" counts as chunked framing.
    if value.lower().endswith(CHUNKED_CODING):
        resp.chunked = True
        resp.body_size = 0


def _handle_content_range(resp: Response, value: str) -> None:
    match = CONTENT_RANGE_PATTERN.fullmatch(value)
    if match is None:
        raise HeaderValueError("Content-Range", value)
    first, last, total = (int(group) for group in match.groups())
    if not first <= last < total:
        raise HeaderValueError("Content-Range", value, "inconsistent range")
    resp.ranged = True
    resp.range_first = first
    resp.range_last = last
    resp.range_total = total


def _handle_location(resp: Response, value: str) -> None:
    try:
        resp.location = parse_url(value)
    except UrlParseError as e:
        raise HeaderValueError("Location", value) from e


HEADER_HANDLERS: dict[str, Callable[[Response, str], None]] = {
    HEADER_CONTENT_LENGTH: _handle_content_length,
    HEADER_TRANSFER_ENCODING: _handle_transfer_encoding,
    HEADER_CONTENT_RANGE: _handle_content_range,
    HEADER_LOCATION: _handle_location,
}


def parse_status_line(line: str, resp: Response) -> None:
    """Parse a status line into resp.version, resp.status and resp.reason.

    Args:
        line: Status line without terminator.
        resp: Response to fill in.

    Raises:
        InvalidStatusLineError: If the line is not `HTTP/x.y ddd reason'.
        UnknownProtocolVersionError: If x.y is not 0.9, 1.0 or 1.1.
    """
    if line[:5].lower() != "http/":
        raise InvalidStatusLineError

    rest = line[5:]
    version = VERSION_PATTERN.match(rest).group(0)  # type: ignore[union-attr]
    if version not in PROTOCOL_VERSIONS:
        raise UnknownProtocolVersionError(version)
    resp.version = PROTOCOL_VERSIONS[version]

    rest = rest[len(version) :].lstrip(WHITESPACE)
    match = STATUS_CODE_PATTERN.match(rest)
    if match is None or int(match.group(1)) < HTTP_STATUS_MIN:
        raise InvalidStatusLineError
    resp.status = int(match.group(1))

    reason = rest[match.end() :].strip(WHITESPACE)
    if not reason:
        msg = "Invalid response: Reason message missing"
        raise InvalidStatusLineError(msg)
    resp.reason = reason


def parse_header_line(line: str) -> tuple[str, str]:
    """Split a header line into trimmed field and value.

    Args:
        line: Header line without terminator.

    Returns:
        (field, value) pair.

    Raises:
        InvalidHeaderError: If `:' is missing or either side is empty.
    """
    field, sep, value = line.partition(":")
    if not sep:
        msg = "`:' missing"
        raise InvalidHeaderError(msg)

    field = field.strip(WHITESPACE)
    if not field:
        msg = "Field name missing"
        raise InvalidHeaderError(msg)

    value = value.strip(WHITESPACE)
    if not value:
        msg = "Value missing"
        raise InvalidHeaderError(msg)

    return field, value


def parse_response(conn: Connection) -> Response:
    """Read a status line and headers from the connection.

    The body is left unread; call Response.open_body() (the redirect engine
    does) before reading it. Unrecognized headers are ignored.

    Args:
        conn: Connection the request was sent on.

    Returns:
        Response positioned at the start of the body.

    Raises:
        HttpGetError: The first transport or parse failure encountered.
    """
    log = logger.bind(component=COMPONENT_PROTOCOL)
    resp = Response(conn)

    status_line = conn.receive_line()
    log.debug("status_line", line=status_line)
    parse_status_line(status_line, resp)

    while line := conn.receive_line():
        field, value = parse_header_line(line)
        log.debug(
            "response_header",
            field=field,
            value=REDACTED_VALUE if is_sensitive_header(field) else value,
        )
        handler = HEADER_HANDLERS.get(field.lower())
        if handler is not None:
            handler(resp, value)

    log.debug(
        "response_parsed",
        status=resp.status,
        version=resp.version,
        body_size=resp.body_size,
        chunked=resp.chunked,
        ranged=resp.ranged,
        location=str(resp.location) if resp.location else None,
    )
    return resp
