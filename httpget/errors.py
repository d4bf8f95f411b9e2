"""Error types for the HTTP retrieval engine.

Every failure raised by the engine derives from HttpGetError. The exception
message is the human-readable description shown to the user; error_class
is a stable identifier used for metrics and structured logs.
"""

from enum import Enum


class ErrorClass(str, Enum):
    """Classification of engine errors.

    - ADDRESS_RESOLUTION: Host name could not be translated to an address
    - CONNECT: No candidate address accepted the connection
    - SEND / RECEIVE: Socket I/O failed mid-exchange
    - LINE_TOO_LONG: Status, header or chunk-size line exceeded its bound
    - INVALID_STATUS_LINE / UNKNOWN_PROTOCOL_VERSION: Malformed status line
    - INVALID_HEADER / HEADER_VALUE: Malformed header line or value
    - CHUNK_SIZE / CHUNK_FRAMING: Malformed chunked body framing
    - BODY_TOO_SHORT: Peer closed before the announced body length
    - RANGE_MISMATCH: Server returned a different byte range than requested
    - UNSUPPORTED_SCHEME: URL or redirect names a scheme other than http
    - URL_PARSE: URL text could not be parsed
    - CONNECTION_STATE: Operation on a closed connection
    """

    ADDRESS_RESOLUTION = "ADDRESS_RESOLUTION"
    CONNECT = "CONNECT"
    SEND = "SEND"
    RECEIVE = "RECEIVE"
    LINE_TOO_LONG = "LINE_TOO_LONG"
    INVALID_STATUS_LINE = "INVALID_STATUS_LINE"
    UNKNOWN_PROTOCOL_VERSION = "UNKNOWN_PROTOCOL_VERSION"
    INVALID_HEADER = "INVALID_HEADER"
    HEADER_VALUE = "HEADER_VALUE"
    CHUNK_SIZE = "CHUNK_SIZE"
    CHUNK_FRAMING = "CHUNK_FRAMING"
    BODY_TOO_SHORT = "BODY_TOO_SHORT"
    RANGE_MISMATCH = "RANGE_MISMATCH"
    UNSUPPORTED_SCHEME = "UNSUPPORTED_SCHEME"
    URL_PARSE = "URL_PARSE"
    CONNECTION_STATE = "CONNECTION_STATE"


class HttpGetError(Exception):
    """Base exception for all engine errors."""

    error_class: ErrorClass

    def __init__(self, message: str) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_class": self.error_class.value,
            "message": self.message,
        }


class UrlParseError(HttpGetError):
    """Raised when URL text does not match [[scheme://]host[:port]][path]."""

    error_class = ErrorClass.URL_PARSE

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to parse URL `{url}': {reason}")


class TransportError(HttpGetError):
    """Base class for socket-level failures."""


class AddressResolutionError(TransportError):
    """Raised when the host name cannot be resolved."""

    error_class = ErrorClass.ADDRESS_RESOLUTION

    def __init__(self, host: str, reason: str) -> None:
        self.host = host
        super().__init__(f"Failed to translate address: {reason}")


class ConnectError(TransportError):
    """Raised when no resolved address accepts the connection."""

    error_class = ErrorClass.CONNECT

    def __init__(self, host: str, port: int, reason: str) -> None:
        self.host = host
        self.port = port
        super().__init__(f"Failed to connect: {reason}")


class SendError(TransportError):
    """Raised when writing to the socket fails."""

    error_class = ErrorClass.SEND

    def __init__(self, reason: str) -> None:
        super().__init__(f"Send failed: {reason}")


class ReceiveError(TransportError):
    """Raised when reading from the socket fails."""

    error_class = ErrorClass.RECEIVE

    def __init__(self, reason: str) -> None:
        super().__init__(f"Receive failed: {reason}")


class ConnectionStateError(TransportError):
    """Raised when an operation is attempted on a closed connection."""

    error_class = ErrorClass.CONNECTION_STATE


class ProtocolError(HttpGetError):
    """Base class for malformed server input."""


class LineTooLongError(ProtocolError):
    """Raised when a line exceeds its length bound without a terminator."""

    error_class = ErrorClass.LINE_TOO_LONG

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__("Invalid response: Header line too long")


class InvalidStatusLineError(ProtocolError):
    """Raised for a status line without a valid status code or reason."""

    error_class = ErrorClass.INVALID_STATUS_LINE

    def __init__(self, message: str = "Invalid response status") -> None:
        super().__init__(message)


class UnknownProtocolVersionError(ProtocolError):
    """Raised when the status line names an unsupported HTTP version."""

    error_class = ErrorClass.UNKNOWN_PROTOCOL_VERSION

    def __init__(self, version: str) -> None:
        self.version = version
        super().__init__(f"Invalid response: Unknown protocol version: {version}")


class InvalidHeaderError(ProtocolError):
    """Raised for a header line that is not `field: value'."""

    error_class = ErrorClass.INVALID_HEADER

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid response header: {reason}")


class HeaderValueError(ProtocolError):
    """Raised when a recognized header carries a value that cannot be used."""

    error_class = ErrorClass.HEADER_VALUE

    def __init__(self, field: str, value: str, reason: str | None = None) -> None:
        self.field = field
        self.value = value
        message = f"Invalid response header: Bad {field} value: {value}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ChunkSizeError(ProtocolError):
    """Raised when a chunk-size line is not a bounded hexadecimal number."""

    error_class = ErrorClass.CHUNK_SIZE

    def __init__(self, line: str) -> None:
        self.line = line
        super().__init__(f"Invalid response: Bad chunk size: {line}")


class ChunkFramingError(ProtocolError):
    """Raised when chunk data is not followed by CRLF."""

    error_class = ErrorClass.CHUNK_FRAMING

    def __init__(self, message: str = "Invalid response: Chunk not terminated") -> None:
        super().__init__(message)


class ChunkTooShortError(ChunkFramingError):
    """Raised when the peer stops sending in the middle of a chunk."""

    def __init__(self, expected: int, received: int) -> None:
        self.expected = expected
        self.received = received
        super().__init__(
            f"Invalid response: Chunk too short (expected {expected} bytes, "
            f"got {received})"
        )


class BodyTooShortError(ProtocolError):
    """Raised when the peer closes before Content-Length bytes arrived."""

    error_class = ErrorClass.BODY_TOO_SHORT

    def __init__(self, expected: int, received: int) -> None:
        self.expected = expected
        self.received = received
        super().__init__(
            f"Invalid response: Body too short (expected {expected} bytes, "
            f"got {received})"
        )


class RangeMismatchError(ProtocolError):
    """Raised when Content-Range does not match the requested range."""

    error_class = ErrorClass.RANGE_MISMATCH

    def __init__(self, requested: str, returned: str) -> None:
        self.requested = requested
        self.returned = returned
        super().__init__(
            f"Invalid response: Range mismatch (requested {requested}, "
            f"got {returned})"
        )


class UnsupportedRedirectSchemeError(HttpGetError):
    """Raised when a URL or redirect target uses a scheme other than http."""

    error_class = ErrorClass.UNSUPPORTED_SCHEME

    def __init__(self, scheme: str) -> None:
        self.scheme = scheme
        super().__init__(f"URL scheme not supported: {scheme}")
