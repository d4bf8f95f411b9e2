"""Response body readers.

Exactly one reader is active per response, chosen by its framing:
- LengthBodyReader: bounded by Content-Length, or read to EOF if unknown
- ChunkedBodyReader: chunked transfer coding without extensions or trailers
"""

import re
from typing import TYPE_CHECKING, Protocol

from httpget.errors import (
    BodyTooShortError,
    ChunkFramingError,
    ChunkSizeError,
    ChunkTooShortError,
    LineTooLongError,
)
from httpget.protocol.constants import CHUNK_SIZE_LINE_MAX, CHUNK_SIZE_MAX


if TYPE_CHECKING:
    from httpget.protocol.response import Response


HEX_PATTERN = re.compile(r"[0-9A-Fa-f]+")


class BodyReader(Protocol):
    """Protocol for reading a response body."""

    def read(self, max_bytes: int) -> bytes:
        """Read up to max_bytes of body.

        Args:
            max_bytes: Maximum number of bytes to return (positive).

        Returns:
            Body bytes; empty at the end of the body.
        """
        ...


class LengthBodyReader:
    """Reads a body delimited by Content-Length or by connection close."""

    def __init__(self, response: "Response") -> None:
        self._response = response

    def read(self, max_bytes: int) -> bytes:
        resp = self._response

        if resp.body_size > 0:
            remaining = resp.body_size - resp.body_read
            if remaining == 0:
                return b""
            max_bytes = min(max_bytes, remaining)

        data = resp.connection.receive(max_bytes)
        if not data and resp.body_size > 0:
            raise BodyTooShortError(resp.body_size, resp.body_read)

        resp.body_read += len(data)
        return data


class ChunkedBodyReader:
    """Reads a body framed as `<hex-size>CRLF<data>CRLF ... 0CRLF'.

    The reader must be primed with the first chunk-size line right after
    the headers. A zero-size chunk ends the body; the trailing CRLF is
    never consumed because the connection is dropped afterwards.
    """

    def __init__(self, response: "Response") -> None:
        self._response = response

    def prime(self) -> None:
        """Consume the first chunk-size line."""
        self._response.chunk_size = self._read_chunk_size()

    def read(self, max_bytes: int) -> bytes:
        resp = self._response
        if resp.chunk_size == 0:
            return b""

        n = min(max_bytes, resp.chunk_size)
        data = resp.connection.receive(n)
        if len(data) < n:
            raise ChunkTooShortError(n, len(data))

        resp.chunk_size -= n
        resp.body_read += n

        if resp.chunk_size == 0:
            self._consume_chunk_end()
            resp.chunk_size = self._read_chunk_size()

        return data

    def _consume_chunk_end(self) -> None:
        tail = self._response.connection.receive(2)
        if tail != b"\r\n":
            raise ChunkFramingError

    def _read_chunk_size(self) -> int:
        conn = self._response.connection
        try:
            line = conn.receive_line(CHUNK_SIZE_LINE_MAX)
        except LineTooLongError as e:
            # The transport already failed with the line error.
            raise conn.abort(ChunkSizeError("<line too long>"), replace=True) from e

        if not HEX_PATTERN.fullmatch(line) or int(line, 16) > CHUNK_SIZE_MAX:
            raise conn.abort(ChunkSizeError(line))
        return int(line, 16)
