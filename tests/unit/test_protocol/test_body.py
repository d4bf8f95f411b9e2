"""Unit tests for body readers."""

import pytest

from httpget.errors import (
    BodyTooShortError,
    ChunkFramingError,
    ChunkSizeError,
    ChunkTooShortError,
    ConnectionStateError,
)
from httpget.observability.metrics import TransferMetrics
from httpget.protocol import Response, parse_response
from tests.helpers.fake_socket import fake_connection


def open_response(*chunks: bytes) -> Response:
    """Parse a scripted response and open its body."""
    conn, _ = fake_connection(*chunks)
    resp = parse_response(conn)
    resp.open_body()
    return resp


def read_all(resp: Response, size: int = 1024) -> bytes:
    """Read the whole body in pieces of size bytes."""
    return b"".join(resp.iter_bytes(size))


class TestLengthBody:
    """Tests for Content-Length and read-to-EOF bodies."""

    @pytest.mark.unit
    def test_reads_exact_length(self) -> None:
        """Test that exactly Content-Length bytes are returned."""
        resp = open_response(b"HTTP/1.1 200 OK\r\nContent-Length: 5\r\n\r\nhello")

        assert resp.read(100) == b"hello"
        assert resp.read(100) == b""
        assert resp.body_read == 5

    @pytest.mark.unit
    def test_ignores_bytes_past_length(self) -> None:
        """Test that trailing bytes beyond Content-Length are not returned."""
        resp = open_response(
            b"HTTP/1.1 200 OK\r\nContent-Length: 5\r\n\r\nhelloEXTRA"
        )

        assert read_all(resp) == b"hello"

    @pytest.mark.unit
    def test_small_reads(self) -> None:
        """Test that reads never exceed max_bytes."""
        resp = open_response(b"HTTP/1.1 200 OK\r\nContent-Length: 5\r\n", b"\r\nhello")

        assert resp.read(2) == b"he"
        assert resp.read(2) == b"ll"
        assert resp.read(2) == b"o"
        assert resp.read(2) == b""

    @pytest.mark.unit
    def test_unknown_length_reads_to_eof(self) -> None:
        """Test that a body without length is read until the peer closes."""
        resp = open_response(b"HTTP/1.0 200 OK\r\n\r\nfirst ", b"second")

        assert read_all(resp, 4) == b"first second"
        assert resp.body_size == 0

    @pytest.mark.unit
    def test_body_too_short(self) -> None:
        """Test that EOF before Content-Length bytes is an error."""
        resp = open_response(b"HTTP/1.1 200 OK\r\nContent-Length: 10\r\n\r\nhello")

        assert resp.read(100) == b"hello"
        with pytest.raises(BodyTooShortError) as exc_info:
            resp.read(100)

        assert exc_info.value.expected == 10
        assert exc_info.value.received == 5

    @pytest.mark.unit
    def test_read_error_is_sticky(self) -> None:
        """Test that a body error fails the connection for later reads."""
        resp = open_response(b"HTTP/1.1 200 OK\r\nContent-Length: 10\r\n\r\n")

        with pytest.raises(BodyTooShortError) as first:
            resp.read(10)
        assert resp.connection.failed

        with pytest.raises(BodyTooShortError) as second:
            resp.read(10)
        assert second.value is first.value

    @pytest.mark.unit
    def test_non_positive_read_rejected(self) -> None:
        """Test that max_bytes must be positive."""
        resp = open_response(b"HTTP/1.1 200 OK\r\nContent-Length: 1\r\n\r\nx")

        with pytest.raises(ValueError, match="max_bytes"):
            resp.read(0)

    @pytest.mark.unit
    def test_records_metrics(self) -> None:
        """Test that body bytes and failures are counted."""
        resp = open_response(b"HTTP/1.1 200 OK\r\nContent-Length: 8\r\n\r\nabcd")
        metrics = TransferMetrics.get_instance()

        resp.read(100)
        with pytest.raises(BodyTooShortError):
            resp.read(100)

        assert metrics.body_bytes_total == 4
        assert metrics.failures_total == {"BODY_TOO_SHORT": 1}


class TestChunkedBody:
    """Tests for chunked transfer decoding."""

    @pytest.mark.unit
    def test_concatenates_chunks(self) -> None:
        """Test that chunk payloads are concatenated in order."""
        resp = open_response(
            b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n"
            b"5\r\nhello\r\n6\r\n world\r\n0\r\n\r\n"
        )

        assert read_all(resp) == b"hello world"
        assert resp.body_read == 11
        assert resp.chunk_size == 0

    @pytest.mark.unit
    def test_read_never_crosses_chunk(self) -> None:
        """Test that one read returns data from a single chunk."""
        resp = open_response(
            b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n"
            b"3\r\nabc\r\n3\r\ndef\r\n0\r\n\r\n"
        )

        assert resp.read(100) == b"abc"
        assert resp.read(100) == b"def"
        assert resp.read(100) == b""

    @pytest.mark.unit
    def test_small_reads_within_chunk(self) -> None:
        """Test reading a chunk in pieces smaller than the chunk."""
        resp = open_response(
            b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n",
            b"A\r\n0123456789\r\n",
            b"0\r\n\r\n",
        )

        assert read_all(resp, 3) == b"0123456789"

    @pytest.mark.unit
    def test_hex_sizes_any_case(self) -> None:
        """Test that chunk sizes are hexadecimal in either case."""
        payload = b"x" * 26
        resp = open_response(
            b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n"
            b"1a\r\n" + payload + b"\r\n1A\r\n" + payload + b"\r\n0\r\n\r\n"
        )

        assert read_all(resp) == payload * 2

    @pytest.mark.unit
    def test_empty_body(self) -> None:
        """Test that a lone zero-size chunk is an empty body."""
        resp = open_response(
            b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n0\r\n\r\n"
        )

        assert resp.read(100) == b""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "size_line",
        [b"zz", b"5;ext=1", b"", b"-5", b"1" + b"0" * 16, b"0" * 40],
    )
    def test_bad_chunk_size(self, size_line: bytes) -> None:
        """Test that malformed, oversized or too long size lines are rejected."""
        conn, _ = fake_connection(
            b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n"
            + size_line
            + b"\r\n"
        )
        resp = parse_response(conn)

        with pytest.raises(ChunkSizeError):
            resp.open_body()

    @pytest.mark.unit
    def test_largest_chunk_size_accepted(self) -> None:
        """Test that 2**64 - 1 is a valid chunk size."""
        conn, _ = fake_connection(
            b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n"
            b"ffffffffffffffff\r\n"
        )
        resp = parse_response(conn)

        resp.open_body()

        assert resp.chunk_size == (1 << 64) - 1

    @pytest.mark.unit
    def test_missing_crlf_after_chunk(self) -> None:
        """Test that chunk data must be followed by CRLF."""
        resp = open_response(
            b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n"
            b"5\r\nhelloXX0\r\n\r\n"
        )

        with pytest.raises(ChunkFramingError, match="Chunk not terminated"):
            resp.read(100)

    @pytest.mark.unit
    def test_chunk_cut_short(self) -> None:
        """Test that EOF inside a chunk is an error."""
        resp = open_response(
            b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n10\r\nabc"
        )

        with pytest.raises(ChunkTooShortError) as exc_info:
            resp.read(100)

        assert exc_info.value.expected == 16
        assert exc_info.value.received == 3
        assert resp.connection.failed

    @pytest.mark.unit
    def test_framing_error_is_sticky(self) -> None:
        """Test that a read after a missing chunk CRLF fails instead of ending."""
        resp = open_response(
            b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n"
            b"4\r\nWikiXX5\r\npedia\r\n0\r\n\r\n"
        )

        with pytest.raises(ChunkFramingError) as first:
            resp.read(100)
        assert resp.chunk_size == 0

        with pytest.raises(ChunkFramingError) as second:
            resp.read(100)
        assert second.value is first.value

    @pytest.mark.unit
    def test_size_error_is_sticky(self) -> None:
        """Test that a read after a malformed chunk size fails instead of ending."""
        resp = open_response(
            b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n4\r\nWiki\r\nzz\r\n"
        )

        with pytest.raises(ChunkSizeError) as first:
            resp.read(100)
        assert resp.connection.failed

        with pytest.raises(ChunkSizeError) as second:
            resp.read(100)
        assert second.value is first.value

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "body",
        [b"0" * 40 + b"\r\n", b"4\r\nWiki\r\n" + b"0" * 40 + b"\r\n"],
    )
    def test_long_size_line_reported_as_size_error(self, body: bytes) -> None:
        """Test that a too long size line fails the connection with ChunkSizeError."""
        conn, _ = fake_connection(
            b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n" + body
        )
        resp = parse_response(conn)

        with pytest.raises(ChunkSizeError) as first:
            resp.read(100)

        assert isinstance(conn.error, ChunkSizeError)
        with pytest.raises(ChunkSizeError) as second:
            resp.read(100)
        assert second.value is first.value

    @pytest.mark.unit
    def test_read_after_close_rejected(self) -> None:
        """Test that reading a closed response raises instead of returning EOF."""
        resp = open_response(
            b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n0\r\n\r\n"
        )
        resp.close()

        with pytest.raises(ConnectionStateError):
            resp.read(100)


class TestReadSequences:
    """Tests for read sequences across the end of the body."""

    @pytest.mark.unit
    def test_wikipedia_chunks(self) -> None:
        """Test the classic chunked example and that the end costs no I/O."""
        conn, sock = fake_connection(
            b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n"
            b"4\r\nWiki\r\n5\r\npedia\r\n0\r\n\r\n"
        )
        resp = parse_response(conn)
        resp.open_body()

        assert read_all(resp) == b"Wikipedia"
        calls = sock.recv_calls
        assert resp.read(100) == b""
        assert sock.recv_calls == calls

    @pytest.mark.unit
    def test_two_byte_reads(self) -> None:
        """Test five 2-byte reads of a 10-byte body, then end of body."""
        resp = open_response(
            b"HTTP/1.1 200 OK\r\nContent-Length: 10\r\n\r\n", b"0123456789"
        )

        assert [resp.read(2) for _ in range(5)] == [
            b"01",
            b"23",
            b"45",
            b"67",
            b"89",
        ]
        assert resp.read(2) == b""

    @pytest.mark.unit
    def test_disconnect_after_eight_bytes(self) -> None:
        """Test that the read crossing the missing bytes fails."""
        resp = open_response(
            b"HTTP/1.1 200 OK\r\nContent-Length: 10\r\n\r\n", b"01234567"
        )

        for _ in range(4):
            assert len(resp.read(2)) == 2
        with pytest.raises(BodyTooShortError):
            resp.read(2)
