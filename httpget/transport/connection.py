"""Buffered TCP connection used for a single HTTP exchange."""

import socket
from types import TracebackType

import structlog

from httpget.errors import (
    AddressResolutionError,
    ConnectError,
    HttpGetError,
    LineTooLongError,
    ReceiveError,
    SendError,
)
from httpget.transport.constants import (
    BUFFER_SIZE,
    COMPONENT_TRANSPORT,
    HTTP_PORT,
    LINE_MAX,
)
from httpget.transport.state_machine import ConnectionState, ConnectionStateMachine


logger = structlog.get_logger()


class Connection:
    """Byte-stream connection with a bounded staging buffer.

    The same buffer serves both directions, one at a time:
    - on send, it stages outgoing bytes until full or flushed
    - on receive, it holds look-ahead bytes read past a line terminator

    Any socket failure moves the connection to FAILED; from then on every
    operation re-raises that error without further I/O.
    """

    def __init__(self, sock: socket.socket, buffer_size: int = BUFFER_SIZE) -> None:
        """Initialize the connection.

        Args:
            sock: Connected stream socket. Ownership passes to the connection.
            buffer_size: Size of the staging buffer in bytes.
        """
        self._sock = sock
        self._buf = bytearray(buffer_size)
        self._begin = 0
        self._end = 0
        self._state = ConnectionStateMachine()

    @classmethod
    def connect(
        cls,
        host: str,
        port: int = -1,
        timeout: float | None = None,
    ) -> "Connection":
        """Open a connection to the first reachable address of a host.

        Args:
            host: Host name or address literal.
            port: TCP port; negative for the default HTTP port.
            timeout: Optional socket deadline in seconds; None blocks forever.

        Returns:
            Open connection.

        Raises:
            AddressResolutionError: If the host cannot be resolved.
            ConnectError: If no candidate address accepts the connection.
        """
        port = port if port >= 0 else HTTP_PORT
        log = logger.bind(component=COMPONENT_TRANSPORT, host=host, port=port)

        try:
            candidates = socket.getaddrinfo(
                host, port, socket.AF_UNSPEC, socket.SOCK_STREAM
            )
        except socket.gaierror as e:
            raise AddressResolutionError(host, e.strerror or str(e)) from e

        last_error: OSError | None = None
        for family, socktype, proto, _, address in candidates:
            log.debug("connect_attempt", address=str(address[0]))
            try:
                sock = socket.socket(family, socktype, proto)
            except OSError as e:
                last_error = e
                continue
            try:
                sock.settimeout(timeout)
                sock.connect(address)
            except OSError as e:
                last_error = e
                sock.close()
                continue
            log.debug("connected", address=str(address[0]))
            return cls(sock)

        reason = "no address candidates"
        if last_error is not None:
            reason = last_error.strerror or str(last_error)
        raise ConnectError(host, port, reason) from last_error

    @property
    def state(self) -> ConnectionState:
        """Get the connection state."""
        return self._state.state

    @property
    def failed(self) -> bool:
        """Check if the connection has failed."""
        return self._state.is_failed()

    @property
    def error(self) -> HttpGetError | None:
        """Get the error that failed the connection, if any."""
        return self._state.error

    @property
    def buffered(self) -> int:
        """Number of bytes currently held in the buffer."""
        return self._end - self._begin

    def send(self, data: bytes) -> None:
        """Stage bytes for sending, flushing whenever the buffer fills.

        Args:
            data: Bytes to send.

        Raises:
            SendError: If writing to the socket fails.
        """
        self._state.ensure_open()
        view = memoryview(data)
        while view:
            space = len(self._buf) - self._end
            if not space:
                self.flush()
                continue
            n = min(space, len(view))
            self._buf[self._end : self._end + n] = view[:n]
            self._end += n
            view = view[n:]

    def flush(self) -> None:
        """Write all staged bytes to the socket.

        Raises:
            SendError: If writing to the socket fails.
        """
        self._state.ensure_open()
        if self.buffered:
            try:
                self._sock.sendall(self._buf[self._begin : self._end])
            except OSError as e:
                raise self._state.fail(SendError(e.strerror or str(e))) from e
        self._begin = self._end = 0

    def shutdown_write(self) -> None:
        """Half-close the connection after the request has been flushed.

        Raises:
            SendError: If the shutdown fails.
        """
        self._state.ensure_open()
        try:
            self._sock.shutdown(socket.SHUT_WR)
        except OSError as e:
            raise self._state.fail(SendError(e.strerror or str(e))) from e

    def receive(self, max_bytes: int) -> bytes:
        """Receive up to max_bytes, draining buffered look-ahead first.

        Blocks until max_bytes are available or the peer closes the
        connection. Fewer bytes than requested means EOF was reached.

        Args:
            max_bytes: Maximum number of bytes to return.

        Returns:
            Received bytes; empty at EOF.

        Raises:
            ReceiveError: If reading from the socket fails.
        """
        self._state.ensure_open()
        out = bytearray()

        if self.buffered:
            n = min(self.buffered, max_bytes)
            out += self._buf[self._begin : self._begin + n]
            self._begin += n

        while len(out) < max_bytes:
            data = self._recv(max_bytes - len(out))
            if not data:
                break  # EOF
            out += data

        return bytes(out)

    def receive_line(self, limit: int = LINE_MAX) -> str:
        """Receive one line terminated by "\\n".

        The terminator and a trailing "\\r" are stripped. A line cut short by
        EOF is returned as is, so EOF yields an empty string.

        Args:
            limit: Maximum line length, excluding the terminator.

        Returns:
            The line decoded as ISO-8859-1.

        Raises:
            LineTooLongError: If no terminator appears within limit bytes.
            ReceiveError: If reading from the socket fails.
        """
        self._state.ensure_open()
        line = bytearray()

        while True:
            if not self.buffered and not self._refill():
                break  # EOF

            newline = self._buf.find(b"\n", self._begin, self._end)
            stop = newline if newline != -1 else self._end
            line += self._buf[self._begin : stop]
            self._begin = stop

            if len(line) > limit:
                raise self._state.fail(LineTooLongError(limit))
            if newline != -1:
                self._begin += 1  # pop "\n"
                break

        if line.endswith(b"\r"):
            del line[-1]
        if len(line) >= limit:
            raise self._state.fail(LineTooLongError(limit))

        return line.decode("iso-8859-1")

    def ensure_open(self) -> None:
        """Raise the stored error if the connection has failed or was closed.

        Raises:
            HttpGetError: The error that failed the connection.
            ConnectionStateError: If the connection was closed.
        """
        self._state.ensure_open()

    def abort(self, error: HttpGetError, replace: bool = False) -> HttpGetError:
        """Fail the connection with an error detected above the transport.

        Args:
            error: Protocol error that leaves the stream unusable.
            replace: Store error even if the transport already failed with
                the lower-level error it was derived from.

        Returns:
            The same error, for raising by the caller.
        """
        return self._state.fail(error, replace=replace)

    def close(self) -> None:
        """Release the socket. Safe to call more than once."""
        if self._state.is_closed():
            return
        self._sock.close()
        self._state.close()

    def __enter__(self) -> "Connection":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _recv(self, max_bytes: int) -> bytes:
        try:
            return self._sock.recv(max_bytes)
        except OSError as e:
            raise self._state.fail(ReceiveError(e.strerror or str(e))) from e

    def _refill(self) -> int:
        """Read once from the socket into the (empty) buffer."""
        self._begin = self._end = 0
        data = self._recv(len(self._buf))
        n = len(data)
        self._buf[self._end : self._end + n] = data
        self._end += n
        return n
