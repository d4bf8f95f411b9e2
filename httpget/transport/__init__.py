"""Buffered byte-stream transport.

One Connection per HTTP exchange:
- address resolution with in-order fallback across candidates
- staged sends flushed in a blocking write loop
- look-ahead buffering for line-oriented reads
- sticky failure state once any I/O operation fails
"""

from httpget.transport.connection import Connection
from httpget.transport.constants import BUFFER_SIZE, HTTP_PORT, LINE_MAX
from httpget.transport.state_machine import ConnectionState, ConnectionStateMachine


__all__ = [
    "BUFFER_SIZE",
    "HTTP_PORT",
    "LINE_MAX",
    "Connection",
    "ConnectionState",
    "ConnectionStateMachine",
]
