"""Connection lifecycle state machine implementation."""

from enum import Enum, auto
from typing import ClassVar

import structlog

from httpget.errors import ConnectionStateError, HttpGetError
from httpget.transport.constants import COMPONENT_TRANSPORT


logger = structlog.get_logger()


class ConnectionState(Enum):
    """Connection lifecycle states.

    State transitions:
        OPEN -> FAILED: A send or receive failed; the error is kept
        OPEN -> CLOSED: The connection was released normally
        FAILED -> CLOSED: A failed connection was released
    """

    OPEN = auto()
    FAILED = auto()
    CLOSED = auto()


class ConnectionStateMachine:
    """State machine for a single connection.

    Once FAILED, the stored error is re-raised by every guarded operation,
    so no further I/O happens on the socket.
    """

    VALID_TRANSITIONS: ClassVar[dict[ConnectionState, set[ConnectionState]]] = {
        ConnectionState.OPEN: {ConnectionState.FAILED, ConnectionState.CLOSED},
        ConnectionState.FAILED: {ConnectionState.CLOSED},
        ConnectionState.CLOSED: set(),  # Terminal state
    }

    def __init__(self) -> None:
        """Initialize the state machine in OPEN state."""
        self._state = ConnectionState.OPEN
        self._error: HttpGetError | None = None
        self._log = logger.bind(component=COMPONENT_TRANSPORT)

    @property
    def state(self) -> ConnectionState:
        """Get the current state."""
        return self._state

    @property
    def error(self) -> HttpGetError | None:
        """Get the error that failed the connection, if any."""
        return self._error

    def can_transition(self, to_state: ConnectionState) -> bool:
        """Check if a transition to the given state is valid.

        Args:
            to_state: The target state.

        Returns:
            True if the transition is valid, False otherwise.
        """
        return to_state in self.VALID_TRANSITIONS.get(self._state, set())

    def fail(self, error: HttpGetError, replace: bool = False) -> HttpGetError:
        """Move to FAILED and remember the error.

        Args:
            error: The error that failed the connection.
            replace: On an already FAILED connection, store error in place of
                the one kept so far.

        Returns:
            The same error, for raising by the caller.
        """
        if self.can_transition(ConnectionState.FAILED):
            self._log.debug(
                "connection_failed",
                error_class=error.error_class.value,
                error=error.message,
            )
            self._state = ConnectionState.FAILED
            self._error = error
        elif replace and self._state == ConnectionState.FAILED:
            self._error = error
        return error

    def close(self) -> None:
        """Move to CLOSED. Closing twice is a no-op."""
        if self.can_transition(ConnectionState.CLOSED):
            self._state = ConnectionState.CLOSED

    def ensure_open(self) -> None:
        """Raise unless the connection can still perform I/O.

        Raises:
            HttpGetError: The stored error if the connection has failed.
            ConnectionStateError: If the connection was closed.
        """
        if self._state == ConnectionState.FAILED and self._error is not None:
            raise self._error
        if self._state == ConnectionState.CLOSED:
            msg = "Connection is closed"
            raise ConnectionStateError(msg)

    def is_open(self) -> bool:
        """Check if the connection can perform I/O."""
        return self._state == ConnectionState.OPEN

    def is_failed(self) -> bool:
        """Check if the connection has failed."""
        return self._state == ConnectionState.FAILED

    def is_closed(self) -> bool:
        """Check if the connection was released."""
        return self._state == ConnectionState.CLOSED
