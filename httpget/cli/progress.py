"""Single-line download progress display."""

import time
from collections.abc import Callable
from typing import TextIO

import click


class ProgressPrinter:
    """Redraws a progress line on stderr at most once per second.

    The line is never newline-terminated until the transfer is done, so
    it can be redrawn in place with a carriage return.
    """

    def __init__(
        self,
        quiet: bool = False,
        stream: TextIO | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the printer.

        Args:
            quiet: Suppress all output.
            stream: Output stream; stderr if None.
            clock: Time source in seconds.
        """
        self._quiet = quiet
        self._stream = stream
        self._clock = clock
        self._begin: int | None = None
        self._last_update: int | None = None
        self._line_len = 0

    def update(self, read: int, total: int, done: bool = False) -> None:
        """Redraw the progress line.

        Args:
            read: Body bytes read so far.
            total: Announced body size; 0 if unknown.
            done: Whether the transfer has ended.
        """
        if self._quiet:
            return

        now = int(self._clock())
        if not done and now == self._last_update:
            return
        self._last_update = now
        if self._begin is None:
            self._begin = now

        read_kb = read >> 10
        total_kb = total >> 10
        elapsed = now - self._begin
        rate = read_kb // (elapsed + 1)

        line = (
            f"Downloaded {read_kb}/{total_kb} kB in {elapsed} second(s), "
            f"average rate: {rate} kB/s"
        )
        if total_kb >= read_kb:
            line += f", time left: {(total_kb - read_kb) // (rate + 1)} s"

        erase = "\r" + " " * self._line_len + "\r"
        self._line_len = len(line)
        self._echo(erase + line + ("\n" if done else ""))

    def _echo(self, text: str) -> None:
        click.echo(text, file=self._stream, err=True, nl=False)
