"""Output sink handling: file naming, resume detection and opening."""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

import click

from httpget.cli.constants import DEFAULT_OUTPUT_FILE, STDOUT_MARKER
from httpget.url.models import Url


class OutputError(Exception):
    """Raised when the output file cannot be inspected or written."""


def detect_output_file(explicit: str | None, url: Url) -> str:
    """Choose the output file name.

    Args:
        explicit: Name given on the command line, if any.
        url: URL being downloaded.

    Returns:
        The explicit name, else the last URL path component, else
        index.html.
    """
    if explicit:
        return explicit
    return url.name or DEFAULT_OUTPUT_FILE


def detect_output_pos(offset: int | None, output_file: str) -> int:
    """Resolve the resume offset.

    Args:
        offset: Explicit offset, or None to detect it from the size of an
            existing output file.
        output_file: Output file name.

    Returns:
        Byte offset to resume at; 0 starts from the beginning.

    Raises:
        OutputError: If the existing output file cannot be inspected.
    """
    if offset is not None:
        return offset

    # Standard output cannot be resumed.
    if output_file == STDOUT_MARKER:
        return 0

    try:
        return Path(output_file).stat().st_size
    except FileNotFoundError:
        return 0
    except OSError as e:
        msg = f"Failed to stat output file: {e.strerror or e}"
        raise OutputError(msg) from e


@contextmanager
def open_output(output_file: str, pos: int) -> Iterator[BinaryIO]:
    """Open the output sink positioned at pos.

    An existing file is truncated to pos, so a resumed transfer continues
    right after the bytes already saved.

    Args:
        output_file: File name, or `-' for standard output.
        pos: Offset to write from.

    Yields:
        Binary stream to write the body to.

    Raises:
        OutputError: If the file cannot be opened or positioned.
    """
    if output_file == STDOUT_MARKER:
        stream = click.get_binary_stream("stdout")
        yield stream
        stream.flush()
        return

    path = Path(output_file)
    try:
        if pos > 0 and path.exists():
            handle = path.open("r+b")
        else:
            handle = path.open("wb")
    except OSError as e:
        msg = f"Failed to open output file: {e.strerror or e}"
        raise OutputError(msg) from e

    with handle:
        try:
            handle.truncate(pos)
            handle.seek(pos)
        except OSError as e:
            msg = f"Failed to truncate output file: {e.strerror or e}"
            raise OutputError(msg) from e
        yield handle


def write_output(stream: BinaryIO, data: bytes) -> None:
    """Write a block of body data to the sink.

    Raises:
        OutputError: If the write fails.
    """
    try:
        stream.write(data)
    except OSError as e:
        msg = f"Failed to write to output file: {e.strerror or e}"
        raise OutputError(msg) from e
