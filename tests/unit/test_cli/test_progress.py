"""Unit tests for the progress line."""

import io

import pytest

from httpget.cli.progress import ProgressPrinter


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestProgressPrinter:
    """Tests for ProgressPrinter."""

    @pytest.mark.unit
    def test_first_line(self) -> None:
        """Test the progress line format with a known total."""
        stream = io.StringIO()
        printer = ProgressPrinter(stream=stream, clock=FakeClock())

        printer.update(0, 2048)

        assert stream.getvalue() == (
            "\r\r"
            "Downloaded 0/2 kB in 0 second(s), average rate: 0 kB/s, time left: 2 s"
        )

    @pytest.mark.unit
    def test_redraw_at_most_once_per_second(self) -> None:
        """Test that updates within the same second are skipped."""
        stream = io.StringIO()
        clock = FakeClock()
        printer = ProgressPrinter(stream=stream, clock=clock)

        printer.update(0, 4096)
        first = stream.getvalue()
        clock.now += 0.5
        printer.update(1024, 4096)

        assert stream.getvalue() == first

    @pytest.mark.unit
    def test_redraw_erases_previous_line(self) -> None:
        """Test that a redraw blanks out the previous line first."""
        stream = io.StringIO()
        clock = FakeClock()
        printer = ProgressPrinter(stream=stream, clock=clock)

        printer.update(0, 0)
        first = stream.getvalue()[2:]
        clock.now += 2
        printer.update(4096, 0)

        second = stream.getvalue()[len(first) + 2 :]
        assert second.startswith("\r" + " " * len(first) + "\r")
        assert second.endswith(
            "Downloaded 4/0 kB in 2 second(s), average rate: 1 kB/s"
        )

    @pytest.mark.unit
    def test_done_always_printed_with_newline(self) -> None:
        """Test that the final update is drawn and ends the line."""
        stream = io.StringIO()
        printer = ProgressPrinter(stream=stream, clock=FakeClock())

        printer.update(0, 1024)
        printer.update(1024, 1024, done=True)

        output = stream.getvalue()
        assert output.endswith(
            "Downloaded 1/1 kB in 0 second(s), average rate: 1 kB/s, "
            "time left: 0 s\n"
        )

    @pytest.mark.unit
    def test_quiet(self) -> None:
        """Test that quiet mode prints nothing."""
        stream = io.StringIO()
        printer = ProgressPrinter(quiet=True, stream=stream, clock=FakeClock())

        printer.update(0, 1024)
        printer.update(1024, 1024, done=True)

        assert stream.getvalue() == ""
