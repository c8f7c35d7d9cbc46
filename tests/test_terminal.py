"""Tests for terminal setup and restoration."""

import io
import signal
from unittest.mock import MagicMock, patch

from termvid import TerminalSession
from termvid.terminal import (
    RESTORE_SEQUENCE,
    SETUP_SEQUENCE,
    TERMINATION_SIGNALS,
    get_terminal_size,
    make_finalizer,
)


class TestSequences:
    """Tests for the escape sequences used around playback."""

    def test_setup_hides_cursor_and_clears(self):
        """Test startup hides the cursor and clears the screen."""
        assert b"\x1b[?25l" in SETUP_SEQUENCE
        assert b"\x1b[2J" in SETUP_SEQUENCE

    def test_restore_shows_cursor_and_clears(self):
        """Test shutdown resets colors, clears and shows the cursor."""
        assert RESTORE_SEQUENCE.startswith(b"\x1b[0m")
        assert b"\x1b[2J" in RESTORE_SEQUENCE
        assert RESTORE_SEQUENCE.endswith(b"\x1b[?25h")


class TestTerminalSession:
    """Tests for the TerminalSession context manager."""

    def test_setup_and_restore(self):
        """Test the session wraps output with setup and restore sequences."""
        output = io.BytesIO()
        with TerminalSession(output, install_signals=False):
            output.write(b"frame")

        assert output.getvalue() == SETUP_SEQUENCE + b"frame" + RESTORE_SEQUENCE

    def test_restore_on_error(self):
        """Test the terminal is restored when playback raises."""
        output = io.BytesIO()
        try:
            with TerminalSession(output, install_signals=False):
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        assert output.getvalue().endswith(RESTORE_SEQUENCE)

    def test_restore_is_idempotent(self):
        """Test repeated restores only write once."""
        output = io.BytesIO()
        with TerminalSession(output, install_signals=False) as session:
            session.restore()
            session.restore()

        assert output.getvalue().count(RESTORE_SEQUENCE) == 1

    def test_signal_handlers_installed_and_restored(self):
        """Test termination signals are routed to the finalizer during playback."""
        before = {signum: signal.getsignal(signum) for signum in TERMINATION_SIGNALS}
        output = io.BytesIO()

        with TerminalSession(output):
            for signum in TERMINATION_SIGNALS:
                assert signal.getsignal(signum) is not before[signum]

        for signum in TERMINATION_SIGNALS:
            assert signal.getsignal(signum) == before[signum]


class TestFinalizer:
    """Tests for the interrupt finalizer."""

    def test_writes_restore_and_exits_zero(self):
        """Test the finalizer restores the terminal and exits cleanly."""
        finalizer = make_finalizer(7)
        with patch("termvid.terminal.os.write") as write, patch("termvid.terminal.os._exit") as exit_:
            finalizer(signal.SIGINT, None)

        write.assert_called_once_with(7, RESTORE_SEQUENCE)
        exit_.assert_called_once_with(0)

    def test_exits_even_if_write_fails(self):
        """Test a closed terminal does not prevent exiting."""
        finalizer = make_finalizer(7)
        with patch("termvid.terminal.os.write", side_effect=OSError("closed")), patch(
            "termvid.terminal.os._exit"
        ) as exit_:
            finalizer(signal.SIGTERM, None)

        exit_.assert_called_once_with(0)


class TestTerminalSize:
    """Tests for terminal size probing."""

    def test_reports_columns_and_lines(self):
        """Test size comes from the blessed terminal."""
        terminal = MagicMock(width=120, height=40)
        assert get_terminal_size(terminal) == (120, 40)

    def test_fallback(self):
        """Test a terminal without size falls back to 80x24."""
        terminal = MagicMock(width=0, height=0)
        assert get_terminal_size(terminal) == (80, 24)
