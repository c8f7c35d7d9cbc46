"""Terminal setup, restoration and size probing.

TerminalSession hides the cursor and clears the screen for playback and puts
the terminal back on exit. On SIGINT/SIGTERM a finalizer writes the same
restore sequence straight to the output file descriptor and exits the
process, without touching any playback state.
"""

from __future__ import annotations

import logging
import os
import signal
from typing import BinaryIO

from blessed import Terminal

logger = logging.getLogger(__name__)

# ANSI escape codes
ESC = "\033"
CLEAR_SCREEN = f"{ESC}[2J"
CURSOR_HOME = f"{ESC}[H"
HIDE_CURSOR = f"{ESC}[?25l"
SHOW_CURSOR = f"{ESC}[?25h"
RESET = f"{ESC}[0m"

SETUP_SEQUENCE = f"{HIDE_CURSOR}{CLEAR_SCREEN}{CURSOR_HOME}".encode("ascii")
RESTORE_SEQUENCE = f"{RESET}{CLEAR_SCREEN}{CURSOR_HOME}{SHOW_CURSOR}".encode("ascii")

TERMINATION_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGINT", "SIGTERM", "SIGHUP") if hasattr(signal, name)
)


def get_terminal_size(terminal: Terminal | None = None) -> tuple[int, int]:
    """Get terminal size as (columns, lines) with fallback."""
    term = terminal or Terminal()
    width, height = term.width, term.height
    if not width or not height:
        return 80, 24
    return width, height


def _output_fd(output: BinaryIO) -> int:
    try:
        return output.fileno()
    except (AttributeError, OSError, ValueError):
        return 1


def make_finalizer(fd: int, exit_code: int = 0):
    """
    Build a signal handler that restores the terminal and exits.

    The handler only writes a precomputed byte string to ``fd`` and then
    exits immediately, so it is safe to run at any point of the main loop.
    """
    restore = RESTORE_SEQUENCE

    def _finalize(_signum, _frame) -> None:
        try:
            os.write(fd, restore)
        except OSError:
            pass
        os._exit(exit_code)

    return _finalize


class TerminalSession:
    """
    Context manager preparing the terminal for frame playback.

    Example:
        with TerminalSession(sys.stdout.buffer):
            scheduler.run()
    """

    def __init__(self, output: BinaryIO, install_signals: bool = True):
        """
        Initialize the session.

        :param output: Binary terminal output stream
        :param install_signals: Register the interrupt finalizer while active
        """
        self.output = output
        self.install_signals = install_signals
        self._previous_handlers: dict[int, object] = {}
        self._active = False

    def __enter__(self) -> TerminalSession:
        if self.install_signals:
            self._install_handlers()
        self.output.write(SETUP_SEQUENCE)
        self.output.flush()
        self._active = True
        return self

    def __exit__(self, *exc) -> None:
        self.restore()
        self._restore_handlers()

    def restore(self) -> None:
        """Reset colors, clear the screen and show the cursor (idempotent)."""
        if not self._active:
            return
        self._active = False
        try:
            self.output.write(RESTORE_SEQUENCE)
            self.output.flush()
        except (OSError, ValueError) as e:
            logger.debug(f"Terminal restore failed: {e}")

    def _install_handlers(self) -> None:
        finalizer = make_finalizer(_output_fd(self.output))
        for signum in TERMINATION_SIGNALS:
            try:
                self._previous_handlers[signum] = signal.signal(signum, finalizer)
            except ValueError:
                # Not in the main thread
                logger.debug("Signal handlers not installed outside the main thread")
                break

    def _restore_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)
        self._previous_handlers.clear()


__all__ = [
    "RESTORE_SEQUENCE",
    "SETUP_SEQUENCE",
    "TerminalSession",
    "get_terminal_size",
    "make_finalizer",
]
