"""Terminal abstraction for raw-mode byte input and ANSI output.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal``
backed by the process's stdin/stdout. Raw mode is entered through the
``raw_mode`` context manager, which restores the saved terminal
attributes on every exit path.
"""

from __future__ import annotations

import logging
import os
import sys
import termios
import tty
from contextlib import contextmanager
from typing import ContextManager, Iterator, Protocol

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CLEAR_SCREEN = "\x1b[2J\x1b[H"
RESET_STYLE = "\x1b[0m"
_COLUMN_FMT = "\x1b[{}G"

WRITE_LOG_ENV = "RLINE_WRITE_LOG"

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for the terminal operations the line editor needs."""

    def raw_mode(self) -> ContextManager[None]: ...

    def read_byte(self) -> int | None: ...

    def write(self, data: str) -> None: ...

    @property
    def columns(self) -> int: ...

    def hide_cursor(self) -> None: ...

    def show_cursor(self) -> None: ...

    def move_to_column(self, column: int) -> None: ...

    def clear_screen(self) -> None: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal implementation backed by ``sys.stdin``/``sys.stdout``.

    Reads are unbuffered, one byte at a time, straight from the stdin file
    descriptor so that nothing is held back in Python's text layer.
    """

    def __init__(self) -> None:
        self._original_termios: list | None = None
        self._write_log_path: str = os.environ.get(WRITE_LOG_ENV, "")

    # -- properties ---------------------------------------------------------

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).columns
        except (ValueError, OSError):
            return 80

    # -- raw mode -----------------------------------------------------------

    @contextmanager
    def raw_mode(self) -> Iterator[None]:
        """Put stdin into raw mode for the duration of the block."""
        fd = sys.stdin.fileno()

        self._original_termios = termios.tcgetattr(fd)
        logger.debug("entering raw mode on fd %d", fd)
        try:
            tty.setraw(fd)
            yield
        finally:
            termios.tcsetattr(fd, termios.TCSAFLUSH, self._original_termios)
            self._original_termios = None

    # -- input --------------------------------------------------------------

    def read_byte(self) -> int | None:
        """Block for one byte of input; ``None`` at end of input."""
        raw = os.read(sys.stdin.fileno(), 1)
        if not raw:
            return None
        return raw[0]

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write data to stdout and optionally to the write log."""
        self._raw_write(data)

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a") as f:
                    f.write(data)
            except OSError:
                pass

    def hide_cursor(self) -> None:
        self.write(HIDE_CURSOR)

    def show_cursor(self) -> None:
        self.write(SHOW_CURSOR)

    def move_to_column(self, column: int) -> None:
        self.write(_COLUMN_FMT.format(column))

    def clear_screen(self) -> None:
        self.write(CLEAR_SCREEN)

    def _raw_write(self, data: str) -> None:
        try:
            sys.stdout.write(data)
            sys.stdout.flush()
        except OSError:
            pass

