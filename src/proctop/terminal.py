"""Raw-mode terminal lifecycle for proctop."""

import logging
import os
import sys
import termios
from typing import TextIO

from proctop.errors import InputReadError, TerminalError
from proctop.models import DisplayBudget

logger = logging.getLogger(__name__)

CSI = "\033["
ENTER_ALT_SCREEN = f"{CSI}?1049h"
LEAVE_ALT_SCREEN = f"{CSI}?1049l"
HIDE_CURSOR = f"{CSI}?25l"
SHOW_CURSOR = f"{CSI}?25h"
CURSOR_HOME = f"{CSI}H"

# VTIME is in tenths of a second
READ_TIMEOUT_DECISECONDS = 1
DEFAULT_SIZE = DisplayBudget(rows=24, cols=80)

# termios attribute list indices
IFLAG, OFLAG, CFLAG, LFLAG, ISPEED, OSPEED, CC = range(7)


def make_raw(attrs: list) -> list:
    """
    Return a raw-mode copy of termios attributes (see termios(3), 'Raw mode').

    Reads return after at most READ_TIMEOUT_DECISECONDS with whatever is
    available, possibly nothing.
    """
    raw = list(attrs)
    raw[CC] = list(attrs[CC])
    raw[IFLAG] &= ~(
        termios.IGNBRK
        | termios.BRKINT
        | termios.ISTRIP
        | termios.INLCR
        | termios.IGNCR
        | termios.ICRNL
        | termios.IXON
    )
    raw[OFLAG] &= ~termios.OPOST
    raw[LFLAG] &= ~(termios.ECHO | termios.ICANON | termios.ISIG | termios.IEXTEN)
    raw[CFLAG] &= ~termios.CSIZE
    raw[CFLAG] |= termios.CS8
    raw[CC][termios.VMIN] = 0
    raw[CC][termios.VTIME] = READ_TIMEOUT_DECISECONDS
    return raw


class TerminalController:
    """
    Own the terminal mode for the lifetime of the program.

    enter() saves the original attributes and switches to raw mode on the
    alternate screen with a hidden cursor; restore() undoes all of it and may
    be called any number of times. Used as a context manager, restore() runs
    on every exit path.
    """

    def __init__(self, stdin_fd: int | None = None, stdout: TextIO | None = None) -> None:
        """
        Initialize the TerminalController.

        Args:
            stdin_fd: File descriptor keys are read from. Default: stdin.
            stdout: Stream frames are written to. Default: sys.stdout.
        """
        self._fd = stdin_fd
        self._out = sys.stdout if stdout is None else stdout
        self._saved: list | None = None
        self._last_size = DEFAULT_SIZE

    @property
    def is_active(self) -> bool:
        """Whether the terminal is currently in raw mode."""
        return self._saved is not None

    def enter(self) -> None:
        """Switch to raw mode on the alternate screen."""
        if self.is_active:
            return
        if self._fd is None:
            try:
                self._fd = sys.stdin.fileno()
            except (OSError, ValueError, AttributeError) as exc:
                raise TerminalError(f"standard input is unavailable: {exc}") from exc
        if not os.isatty(self._fd):
            raise TerminalError("standard input is not a terminal")
        try:
            saved = termios.tcgetattr(self._fd)
        except termios.error as exc:
            raise TerminalError(f"cannot read terminal attributes: {exc}") from exc

        self.write(f"{ENTER_ALT_SCREEN}{CURSOR_HOME}")
        try:
            termios.tcsetattr(self._fd, termios.TCSANOW, make_raw(saved))
        except termios.error as exc:
            self.write(LEAVE_ALT_SCREEN)
            raise TerminalError(f"cannot set terminal attributes: {exc}") from exc
        self._saved = saved
        self.write(HIDE_CURSOR)

    def restore(self) -> None:
        """Put the terminal back the way enter() found it."""
        if self._saved is None:
            return
        saved, self._saved = self._saved, None
        error: termios.error | None = None
        try:
            termios.tcsetattr(self._fd, termios.TCSANOW, saved)
        except termios.error as exc:
            error = exc
        self.write(f"{SHOW_CURSOR}{LEAVE_ALT_SCREEN}")
        if error is not None:
            logger.warning("Could not restore terminal attributes: %s", error)

    def window_size(self) -> DisplayBudget:
        """Return the current terminal size."""
        try:
            size = os.get_terminal_size(self._out.fileno())
        except (OSError, ValueError, AttributeError):
            return self._last_size
        self._last_size = DisplayBudget(rows=size.lines, cols=size.columns)
        return self._last_size

    def read_key(self) -> bytes:
        """Read at most one byte, or b"" if none arrived within the timeout."""
        try:
            return os.read(self._fd, 1)
        except OSError as exc:
            raise InputReadError(f"reading input failed: {exc}") from exc

    def write(self, text: str) -> None:
        self._out.write(text)
        self._out.flush()

    def __enter__(self) -> "TerminalController":
        self.enter()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.restore()
