"""Keyboard dispatch for proctop."""

import logging
import signal
from collections.abc import Callable

from proctop.models import Direction, Focus
from proctop.selection import ProcessListModel, SignalMenuModel
from proctop.signals import SignalSender

logger = logging.getLogger(__name__)

CTRL_C = b"\x03"
ESC = b"\x1b"
ENTER_KEYS = (b"\r", b"\n")
QUIT_KEYS = (CTRL_C, b"q", b"Q")


class InputDispatcher:
    """
    Route one key per loop iteration to the handler for the current focus.

    Transitions live in a `Focus -> key -> handler` table. Quit keys work in
    every focus; an empty read (`b""`) and unknown keys do nothing. The
    reserved search and sort focuses have no bindings at all.
    """

    def __init__(
        self,
        processes: ProcessListModel,
        signals: SignalMenuModel,
        sender: SignalSender,
    ) -> None:
        """
        Initialize the InputDispatcher.

        Args:
            processes: Selection over the current scan.
            signals: Selection over the signal catalog.
            sender: Where signals are delivered.
        """
        self.processes = processes
        self.signals = signals
        self.focus = Focus.PROCESS
        self.show_help = True
        self.running = True
        self.interrupted = False
        self._sender = sender
        self._target_pid: int | None = None

        process_keys: dict[bytes, Callable[[], None]] = {}
        for keys, handler in (
            (b"hH", self._toggle_help),
            (b"kK", lambda: self.processes.navigate(Direction.UP)),
            (b"jJ", lambda: self.processes.navigate(Direction.DOWN)),
            (b"tT", self._terminate_current),
            (b"sS", self._open_signal_menu),
        ):
            for key in keys:
                process_keys[bytes([key])] = handler

        signal_keys: dict[bytes, Callable[[], None]] = {ESC: self._close_signal_menu}
        for keys, handler in (
            (b"kK", lambda: self.signals.navigate(Direction.UP)),
            (b"jJ", lambda: self.signals.navigate(Direction.DOWN)),
        ):
            for key in keys:
                signal_keys[bytes([key])] = handler
        for key in ENTER_KEYS:
            signal_keys[key] = self._send_selected_signal

        self._transitions: dict[Focus, dict[bytes, Callable[[], None]]] = {
            Focus.PROCESS: process_keys,
            Focus.SIGNAL: signal_keys,
            Focus.SEARCH: {},
            Focus.SORT: {},
        }

    @property
    def target_pid(self) -> int | None:
        """Pid captured when the signal menu was opened."""
        return self._target_pid

    def dispatch(self, key: bytes) -> None:
        """Apply the effect of one input event."""
        if not key:
            return
        if key in QUIT_KEYS:
            self.running = False
            self.interrupted = key == CTRL_C
            return

        handler = self._transitions[self.focus].get(key)
        if handler is not None:
            handler()

    def _toggle_help(self) -> None:
        self.show_help = not self.show_help

    def _terminate_current(self) -> None:
        proc = self.processes.current()
        if proc is not None:
            self._sender.send(proc.pid, int(signal.SIGTERM))

    def _open_signal_menu(self) -> None:
        proc = self.processes.current()
        self._target_pid = proc.pid if proc is not None else None
        self.signals.reset()
        self.focus = Focus.SIGNAL

    def _close_signal_menu(self) -> None:
        self.focus = Focus.PROCESS

    def _send_selected_signal(self) -> None:
        entry = self.signals.current()
        if entry is not None and self._target_pid is not None:
            logger.debug("Sending %s to pid %d", entry.name, self._target_pid)
            self._sender.send(self._target_pid, entry.code)
        self.focus = Focus.PROCESS
