"""Signal catalog and delivery for proctop."""

import logging
import signal
from typing import Protocol

import psutil

from proctop.models import SignalEntry

logger = logging.getLogger(__name__)

# Standard signals in numeric (Linux) order
_SIGNAL_NAMES = (
    "SIGHUP",
    "SIGINT",
    "SIGQUIT",
    "SIGILL",
    "SIGTRAP",
    "SIGABRT",
    "SIGBUS",
    "SIGFPE",
    "SIGKILL",
    "SIGUSR1",
    "SIGSEGV",
    "SIGUSR2",
    "SIGPIPE",
    "SIGALRM",
    "SIGTERM",
    "SIGCHLD",
    "SIGCONT",
    "SIGSTOP",
    "SIGTSTP",
    "SIGTTIN",
    "SIGTTOU",
    "SIGURG",
    "SIGXCPU",
    "SIGXFSZ",
    "SIGVTALRM",
    "SIGPROF",
    "SIGWINCH",
    "SIGIO",
    "SIGSYS",
)


def _build_catalog() -> tuple[SignalEntry, ...]:
    """Build the catalog from the signals this platform defines."""
    entries = []
    for name in _SIGNAL_NAMES:
        code = getattr(signal, name, None)
        if code is not None:
            entries.append(SignalEntry(name=name, code=int(code)))
    return tuple(entries)


SIGNAL_CATALOG: tuple[SignalEntry, ...] = _build_catalog()


class SignalSender(Protocol):
    """Anything that can deliver a signal to a pid."""

    def send(self, pid: int, code: int) -> None: ...


class PsutilSignalSender:
    """
    Deliver signals with psutil.

    Fire-and-forget: a process that has already exited or that we may not
    signal is ignored.
    """

    def send(self, pid: int, code: int) -> None:
        """Send signal `code` to `pid`."""
        try:
            psutil.Process(pid).send_signal(code)
        except (psutil.NoSuchProcess, psutil.AccessDenied) as exc:
            logger.debug("Could not send signal %d to pid %d: %s", code, pid, exc)
