"""Process enumeration for proctop."""

import logging
from collections.abc import Callable, Iterable, Iterator
from typing import Any

import psutil

from proctop.models import MAX_CMDLINE_BYTES, Process

logger = logging.getLogger(__name__)

ProcessIterator = Callable[..., Iterator[Any]]


def format_cmdline(tokens: Iterable[str], limit: int = MAX_CMDLINE_BYTES) -> str:
    """
    Join command-line tokens with single spaces.

    Arguments that were not valid UTF-8 (decoded by psutil as lone
    surrogates) and non-printable characters become "?". The result is cut to
    `limit` bytes of UTF-8; a character split by the cut is dropped rather
    than left half-encoded.
    """
    joined = " ".join(tokens).encode("utf-8", errors="replace").decode("utf-8")
    text = "".join(ch if ch.isprintable() else "?" for ch in joined)
    encoded = text.encode("utf-8")
    if len(encoded) <= limit:
        return text
    return encoded[:limit].decode("utf-8", errors="ignore")


class ProcessScanner:
    """
    Enumerate running processes and their command lines using psutil.

    Every call to scan() rebuilds the list from scratch. Processes that exit
    mid-scan, zombies, and processes whose command line cannot be read are
    left out of that scan.
    """

    def __init__(self, process_iter: ProcessIterator | None = None) -> None:
        """
        Initialize the ProcessScanner.

        Args:
            process_iter: Replacement for psutil.process_iter, used by tests.
        """
        self._process_iter = process_iter or psutil.process_iter

    def scan(self) -> list[Process]:
        """Return one Process per readable process, in enumeration order."""
        processes: list[Process] = []

        for proc in self._process_iter(attrs=["pid", "cmdline"], ad_value=None):
            # process_iter has already dropped processes that vanished mid-read
            pid = proc.info.get("pid")
            tokens = proc.info.get("cmdline")
            if pid is None or pid < 0 or tokens is None:
                logger.debug("Skipping unreadable process %r", pid)
                continue

            processes.append(Process(pid=pid, command_line=format_cmdline(tokens)))

        return processes
