"""Data models for proctop."""

from dataclasses import dataclass
from enum import Enum

MAX_CMDLINE_BYTES = 127


@dataclass(slots=True, frozen=True)
class Process:
    """Immutable snapshot of one scanned process."""

    pid: int
    command_line: str  # At most MAX_CMDLINE_BYTES when UTF-8 encoded


@dataclass(slots=True, frozen=True)
class SignalEntry:
    """A nameable signal from the catalog."""

    name: str
    code: int


@dataclass(slots=True, frozen=True)
class DisplayBudget:
    """Terminal size for one frame."""

    rows: int
    cols: int


class Focus(Enum):
    """Which part of the screen owns keyboard input."""

    PROCESS = "process"
    SIGNAL = "signal"
    # Reserved, every key is a no-op
    SEARCH = "search"
    SORT = "sort"


class Direction(Enum):
    """Navigation direction for selection models."""

    UP = "up"
    DOWN = "down"
