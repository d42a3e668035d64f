"""Scrollable selection state for the process list and the signal menu."""

from collections.abc import Iterator, Sequence
from typing import Generic, TypeVar

from proctop.models import Direction, Process, SignalEntry
from proctop.signals import SIGNAL_CATALOG

MAX_SHOWN_PROCS = 20
MAX_SHOWN_SIGNALS = 10

T = TypeVar("T")


class SelectionModel(Generic[T]):
    """
    A window of at most `capacity` rows over a sequence of items.

    `scroll_offset` is the index of the first visible item and
    `selected_offset` is the selected row relative to the window. The number of
    rows actually shown is further limited by the viewport, which the
    renderer's layout sets every frame.
    """

    def __init__(self, items: Sequence[T] = (), capacity: int = MAX_SHOWN_PROCS) -> None:
        self._items: list[T] = list(items)
        self._capacity = capacity
        self._viewport = capacity
        self.scroll_offset = 0
        self.selected_offset = 0

    @property
    def items(self) -> list[T]:
        return self._items

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def window(self) -> int:
        """Maximum rows the window may show this frame."""
        return max(0, min(self._capacity, self._viewport))

    @property
    def shown_count(self) -> int:
        """Rows actually shown this frame."""
        return max(0, min(self.window, len(self._items) - self.scroll_offset))

    def replace(self, items: Sequence[T]) -> None:
        """Rebuild from a fresh item sequence and re-clamp the selection."""
        self._items = list(items)
        self._clamp()

    def set_viewport(self, rows: int) -> None:
        """Limit the window to `rows` rows and re-clamp the selection."""
        self._viewport = max(0, rows)
        self._clamp()

    def reset(self) -> None:
        self.scroll_offset = 0
        self.selected_offset = 0

    def navigate(self, direction: Direction) -> None:
        """Move the selection one row, scrolling at the window edges."""
        shown = self.shown_count
        if shown == 0:
            return

        if direction is Direction.DOWN:
            if self.selected_offset >= shown - 1:
                if self.scroll_offset + shown < len(self._items):
                    self.scroll_offset += 1
            else:
                self.selected_offset += 1
        else:
            if self.selected_offset <= 0:
                if self.scroll_offset > 0:
                    self.scroll_offset -= 1
            else:
                self.selected_offset -= 1

    def current(self) -> T | None:
        """Return the selected item, or None when nothing is shown."""
        if self.shown_count == 0:
            return None
        return self._items[self.scroll_offset + self.selected_offset]

    def visible(self) -> Iterator[tuple[T, bool]]:
        """Yield `(item, is_selected)` for every row in the window."""
        start = self.scroll_offset
        for row, item in enumerate(self._items[start : start + self.shown_count]):
            yield item, row == self.selected_offset

    def _clamp(self) -> None:
        # Keep the window from starting past the end of a shrunken list
        self.scroll_offset = max(0, min(self.scroll_offset, len(self._items) - self.window))
        shown = self.shown_count
        if shown == 0:
            self.selected_offset = 0
        else:
            self.selected_offset = max(0, min(self.selected_offset, shown - 1))


class ProcessListModel(SelectionModel[Process]):
    """Selection over the latest process scan."""

    def __init__(self, items: Sequence[Process] = ()) -> None:
        super().__init__(items, capacity=MAX_SHOWN_PROCS)


class SignalMenuModel(SelectionModel[SignalEntry]):
    """Selection over the fixed signal catalog."""

    def __init__(self, items: Sequence[SignalEntry] = SIGNAL_CATALOG) -> None:
        super().__init__(items, capacity=MAX_SHOWN_SIGNALS)
