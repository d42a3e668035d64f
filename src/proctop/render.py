"""Frame rendering for proctop."""

from dataclasses import dataclass, field

from rich.cells import cell_len, set_cell_size

from proctop.models import DisplayBudget, Focus
from proctop.selection import (
    MAX_SHOWN_PROCS,
    ProcessListModel,
    SignalMenuModel,
)

CSI = "\033["
ERASE_LINE = f"{CSI}K"
ERASE_BELOW = f"{CSI}J"
HOME = f"{CSI}H"
RESET = f"{CSI}0m"

BLACK = f"{CSI}30m"
GREEN = f"{CSI}32m"
BLUE = f"{CSI}34m"
CYAN = f"{CSI}36m"
WHITE = f"{CSI}37m"
TITLE_STYLE = f"{WHITE}{CSI}48;5;1m"
HEADER_STYLE = f"{WHITE}{CSI}48;5;4m"
SELECTED_STYLE = f"{CSI}48;5;2m{BLACK}"
ROW_STYLE = GREEN
PID_STYLE = CYAN
RULE_STYLE = BLUE

PID_WIDTH = 7
PID_FIELD_WIDTH = PID_WIDTH + 2  # "%7d: "
SIGNAL_CODE_WIDTH = 4

# Title, header and the rule under the header
HEADER_ROWS = 3

HELP_LINES = (
    "K/J      -> Select Up/Down",
    "H        -> Toggle this help text",
    "Q/CTRL+C -> Quit",
    "T        -> Send SIGTERM to selected proc",
    "S        -> Send signal to selected proc (opens signal selection menu)",
    "ESC      -> Cancel send signal",
    "ENTER    -> Send the selected signal",
)


@dataclass(slots=True, frozen=True)
class Layout:
    """Rows granted to the process list for one frame."""

    process_rows: int


@dataclass(slots=True)
class Frame:
    """
    One painted screen.

    Lines are added until the row budget is spent; anything after that is
    dropped so the frame never scrolls the terminal.
    """

    budget: int
    lines: list[str] = field(default_factory=list)

    def add(self, line: str) -> bool:
        """Append a line if there is room. Returns False when it was dropped."""
        if len(self.lines) >= self.budget:
            return False
        self.lines.append(line)
        return True

    def encode(self) -> str:
        """Return the escape-sequence text that paints this frame."""
        body = "".join(f"{line}{RESET}{ERASE_LINE}\r\n" for line in self.lines)
        return f"{HOME}{RESET}{body}{ERASE_BELOW}"


def clip(text: str, width: int) -> str:
    """Cut `text` to at most `width` terminal cells."""
    if width <= 0:
        return ""
    if cell_len(text) <= width:
        return text
    return set_cell_size(text, width)


def fit(text: str, width: int) -> str:
    """Center `text` in `width` cells if it fits, else cut it to `width`."""
    if width <= 0:
        return ""
    size = cell_len(text)
    if size < width:
        return " " * ((width - size) // 2) + text
    return clip(text, width)


class Renderer:
    """Paint a bounded frame from the models and the current focus."""

    def __init__(self, max_process_rows: int = MAX_SHOWN_PROCS) -> None:
        self._max_process_rows = max_process_rows

    def layout(self, budget: DisplayBudget) -> Layout:
        """
        Compute how many process rows fit in `budget`.

        The footer gets whatever the process rows actually drawn leave over;
        the frame drops footer rows past the budget.
        """
        remaining = max(0, budget.rows - 1 - HEADER_ROWS)
        return Layout(process_rows=min(remaining, self._max_process_rows))

    def render(
        self,
        budget: DisplayBudget,
        focus: Focus,
        processes: ProcessListModel,
        signals: SignalMenuModel,
        show_help: bool,
    ) -> Frame:
        """Build the frame for the current state."""
        cols = max(0, budget.cols)
        frame = Frame(budget=max(0, budget.rows - 1))

        title = (
            f"Currently running processes: {len(processes.items)}"
            f" | Processes shown: {processes.shown_count}"
        )
        frame.add(f"{TITLE_STYLE}{fit(title, cols)}")
        frame.add(f"{HEADER_STYLE}{self._header(cols)}")
        frame.add(f"{RULE_STYLE}{'-' * cols}")

        for proc, selected in processes.visible():
            pid_text = f"{proc.pid:{PID_WIDTH}d}: "
            row = pid_text + fit(proc.command_line, cols - PID_FIELD_WIDTH)
            row = clip(row, cols)
            if selected:
                frame.add(f"{SELECTED_STYLE}{row}")
            else:
                frame.add(f"{PID_STYLE}{row[:PID_FIELD_WIDTH]}{ROW_STYLE}{row[PID_FIELD_WIDTH:]}")

        frame.add(f"{RULE_STYLE}{'-' * cols}")

        if focus is Focus.SIGNAL:
            for entry, selected in signals.visible():
                row = clip(f"{entry.code:{SIGNAL_CODE_WIDTH}d}: {entry.name}", cols)
                frame.add(f"{SELECTED_STYLE if selected else ROW_STYLE}{row}")
        elif show_help:
            for line in HELP_LINES:
                frame.add(f"{HEADER_STYLE}{clip(line, cols)}")

        return frame

    def _header(self, cols: int) -> str:
        label = "PID |"
        return clip(label + fit("CMDLINE", cols - len(label)), cols)
