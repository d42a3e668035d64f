"""proctop - Main loop."""

import logging
import sys

from proctop.dispatch import InputDispatcher
from proctop.errors import InputReadError, TerminalError
from proctop.render import Frame, Renderer
from proctop.scanner import ProcessScanner
from proctop.selection import ProcessListModel, SignalMenuModel
from proctop.signals import PsutilSignalSender, SignalSender
from proctop.terminal import TerminalController

logger = logging.getLogger(__name__)


class ProcTopApp:
    """
    Terminal process list with signal dispatch.

    Each iteration reads one key (waiting at most the terminal's read
    timeout), rescans processes, paints a frame and then applies the key.
    An empty read still rescans and repaints, which keeps the display live.
    """

    def __init__(
        self,
        terminal: TerminalController | None = None,
        scanner: ProcessScanner | None = None,
        renderer: Renderer | None = None,
        sender: SignalSender | None = None,
    ) -> None:
        """Initialize the ProcTopApp."""
        self._terminal = terminal or TerminalController()
        self._scanner = scanner or ProcessScanner()
        self._renderer = renderer or Renderer()
        self.processes = ProcessListModel()
        self.signals = SignalMenuModel()
        self.dispatcher = InputDispatcher(
            self.processes, self.signals, sender or PsutilSignalSender()
        )

    def refresh(self) -> Frame:
        """Rescan processes and paint one frame."""
        budget = self._terminal.window_size()
        layout = self._renderer.layout(budget)

        self.processes.set_viewport(layout.process_rows)
        self.processes.replace(self._scanner.scan())

        frame = self._renderer.render(
            budget,
            self.dispatcher.focus,
            self.processes,
            self.signals,
            self.dispatcher.show_help,
        )
        self._terminal.write(frame.encode())
        return frame

    def run(self) -> int:
        """
        Run until a quit key is pressed.

        Returns the process exit code. The terminal is restored before this
        returns, whatever ended the loop.
        """
        try:
            with self._terminal:
                while self.dispatcher.running:
                    key = self._terminal.read_key()
                    self.refresh()
                    self.dispatcher.dispatch(key)
                    if self.dispatcher.interrupted:
                        self._terminal.write("^C")
        except TerminalError as exc:
            logger.error("%s", exc)
            return 1
        except InputReadError as exc:
            logger.info("Restored terminal.")
            logger.error("%s", exc)
            return 1

        logger.info("Restored terminal.")
        return 0


def main() -> int:
    """Entry point for proctop."""
    logging.basicConfig(
        level=logging.INFO,
        format="[%(levelname)s] %(message)s",
        stream=sys.stderr,
    )
    app = ProcTopApp()
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
