"""Exception types for proctop."""


class ProcTopError(Exception):
    """Base class for proctop errors."""


class TerminalError(ProcTopError, OSError):
    """Standard input is not a terminal or its attributes are inaccessible."""


class InputReadError(ProcTopError, OSError):
    """Reading a key from the terminal failed while the loop was running."""
