# errors.py - exceptions raised by the Klondike core


class StackUnderflowError(AssertionError):
    """A caller asked a stack to pop more cards than it holds."""


class DragInProgressError(RuntimeError):
    """The drag stack is occupied where it must be empty."""


class TableCorruptedError(RuntimeError):
    """The table no longer holds exactly one 52-card deck."""
