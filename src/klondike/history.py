# history.py - snapshot-based undo/redo history

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Optional

from klondike.snapshot import Snapshot
from klondike.table import Table

logger = logging.getLogger(__name__)

DEFAULT_MAX_UNDO_DEPTH = 50


class UndoManager:
    """
    Two bounded LIFO logs of snapshots.

    Before every player move the live table is saved onto the undo log,
    which also wipes the redo log. Undo moves the live table onto the redo
    log and restores the newest undo entry; redo is the mirror image. Both
    logs drop their oldest entry once they hold ``max_undo_depth`` snapshots.
    """

    def __init__(self, max_undo_depth: int = DEFAULT_MAX_UNDO_DEPTH):
        if max_undo_depth < 1:
            raise ValueError(f"max_undo_depth must be at least 1, got {max_undo_depth}")
        self.max_undo_depth = max_undo_depth
        self._undo_stack: Deque[Snapshot] = deque(maxlen=max_undo_depth)
        self._redo_stack: Deque[Snapshot] = deque(maxlen=max_undo_depth)

    @property
    def undo_depth(self) -> int:
        return len(self._undo_stack)

    @property
    def redo_depth(self) -> int:
        return len(self._redo_stack)

    def can_undo(self) -> bool:
        return len(self._undo_stack) > 0

    def can_redo(self) -> bool:
        return len(self._redo_stack) > 0

    def save_state(self, state: Snapshot) -> None:
        # deque(maxlen) evicts the oldest entry on overflow
        self._undo_stack.append(state)
        self._redo_stack.clear()

    def undo(self) -> Optional[Snapshot]:
        """Pop the newest undo entry without touching the redo log."""
        if not self._undo_stack:
            return None
        return self._undo_stack.pop()

    def redo(self) -> Optional[Snapshot]:
        if not self._redo_stack:
            return None
        return self._redo_stack.pop()

    def prepare_for_undo(self, current_state: Snapshot) -> None:
        self._redo_stack.append(current_state)

    def prepare_for_redo(self, current_state: Snapshot) -> None:
        self._undo_stack.append(current_state)

    def perform_undo(self, table: Table) -> bool:
        """Restore the previous state onto ``table``. False when there is nothing to undo."""
        if not self.can_undo():
            return False
        self.prepare_for_undo(Snapshot.capture(table))
        self.undo().restore(table)
        logger.debug("undo: %r", self)
        return True

    def perform_redo(self, table: Table) -> bool:
        if not self.can_redo():
            return False
        self.prepare_for_redo(Snapshot.capture(table))
        self.redo().restore(table)
        logger.debug("redo: %r", self)
        return True

    def clear_history(self) -> None:
        self._undo_stack.clear()
        self._redo_stack.clear()

    def peek_undo(self) -> Optional[Snapshot]:
        return self._undo_stack[-1] if self._undo_stack else None

    def peek_redo(self) -> Optional[Snapshot]:
        return self._redo_stack[-1] if self._redo_stack else None

    def pop_undo(self) -> bool:
        """Drop the newest undo entry. False when the log is empty."""
        if not self._undo_stack:
            return False
        self._undo_stack.pop()
        return True

    def pop_redo(self) -> bool:
        if not self._redo_stack:
            return False
        self._redo_stack.pop()
        return True

    def compact_undo_stack(self, keep_count: int) -> None:
        """Keep only the ``keep_count`` newest undo entries."""
        keep_count = max(0, keep_count)
        while len(self._undo_stack) > keep_count:
            self._undo_stack.popleft()

    @property
    def estimated_memory_usage(self) -> int:
        return (len(self._undo_stack) + len(self._redo_stack)) * Snapshot.ESTIMATED_MEMORY_FOOTPRINT

    @property
    def debug_description(self) -> str:
        return "\n".join([
            "UndoManager state:",
            f"- Max depth: {self.max_undo_depth}",
            f"- Undo stack: {self.undo_depth} states",
            f"- Redo stack: {self.redo_depth} states",
            f"- Can undo: {self.can_undo()}",
            f"- Can redo: {self.can_redo()}",
            f"- Memory usage: ~{self.estimated_memory_usage // 1024}KB",
        ])

    def log_history(self) -> None:
        logger.debug("=== UNDO HISTORY ===")
        for index, state in enumerate(self._undo_stack):
            logger.debug("[%d] %.3f - foundation: %d cards", index, state.timestamp, state.foundation_card_count)
        logger.debug("=== REDO HISTORY ===")
        for index, state in enumerate(self._redo_stack):
            logger.debug("[%d] %.3f - foundation: %d cards", index, state.timestamp, state.foundation_card_count)

    def __repr__(self) -> str:
        return (
            f"UndoManager(undo: {self.undo_depth}, redo: {self.redo_depth}, "
            f"memory: ~{self.estimated_memory_usage // 1024}KB)"
        )
