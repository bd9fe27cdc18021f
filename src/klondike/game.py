# game.py - a Klondike session: one table, its history and the player-level moves
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from klondike import common as C
from klondike import mechanics as M
from klondike.errors import DragInProgressError
from klondike.history import DEFAULT_MAX_UNDO_DEPTH, UndoManager
from klondike.snapshot import Snapshot
from klondike.stacks import CardStack, StackKind
from klondike.table import Table

logger = logging.getLogger(__name__)

DeckFactory = Callable[[], List[C.Card]]


class KlondikeGame:
    """
    Owns a Table and an UndoManager. Every move a player makes goes through
    perform_move so that it can be undone; the public move methods return
    False and leave everything untouched when the move is not legal.
    """

    def __init__(
        self,
        draw_count: int = 1,
        max_undo_depth: int = DEFAULT_MAX_UNDO_DEPTH,
        deck_factory: Optional[DeckFactory] = None,
        table: Optional[Table] = None,
    ):
        if draw_count not in (1, 3):
            raise ValueError(f"draw_count must be 1 or 3, got {draw_count}")
        self.draw_count = draw_count
        self.table = table if table is not None else Table()
        self.undo_manager = UndoManager(max_undo_depth)
        self.deck_factory: DeckFactory = deck_factory or C.make_deck
        self._initial_snapshot: Optional[Snapshot] = None
        self._drag_origin: Optional[CardStack] = None

    @classmethod
    def from_settings(cls, deck_factory: Optional[DeckFactory] = None) -> "KlondikeGame":
        settings = C.load_settings()
        return cls(
            draw_count=settings["draw_count"],
            max_undo_depth=settings["max_undo_depth"],
            deck_factory=deck_factory,
        )

    # ---------- Session ----------
    def initialize_deal(self) -> None:
        """Shuffle a fresh deck, wipe the table and history, and deal."""
        deck = self.deck_factory()
        self.table.clear()
        self._drag_origin = None
        self.undo_manager.clear_history()
        self.table.deal(deck)
        self.table.verify()
        self._initial_snapshot = Snapshot.capture(self.table)
        logger.debug("new deal:\n%s", "\n".join(M.describe(self.table.playing_stacks())))

    def restart(self) -> bool:
        """Go back to the position right after the current deal."""
        if self._initial_snapshot is None:
            return False
        self._initial_snapshot.restore(self.table)
        self._drag_origin = None
        self.undo_manager.clear_history()
        return True

    # ---------- Move engine ----------
    def move_top_card(self, src: CardStack, dst: CardStack, face_up: bool, make_new_top_card_face_up: bool) -> None:
        M.move_top_card(src, dst, face_up, make_new_top_card_face_up)

    def copy_cards(self, src: CardStack, dst: CardStack) -> None:
        M.copy_cards(src, dst)

    def perform_move(self, action: Callable[[], None]) -> None:
        """
        Save the live table onto the undo log, then run ``action``. If the
        action raises, the table is put back and its undo entry dropped; the
        redo log stays cleared.
        """
        before = Snapshot.capture(self.table)
        self.undo_manager.save_state(before)
        try:
            action()
        except Exception:
            self.undo_manager.pop_undo()
            before.restore(self.table)
            raise

    def undo(self) -> bool:
        return self.undo_manager.perform_undo(self.table)

    def redo(self) -> bool:
        return self.undo_manager.perform_redo(self.table)

    @property
    def can_undo(self) -> bool:
        return self.undo_manager.can_undo()

    @property
    def can_redo(self) -> bool:
        return self.undo_manager.can_redo()

    # ---------- Player moves ----------
    def draw_from_stock(self) -> bool:
        stock, talon = self.table.stock, self.table.talon
        if stock.is_empty:
            if talon.is_empty:
                return False
            self.perform_move(lambda: M.copy_cards(talon, stock))
            return True
        n = min(self.draw_count, len(stock))

        def _draw():
            for _ in range(n):
                M.move_top_card(stock, talon, face_up=True, make_new_top_card_face_up=False)

        self.perform_move(_draw)
        return True

    def move_to_foundation(self, source: CardStack) -> bool:
        top = source.top_card()
        if top is None or not top.face_up or source.kind is StackKind.FOUNDATION:
            return False
        dst = M.find_foundation_for(top, self.table.foundations)
        if dst is None:
            return False
        self.perform_move(lambda: M.move_top_card(source, dst, True, True))
        self._check_win()
        return True

    def can_move_cards(self, source: CardStack, index: int, target: CardStack) -> bool:
        if source is target or not (0 <= index < len(source)):
            return False
        if source.kind in (StackKind.STOCK, StackKind.DRAG):
            return False
        run = source.cards[index:]
        # talon and foundation only give up their top card
        if source.kind is not StackKind.TABLEAU and len(run) != 1:
            return False
        if not run[0].face_up:
            return False
        if target.kind is StackKind.FOUNDATION:
            return len(run) == 1 and target.can_accept(run[0])
        if target.kind is StackKind.TABLEAU:
            return target.can_accept_sequence(run)
        return False

    def move_cards(self, source: CardStack, index: int, target: CardStack) -> bool:
        """Move ``source.cards[index:]`` onto ``target`` if the rules allow it."""
        if not self.can_move_cards(source, index, target):
            return False
        count = len(source) - index
        self.perform_move(lambda: M.transfer_run(source, target, count, self.table.drag))
        self._check_win()
        return True

    # ---------- Drag gesture ----------
    @property
    def drag_origin(self) -> Optional[CardStack]:
        return self._drag_origin

    def begin_drag(self, source: CardStack, index: int) -> bool:
        """Lift ``source.cards[index:]`` onto the drag stack. Not recorded in history."""
        if self._drag_origin is not None or not self.table.drag.is_empty:
            raise DragInProgressError("a drag is already in progress")
        if not (0 <= index < len(source)) or source.kind in (StackKind.STOCK, StackKind.DRAG):
            return False
        if not source.cards[index].face_up:
            return False
        if source.kind is not StackKind.TABLEAU and index != len(source) - 1:
            return False
        run = source.cards[index:]
        source.pop_cards(len(run), False)
        for c in run:
            self.table.drag.add_card(c)
        self._drag_origin = source
        return True

    def cancel_drag(self) -> bool:
        """Put the dragged cards back where they came from, exactly as they were."""
        origin = self._drag_origin
        if origin is None:
            return False
        drag = self.table.drag
        for c in drag.cards:
            origin.add_card(c)
        drag.remove_all_cards()
        self._drag_origin = None
        return True

    def drop_drag(self, target: CardStack) -> bool:
        """
        Finish a drag on ``target``. The cards go back to their origin first so
        the move is recorded from a clean table; an illegal drop leaves it there.
        """
        origin = self._drag_origin
        if origin is None:
            return False
        index = len(origin)
        self.cancel_drag()
        return self.move_cards(origin, index, target)

    # ---------- Auto finish ----------
    def can_autofinish(self) -> bool:
        """Eligible when stock and talon are empty and every tableau card is face up."""
        t = self.table
        if not t.stock.is_empty or not t.talon.is_empty:
            return False
        return M.all_face_up(t.tableau)

    def next_auto_move(self) -> Optional[Tuple[CardStack, CardStack]]:
        return M.next_foundation_move(self.table.tableau, self.table.foundations)

    def auto_finish(self) -> bool:
        """Send every remaining card home as a single undoable move."""
        if not self.can_autofinish() or self.next_auto_move() is None:
            return False

        def _finish():
            step = self.next_auto_move()
            while step is not None:
                src, dst = step
                M.move_top_card(src, dst, True, True)
                step = self.next_auto_move()

        self.perform_move(_finish)
        self._check_win()
        return True

    def is_won(self) -> bool:
        return self.table.is_won()

    def _check_win(self) -> None:
        if self.table.is_won():
            logger.info("game won after %d recorded moves", self.undo_manager.undo_depth)
