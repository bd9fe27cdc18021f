# snapshot.py - immutable whole-table snapshots used for undo and redo

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Iterable, Tuple

from klondike.common import DECK_SIZE, Card
from klondike.errors import DragInProgressError
from klondike.table import Table

CardValue = Tuple[int, int, bool]
Pile = Tuple[CardValue, ...]


def _freeze(cards: Iterable[Card]) -> Pile:
    return tuple(c.as_tuple() for c in cards)


def _refill(stack, pile: Pile) -> None:
    stack.remove_all_cards()
    for value in pile:
        stack.add_card(Card.from_tuple(value))


@dataclass(frozen=True)
class Snapshot:
    """
    Every card of the table at one instant, stored as plain
    ``(suit, rank, face_up)`` tuples so nothing is shared with live stacks.
    ``timestamp`` is for diagnostics and takes no part in equality.
    """

    tableau: Tuple[Pile, ...]
    foundations: Tuple[Pile, ...]
    stock: Pile
    talon: Pile
    timestamp: float = field(default_factory=time.time, compare=False)

    # ~16 bytes per card for 52 cards plus container overhead
    ESTIMATED_MEMORY_FOOTPRINT = 1024

    @classmethod
    def capture(cls, table: Table) -> "Snapshot":
        if not table.drag.is_empty:
            raise DragInProgressError(
                f"cannot snapshot while {len(table.drag)} card(s) are being dragged"
            )
        return cls(
            tableau=tuple(_freeze(s) for s in table.tableau),
            foundations=tuple(_freeze(s) for s in table.foundations),
            stock=_freeze(table.stock),
            talon=_freeze(table.talon),
        )

    def restore(self, table: Table) -> None:
        """Replace the contents of every stack on ``table`` with this snapshot."""
        table.drag.remove_all_cards()
        for stack, pile in zip(table.tableau, self.tableau):
            _refill(stack, pile)
        for stack, pile in zip(table.foundations, self.foundations):
            _refill(stack, pile)
        _refill(table.stock, self.stock)
        _refill(table.talon, self.talon)

    @property
    def total_cards(self) -> int:
        return (
            sum(len(p) for p in self.tableau)
            + self.foundation_card_count
            + len(self.stock)
            + len(self.talon)
        )

    @property
    def foundation_card_count(self) -> int:
        return sum(len(p) for p in self.foundations)

    @property
    def is_game_won(self) -> bool:
        return self.foundation_card_count == DECK_SIZE

    @property
    def summary(self) -> str:
        stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(self.timestamp))
        return "\n".join([
            "Snapshot summary:",
            f"- Timestamp: {stamp}",
            f"- Total cards: {self.total_cards}/{DECK_SIZE}",
            f"- Foundation: {self.foundation_card_count} cards",
            f"- Tableau: {[len(p) for p in self.tableau]}",
            f"- Stock: {len(self.stock)}",
            f"- Talon: {len(self.talon)}",
            f"- Game won: {self.is_game_won}",
        ])

    def __str__(self) -> str:
        return self.summary
