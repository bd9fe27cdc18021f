# table.py - the Klondike board: seven columns, four foundations, stock, talon and drag
from collections import Counter
from typing import Iterable, List

from klondike.common import DECK_SIZE, Card
from klondike.errors import TableCorruptedError
from klondike.stacks import CardStack, StackKind

TABLEAU_COUNT = 7
FOUNDATION_COUNT = 4


class Table:
    """
    Owns every stack of one game. Callers construct and pass it around
    explicitly; there is no shared instance.
    """

    def __init__(self):
        self.tableau = [CardStack(StackKind.TABLEAU, f"tableau-{i}") for i in range(TABLEAU_COUNT)]
        self.foundations = [CardStack(StackKind.FOUNDATION, f"foundation-{i}") for i in range(FOUNDATION_COUNT)]
        self.talon = CardStack(StackKind.TALON)
        self.stock = CardStack(StackKind.STOCK)
        self.drag = CardStack(StackKind.DRAG)

    def playing_stacks(self) -> List[CardStack]:
        """Every stack except drag, in snapshot order."""
        return [*self.tableau, *self.foundations, self.stock, self.talon]

    def all_stacks(self) -> List[CardStack]:
        return [*self.playing_stacks(), self.drag]

    def set_observer(self, observer) -> None:
        for stack in self.all_stacks():
            stack.set_observer(observer)

    def clear(self) -> None:
        for stack in self.all_stacks():
            stack.remove_all_cards()

    def card_count(self) -> int:
        return sum(len(s) for s in self.all_stacks())

    def iter_cards(self) -> Iterable[Card]:
        for stack in self.all_stacks():
            yield from stack.cards

    def deal(self, deck: List[Card]) -> None:
        """
        Lay out a fresh deck: column i gets i+1 cards with only the last one
        face up, the rest go face down into the stock. Cards are drawn from the
        end of ``deck`` so the list works like a face-down pile.
        """
        deck = list(deck)
        for col in range(TABLEAU_COUNT):
            for r in range(col + 1):
                c = deck.pop()
                c.face_up = (r == col)
                self.tableau[col].add_card(c)
        # Remaining cards go to stock, face down
        for c in deck:
            c.face_up = False
            self.stock.add_card(c)

    def verify(self) -> None:
        """Raise TableCorruptedError unless the table holds each of the 52 cards exactly once."""
        counts = Counter(c.key for c in self.iter_cards())
        total = sum(counts.values())
        if total != DECK_SIZE:
            raise TableCorruptedError(f"table holds {total} cards, expected {DECK_SIZE}")
        dupes = sorted(k for k, n in counts.items() if n > 1)
        if dupes:
            raise TableCorruptedError(f"duplicate cards on table: {dupes}")
        bad = [k for k in counts if not (0 <= k[0] < 4 and 1 <= k[1] <= 13)]
        if bad:
            raise TableCorruptedError(f"unknown cards on table: {bad}")

    def is_won(self) -> bool:
        return all(len(f) == 13 for f in self.foundations)
