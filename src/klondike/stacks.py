# stacks.py - card stacks and the per-kind rules deciding what may be dropped on them

from __future__ import annotations

import weakref
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from klondike.common import ACE, KING, Card
from klondike.errors import StackUnderflowError


class StackKind(Enum):
    TABLEAU = "tableau"
    FOUNDATION = "foundation"
    TALON = "talon"
    STOCK = "stock"
    DRAG = "drag"


def _tableau_accepts(stack: "CardStack", card: Card) -> bool:
    top = stack.top_card()
    if top is None:
        # empty column takes any King
        return card.rank == KING
    return (
        top.face_up
        and card.face_up
        and not top.is_same_color(card)
        and card.rank == top.rank - 1
    )


def _foundation_accepts(stack: "CardStack", card: Card) -> bool:
    top = stack.top_card()
    if top is None:
        return card.rank == ACE
    return card.suit == top.suit and card.rank == top.rank + 1


def _never_accepts(stack: "CardStack", card: Card) -> bool:
    return False


_ACCEPT_RULES: Dict[StackKind, Callable[["CardStack", Card], bool]] = {
    StackKind.TABLEAU: _tableau_accepts,
    StackKind.FOUNDATION: _foundation_accepts,
    # source-only piles
    StackKind.TALON: _never_accepts,
    StackKind.STOCK: _never_accepts,
    # relay for a gesture in flight, never a drop target
    StackKind.DRAG: _never_accepts,
}


class CardStack:
    """
    Ordered pile of cards. Index 0 is the bottom, the last card is the top.

    An optional observer (anything with a ``refresh()`` method) is told after
    each mutating call. It is held through a weak reference, so the stack
    never keeps it alive.
    """

    def __init__(self, kind: StackKind, name: Optional[str] = None):
        self.kind = kind
        self.name = name or kind.value
        self.cards: List[Card] = []
        self._observer_ref: Optional[weakref.ReferenceType] = None

    def set_observer(self, observer) -> None:
        self._observer_ref = weakref.ref(observer) if observer is not None else None

    @property
    def observer(self):
        if self._observer_ref is None:
            return None
        return self._observer_ref()

    def _notify(self) -> None:
        observer = self.observer
        if observer is not None:
            observer.refresh()

    def top_card(self) -> Optional[Card]:
        return self.cards[-1] if self.cards else None

    @property
    def is_empty(self) -> bool:
        return not self.cards

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __repr__(self) -> str:
        return f"CardStack({self.name}, {self.cards!r})"

    def add_card(self, card: Card) -> None:
        self.cards.append(card)
        self._notify()

    def remove_all_cards(self) -> None:
        self.cards.clear()
        self._notify()

    def pop_cards(self, count: int, make_top_face_up: bool) -> None:
        """Remove the top ``count`` cards, optionally turning up the new top card."""
        if count < 0:
            raise ValueError(f"cannot pop a negative number of cards ({count})")
        if count > len(self.cards):
            raise StackUnderflowError(
                f"attempted to pop {count} cards from {self.name} holding {len(self.cards)}"
            )
        if count:
            del self.cards[-count:]
        if make_top_face_up and self.cards:
            self.cards[-1].face_up = True
        self._notify()

    def can_accept(self, card: Card) -> bool:
        return _ACCEPT_RULES[self.kind](self, card)

    def can_accept_sequence(self, cards: Sequence[Card]) -> bool:
        """
        True when the whole run can be placed here; ``cards[0]`` is the card
        that lands on this stack. Every card must be face up, ranks must
        descend by one and colors must alternate.
        """
        if not cards:
            return False
        if len(cards) == 1:
            return self.can_accept(cards[0])
        # only tableau columns take more than one card at a time
        if self.kind is not StackKind.TABLEAU:
            return False
        if not self.can_accept(cards[0]):
            return False
        for current, nxt in zip(cards, cards[1:]):
            if not (current.face_up and nxt.face_up):
                return False
            if nxt.rank != current.rank - 1:
                return False
            if current.is_same_color(nxt):
                return False
        return True
