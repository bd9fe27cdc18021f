import random
from typing import Dict, List, Sequence, Tuple

import pytest

from klondike import common as C
from klondike.game import KlondikeGame
from klondike.stacks import CardStack


def card(suit: int, rank: int, up: bool = True) -> C.Card:
    return C.Card(suit, rank, up)


def seeded_deck_factory(seed: int):
    return lambda: C.make_deck(shuffle=True, rng=random.Random(seed))


@pytest.fixture
def game() -> KlondikeGame:
    g = KlondikeGame(deck_factory=seeded_deck_factory(20240611))
    g.initialize_deal()
    return g


@pytest.fixture
def rig():
    """
    Build a game whose stacks hold exactly the given cards; every card not
    placed goes face down into the stock so the table still holds one deck.
    """

    def _rig(layout: Dict[str, Sequence[Tuple[int, int, bool]]], draw_count: int = 1) -> KlondikeGame:
        g = KlondikeGame(draw_count=draw_count)
        t = g.table
        by_name: Dict[str, CardStack] = {s.name: s for s in t.all_stacks()}
        used = set()
        for name, values in layout.items():
            for suit, rank, up in values:
                by_name[name].add_card(C.Card(suit, rank, up))
                used.add((suit, rank))
        if "stock" not in layout:
            rest: List[C.Card] = [c for c in C.make_deck(shuffle=False) if c.key not in used]
            for c in rest:
                t.stock.add_card(c)
        return g

    return _rig
