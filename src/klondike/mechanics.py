from typing import List, Optional, Sequence, Tuple

from klondike.stacks import CardStack


def move_top_card(
    src: CardStack,
    dst: CardStack,
    face_up: bool,
    make_new_top_card_face_up: bool,
) -> None:
    """
    Move the top card of ``src`` onto ``dst`` with its face set to ``face_up``.
    Does nothing when ``src`` is empty. Legality is the caller's business.
    """
    card = src.top_card()
    if card is None:
        return
    card.face_up = face_up
    dst.add_card(card)
    src.pop_cards(1, make_new_top_card_face_up)


def copy_cards(src: CardStack, dst: CardStack) -> None:
    """
    Move every card of ``src`` onto ``dst`` face down, one top card at a time.
    The relative order ends up reversed, which is what turning the talon
    back over into the stock needs.
    """
    for _ in range(len(src)):
        move_top_card(src, dst, face_up=False, make_new_top_card_face_up=False)


def transfer_run(
    src: CardStack,
    dst: CardStack,
    count: int,
    relay: CardStack,
    make_new_top_card_face_up: bool = True,
) -> None:
    """
    Move the top ``count`` cards of ``src`` onto ``dst`` keeping their order,
    by passing them through ``relay`` (normally the drag stack), which ends
    up empty again.
    """
    for i in range(count):
        last = i == count - 1
        move_top_card(src, relay, face_up=True,
                      make_new_top_card_face_up=make_new_top_card_face_up and last)
    for _ in range(count):
        move_top_card(relay, dst, face_up=True, make_new_top_card_face_up=False)


def run_start(stack: CardStack) -> Optional[int]:
    """
    Index of the bottom card of the face-up, descending, alternating run that
    ends at the top of ``stack``. None when the stack is empty or its top card
    is face down.
    """
    cards = stack.cards
    if not cards or not cards[-1].face_up:
        return None
    idx = len(cards) - 1
    while idx > 0:
        below, upper = cards[idx - 1], cards[idx]
        if not below.face_up or below.is_same_color(upper) or below.rank != upper.rank + 1:
            break
        idx -= 1
    return idx


def find_foundation_for(card, foundations: Sequence[CardStack]) -> Optional[CardStack]:
    for f in foundations:
        if f.can_accept(card):
            return f
    return None


def next_foundation_move(
    sources: Sequence[CardStack],
    foundations: Sequence[CardStack],
) -> Optional[Tuple[CardStack, CardStack]]:
    """First (source, foundation) pair whose exposed top card can go home."""
    for src in sources:
        top = src.top_card()
        if top is None or not top.face_up:
            continue
        dst = find_foundation_for(top, foundations)
        if dst is not None:
            return src, dst
    return None


def all_face_up(stacks: Sequence[CardStack]) -> bool:
    return all(c.face_up for s in stacks for c in s.cards)


def describe(stacks: Sequence[CardStack]) -> List[str]:
    return [f"{s.name}: {' '.join(repr(c) for c in s.cards) or '-'}" for s in stacks]
