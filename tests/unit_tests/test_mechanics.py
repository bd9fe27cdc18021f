from klondike import mechanics as M
from klondike.common import CLUBS, DIAMONDS, HEARTS, SPADES
from klondike.stacks import CardStack, StackKind

from conftest import card


def _stack(kind, *cards):
    s = CardStack(kind)
    s.cards.extend(cards)
    return s


def test_move_top_card_transfers_and_exposes() -> None:
    src = _stack(StackKind.TABLEAU, card(CLUBS, 9, up=False), card(HEARTS, 8))
    dst = _stack(StackKind.TABLEAU, card(SPADES, 9))
    M.move_top_card(src, dst, face_up=True, make_new_top_card_face_up=True)
    assert [c.key for c in dst] == [(SPADES, 9), (HEARTS, 8)]
    assert len(src) == 1 and src.top_card().face_up


def test_move_top_card_sets_requested_face() -> None:
    src = _stack(StackKind.STOCK, card(CLUBS, 9, up=False))
    dst = CardStack(StackKind.TALON)
    M.move_top_card(src, dst, face_up=True, make_new_top_card_face_up=False)
    assert dst.top_card().face_up
    M.move_top_card(dst, src, face_up=False, make_new_top_card_face_up=False)
    assert not src.top_card().face_up


def test_move_top_card_from_empty_is_noop() -> None:
    src = CardStack(StackKind.TALON)
    dst = _stack(StackKind.TABLEAU, card(SPADES, 9))
    M.move_top_card(src, dst, True, True)
    assert src.is_empty
    assert len(dst) == 1


def test_copy_cards_reverses_and_turns_down() -> None:
    src = _stack(StackKind.TALON, card(CLUBS, 1), card(HEARTS, 2), card(SPADES, 3))
    dst = CardStack(StackKind.STOCK)
    M.copy_cards(src, dst)
    assert src.is_empty
    assert [c.rank for c in dst] == [3, 2, 1]
    assert not any(c.face_up for c in dst)


def test_transfer_run_keeps_order_and_empties_relay() -> None:
    src = _stack(
        StackKind.TABLEAU,
        card(DIAMONDS, 12, up=False),
        card(SPADES, 8),
        card(DIAMONDS, 7),
        card(CLUBS, 6),
    )
    dst = _stack(StackKind.TABLEAU, card(HEARTS, 9))
    relay = CardStack(StackKind.DRAG)
    M.transfer_run(src, dst, 3, relay)
    assert [c.rank for c in dst] == [9, 8, 7, 6]
    assert relay.is_empty
    assert src.top_card().face_up


def test_run_start_finds_bottom_of_run() -> None:
    s = _stack(
        StackKind.TABLEAU,
        card(HEARTS, 10, up=False),
        card(CLUBS, 9),
        card(DIAMONDS, 8),
        card(SPADES, 7),
    )
    assert M.run_start(s) == 1
    s.cards[1].face_up = False
    assert M.run_start(s) == 2
    assert M.run_start(CardStack(StackKind.TABLEAU)) is None
    assert M.run_start(_stack(StackKind.TABLEAU, card(CLUBS, 2, up=False))) is None


def test_run_start_stops_at_same_color() -> None:
    s = _stack(StackKind.TABLEAU, card(SPADES, 8), card(CLUBS, 7))
    assert M.run_start(s) == 1


def test_next_foundation_move_prefers_first_source() -> None:
    foundations = [CardStack(StackKind.FOUNDATION) for _ in range(4)]
    a = _stack(StackKind.TABLEAU, card(HEARTS, 5))
    b = _stack(StackKind.TABLEAU, card(CLUBS, 1))
    src, dst = M.next_foundation_move([a, b], foundations)
    assert src is b
    assert dst is foundations[0]
    assert M.next_foundation_move([a], foundations) is None
