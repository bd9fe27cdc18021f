import pytest

from klondike import common as C
from klondike.errors import DragInProgressError
from klondike.snapshot import Snapshot
from klondike.table import Table


def _dealt_table() -> Table:
    t = Table()
    t.deal(C.make_deck(shuffle=False))
    return t


def test_capture_records_every_playing_stack() -> None:
    t = _dealt_table()
    snap = Snapshot.capture(t)
    assert len(snap.tableau) == 7
    assert len(snap.foundations) == 4
    assert snap.total_cards == 52
    assert snap.tableau[6][-1] == t.tableau[6].top_card().as_tuple()
    assert len(snap.stock) == 24 and snap.talon == ()


def test_equality_ignores_timestamp() -> None:
    t = _dealt_table()
    a = Snapshot.capture(t)
    b = Snapshot(a.tableau, a.foundations, a.stock, a.talon, timestamp=a.timestamp + 100)
    assert a == b


def test_equality_sees_face_up_flag() -> None:
    t = _dealt_table()
    before = Snapshot.capture(t)
    t.stock.top_card().face_up = True
    assert Snapshot.capture(t) != before


def test_snapshot_is_independent_of_live_cards() -> None:
    t = _dealt_table()
    snap = Snapshot.capture(t)
    t.tableau[0].top_card().face_up = False
    t.tableau[0].cards[0].rank = 13
    t.stock.remove_all_cards()
    assert len(snap.stock) == 24
    assert snap.tableau[0][0][2] is True


def test_snapshot_is_frozen() -> None:
    snap = Snapshot.capture(_dealt_table())
    with pytest.raises(AttributeError):
        snap.stock = ()


def test_restore_reproduces_table_exactly() -> None:
    t = _dealt_table()
    snap = Snapshot.capture(t)
    t.talon.add_card(t.stock.top_card())
    t.stock.pop_cards(1, False)
    t.tableau[3].pop_cards(2, True)
    snap.restore(t)
    assert Snapshot.capture(t) == snap
    t.verify()


def test_restore_clears_drag_and_does_not_alias() -> None:
    t = _dealt_table()
    snap = Snapshot.capture(t)
    t.drag.add_card(C.Card(C.HEARTS, 1, True))
    snap.restore(t)
    assert t.drag.is_empty
    t.tableau[0].top_card().face_up = False
    assert snap.tableau[0][-1][2] is True
    snap.restore(t)
    assert t.tableau[0].top_card().face_up


def test_capture_refuses_occupied_drag() -> None:
    t = _dealt_table()
    t.drag.add_card(t.stock.top_card())
    t.stock.pop_cards(1, False)
    with pytest.raises(DragInProgressError):
        Snapshot.capture(t)


def test_won_position_and_summary() -> None:
    t = Table()
    for suit, f in enumerate(t.foundations):
        for rank in range(1, 14):
            f.add_card(C.Card(suit, rank, True))
    snap = Snapshot.capture(t)
    assert snap.foundation_card_count == 52
    assert snap.is_game_won
    text = str(snap)
    assert "Total cards: 52/52" in text
    assert "Game won: True" in text
