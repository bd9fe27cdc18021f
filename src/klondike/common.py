# common.py - cards, deck supply and settings shared by the Klondike core
import os
import json
import logging
import random
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

# ---------- Settings ----------
_DEFAULT_SETTINGS = {
    "max_undo_depth": 50,   # snapshots kept on the undo log
    "draw_count": 1,        # 1 | 3 cards per stock draw
}

_CURRENT_SETTINGS = dict(_DEFAULT_SETTINGS)

def _settings_dir() -> str:
    # Explicit override first, then %APPDATA% on Windows, else ~/.klondike_core
    override = os.environ.get("KLONDIKE_SETTINGS_DIR")
    if override:
        return override
    base = os.environ.get("APPDATA")
    if base:
        return os.path.join(base, "KlondikeCore")
    return os.path.join(os.path.expanduser("~"), ".klondike_core")

def _settings_path() -> str:
    return os.path.join(_settings_dir(), "settings.json")

def _sanitize(data: dict) -> dict:
    clean = dict(_DEFAULT_SETTINGS)
    try:
        depth = int(data.get("max_undo_depth", clean["max_undo_depth"]))
        if depth >= 1:
            clean["max_undo_depth"] = depth
    except (TypeError, ValueError):
        pass
    try:
        draw = int(data.get("draw_count", clean["draw_count"]))
        if draw in (1, 3):
            clean["draw_count"] = draw
    except (TypeError, ValueError):
        pass
    return clean

def get_current_settings():
    return dict(_CURRENT_SETTINGS)

def load_settings():
    """Read settings.json into the current settings; defaults on any problem."""
    global _CURRENT_SETTINGS
    path = _settings_path()
    if not os.path.isfile(path):
        _CURRENT_SETTINGS = dict(_DEFAULT_SETTINGS)
        return get_current_settings()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Failed to read settings from %s: %s", path, exc)
        data = None
    if isinstance(data, dict):
        _CURRENT_SETTINGS = _sanitize(data)
    else:
        _CURRENT_SETTINGS = dict(_DEFAULT_SETTINGS)
    return get_current_settings()

def save_settings(new_values: dict):
    # Merge and write to disk
    global _CURRENT_SETTINGS
    merged = dict(_CURRENT_SETTINGS)
    merged.update({k: new_values[k] for k in _DEFAULT_SETTINGS if k in new_values})
    _CURRENT_SETTINGS = _sanitize(merged)
    os.makedirs(_settings_dir(), exist_ok=True)
    with open(_settings_path(), "w", encoding="utf-8") as f:
        json.dump(_CURRENT_SETTINGS, f, indent=2)
    return get_current_settings()


# ---------- Cards ----------
SPADES, HEARTS, DIAMONDS, CLUBS = 0, 1, 2, 3
SUITS = ["♠", "♥", "♦", "♣"]  # 0..3
ACE, JACK, QUEEN, KING = 1, 11, 12, 13
RANK_TO_TEXT = {1:"A", 11:"J", 12:"Q", 13:"K"}
for _r in range(2,11):
    RANK_TO_TEXT[_r] = str(_r)

DECK_SIZE = 52

def is_red(suit):
    return suit in (HEARTS, DIAMONDS)

class Card:
    __slots__ = ("suit", "rank", "face_up")
    def __init__(self, suit, rank, face_up=False):
        self.suit = suit   # 0..3
        self.rank = rank   # 1..13
        self.face_up = face_up
    def color(self):
        return "red" if is_red(self.suit) else "black"
    def is_same_color(self, other: "Card") -> bool:
        return is_red(self.suit) == is_red(other.suit)
    @property
    def key(self) -> Tuple[int, int]:
        """Identity of the card, ignoring which way up it lies."""
        return (self.suit, self.rank)
    def as_tuple(self) -> Tuple[int, int, bool]:
        return (self.suit, self.rank, bool(self.face_up))
    @classmethod
    def from_tuple(cls, value: Tuple[int, int, bool]) -> "Card":
        suit, rank, face_up = value
        return cls(suit, rank, face_up)
    def copy(self) -> "Card":
        return Card(self.suit, self.rank, self.face_up)
    def __eq__(self, other):
        if not isinstance(other, Card):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()
    # face_up is mutable, so cards are not hashable; use .key instead
    __hash__ = None
    def __repr__(self):
        return f"{RANK_TO_TEXT[self.rank]}{SUITS[self.suit]}{'↑' if self.face_up else '↓'}"

def make_deck(shuffle=True, rng: Optional[random.Random] = None) -> List[Card]:
    d = [Card(suit, rank, False) for suit in range(4) for rank in range(1,14)]
    if shuffle:
        (rng or random).shuffle(d)
    return d
