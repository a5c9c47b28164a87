from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from .constants import (
    CARDS_PER_DECK,
    DEFAULT_NUM_DECKS,
    DEFAULT_PENETRATION,
    PENETRATION_BY_DECKS,
    SUPPORTED_DECK_COUNTS,
)
from .errors import InvalidConfigurationError, ShoeExhaustedError


RANKS = ["A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K"]
SUITS = ["H", "D", "C", "S"]
TEN_VALUE_RANKS = ("10", "J", "Q", "K")

SUIT_NAMES = {"H": "Hearts", "D": "Diamonds", "C": "Clubs", "S": "Spades"}
RANK_NAMES = {
    "A": "Ace", "2": "Two", "3": "Three", "4": "Four", "5": "Five", "6": "Six", "7": "Seven",
    "8": "Eight", "9": "Nine", "10": "Ten", "J": "Jack", "Q": "Queen", "K": "King",
}


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str = "H"

    def __post_init__(self):
        if self.rank not in RANKS:
            raise ValueError(f"Unknown rank: {self.rank!r}")
        if self.suit not in SUITS:
            raise ValueError(f"Unknown suit: {self.suit!r}")

    @property
    def value(self) -> int:
        return card_value(self.rank)

    @property
    def is_ace(self) -> bool:
        return self.rank == "A"

    @property
    def is_ten_value(self) -> bool:
        return self.rank in TEN_VALUE_RANKS

    def label(self) -> str:
        return f"{self.rank}{self.suit}"

    def __str__(self) -> str:
        return f"{RANK_NAMES[self.rank]} of {SUIT_NAMES[self.suit]}"


def card_value(rank: str) -> int:
    if rank == "A":
        return 11
    if rank in TEN_VALUE_RANKS:
        return 10
    return int(rank)


def hand_totals(cards: Iterable[Card]) -> Tuple[int, bool]:
    total = 0
    aces = 0
    for c in cards:
        if c.rank == "A":
            aces += 1
        total += card_value(c.rank)
    # downgrade aces from 11 to 1 as needed
    while total > 21 and aces > 0:
        total -= 10
        aces -= 1
    # soft if at least one ace remains valued as 11
    is_soft = aces > 0
    return total, is_soft


def penetration_for(num_decks: int) -> float:
    return PENETRATION_BY_DECKS.get(num_decks, DEFAULT_PENETRATION)


class Shoe:
    """Multi-deck shoe dealt from the front.

    `cards_remaining + cards_dealt` always equals `num_decks * 52`; a shuffle
    gathers every card back before permuting. Pass `rng` (anything with a
    `shuffle(list)` method, usually `random.Random`) or `seed` to make the
    order reproducible.
    """

    def __init__(self, num_decks: int = DEFAULT_NUM_DECKS, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random(seed)
        self._observers: List[Callable[["Shoe"], None]] = []
        self._cards: List[Card] = []
        self._dealt = 0
        self.initialize(num_decks)
        self.shuffle()

    def initialize(self, num_decks: Optional[int] = None) -> None:
        if num_decks is not None:
            if num_decks not in SUPPORTED_DECK_COUNTS:
                raise InvalidConfigurationError(
                    f"Unsupported deck count {num_decks}; expected one of {SUPPORTED_DECK_COUNTS}"
                )
            self.num_decks = num_decks
            self.penetration = penetration_for(num_decks)
        self._cards = [Card(rank, suit) for _ in range(self.num_decks) for suit in SUITS for rank in RANKS]
        self._dealt = 0

    def subscribe(self, fn: Callable[["Shoe"], None]) -> None:
        self._observers.append(fn)

    def shuffle(self) -> None:
        self.initialize()
        self.rng.shuffle(self._cards)
        for fn in self._observers:
            fn(self)

    def deal_card(self) -> Optional[Card]:
        if not self._cards:
            return None
        self._dealt += 1
        return self._cards.pop(0)

    def draw(self) -> Card:
        card = self.deal_card()
        if card is None:
            raise ShoeExhaustedError(f"Shoe exhausted after {self._dealt} cards")
        return card

    def stack_top(self, ranks: Iterable[str]) -> List[Card]:
        # Prefer exact rank; if wanting '10' but none left, allow any 10-value rank
        picked: List[Card] = []
        for want_rank in ranks:
            idx = None
            for i, c in enumerate(self._cards):
                if c.rank == want_rank:
                    idx = i
                    break
            if idx is None and want_rank == "10":
                for i, c in enumerate(self._cards):
                    if c.is_ten_value:
                        idx = i
                        break
            if idx is None:
                # put back what was already taken so composition is unchanged
                self._cards[0:0] = picked
                raise RuntimeError(f"Card of rank {want_rank} not available in shoe")
            picked.append(self._cards.pop(idx))
        self._cards[0:0] = picked
        return picked

    @property
    def total_cards(self) -> int:
        return self.num_decks * CARDS_PER_DECK

    @property
    def cards_remaining(self) -> int:
        return len(self._cards)

    @property
    def cards_dealt(self) -> int:
        return self._dealt

    @property
    def needs_reshuffle(self) -> bool:
        return self._dealt >= int(self.total_cards * self.penetration)

    def peek(self, count: int = 1) -> List[Card]:
        return list(self._cards[:count])


def new_shoe(num_decks: int = DEFAULT_NUM_DECKS) -> Shoe:
    return Shoe(num_decks)
