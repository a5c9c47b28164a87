from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from .cards import Card, hand_totals
from .constants import BLACKJACK_TOTAL
from .types import HandOrigin, HandStatus


@dataclass(eq=False)
class Hand:
    """Cards, bet and status of one player hand (or the dealer's hand).

    All value properties are derived from `cards` on every access. The split
    history lives in `origin`, so a dealt hand can never be waiting for a
    second card.
    """

    cards: List[Card] = field(default_factory=list)
    bet: Decimal = Decimal("0")
    status: HandStatus = HandStatus.ACTIVE
    origin: HandOrigin = HandOrigin.DEALT
    doubled: bool = False

    @classmethod
    def split_child(cls, card: Card, bet: Decimal) -> "Hand":
        return cls(cards=[card], bet=bet, origin=HandOrigin.SPLIT_PENDING)

    @property
    def total(self) -> int:
        return hand_totals(self.cards)[0]

    @property
    def is_soft(self) -> bool:
        hard = sum(1 if c.is_ace else c.value for c in self.cards)
        return any(c.is_ace for c in self.cards) and hard + 10 <= BLACKJACK_TOTAL

    @property
    def is_from_split(self) -> bool:
        return self.origin is not HandOrigin.DEALT

    @property
    def needs_second_card(self) -> bool:
        return self.origin is HandOrigin.SPLIT_PENDING

    @property
    def is_split_aces(self) -> bool:
        return self.is_from_split and bool(self.cards) and self.cards[0].is_ace

    @property
    def is_blackjack(self) -> bool:
        # split hands pay 1:1 even on Ace + ten
        if self.is_from_split or len(self.cards) != 2:
            return False
        return any(c.is_ace for c in self.cards) and any(c.is_ten_value for c in self.cards)

    @property
    def is_busted(self) -> bool:
        return self.total > BLACKJACK_TOTAL

    @property
    def is_pair(self) -> bool:
        return len(self.cards) == 2 and self.cards[0].value == self.cards[1].value

    @property
    def pair_value(self) -> Optional[int]:
        return self.cards[0].value if self.is_pair else None

    def add_card(self, card: Card) -> None:
        self.cards.append(card)
        if self.origin is HandOrigin.SPLIT_PENDING and len(self.cards) >= 2:
            self.origin = HandOrigin.SPLIT
        if self.is_busted:
            self.status = HandStatus.BUSTED

    def clear(self) -> None:
        self.cards.clear()
        self.bet = Decimal("0")
        self.status = HandStatus.ACTIVE
        self.origin = HandOrigin.DEALT
        self.doubled = False

    def labels(self) -> List[str]:
        return [c.label() for c in self.cards]

    def label(self) -> str:
        kind = "Soft" if self.is_soft else "Hard"
        return f"[{', '.join(self.labels())}] {self.total} ({kind})"
