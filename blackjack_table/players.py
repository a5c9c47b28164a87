from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Optional

from .cards import Card
from .constants import DEALER_STAND_TOTAL, MAX_SEAT, MIN_SEAT
from .errors import IllegalActionError, InvalidConfigurationError
from .hand import Hand
from .settings import to_decimal


class Player:
    """A seat at the table, human or AI."""

    def __init__(self, name: str, seat: int, bankroll: Any, is_human: bool = False):
        if not isinstance(seat, int) or not (MIN_SEAT <= seat <= MAX_SEAT):
            raise InvalidConfigurationError(f"Seat position must be between {MIN_SEAT} and {MAX_SEAT}")
        bankroll = to_decimal(bankroll)
        if bankroll < 0:
            raise InvalidConfigurationError("Bankroll cannot be negative")
        self.name = name
        self._seat = seat
        self.bankroll: Decimal = bankroll
        self.is_human = is_human
        self.is_active = True
        self.hands: List[Hand] = [Hand()]

    @property
    def seat(self) -> int:
        return self._seat

    @property
    def split_count(self) -> int:
        return len(self.hands) - 1

    @property
    def in_round(self) -> bool:
        return self.is_active and self.hands[0].bet > 0

    @property
    def is_bankrupt(self) -> bool:
        return self.bankroll <= 0

    def place_bet(self, amount: Any) -> None:
        amount = to_decimal(amount)
        if amount <= 0:
            raise InvalidConfigurationError("Bet must be positive")
        if self.hands[0].bet > 0:
            raise IllegalActionError(f"{self.name} already has a bet this round")
        if amount > self.bankroll:
            raise IllegalActionError(f"{self.name} cannot cover a bet of {amount}")
        self.bankroll -= amount
        self.hands[0].bet = amount

    def debit(self, amount: Decimal) -> None:
        if amount > self.bankroll:
            raise IllegalActionError(f"{self.name} cannot cover {amount}")
        self.bankroll -= amount

    def add_winnings(self, amount: Decimal) -> None:
        self.bankroll += amount

    def clear_hands(self) -> None:
        self.hands = [Hand()]

    def __repr__(self) -> str:
        return f"Player({self.name!r}, seat={self.seat}, bankroll={self.bankroll})"

    def __str__(self) -> str:
        return f"{self.name} (Seat {self.seat}) - Bankroll: ${self.bankroll:.2f}"


class Dealer:
    def __init__(self, hits_soft_17: bool = True):
        self.hand = Hand()
        self.hits_soft_17 = hits_soft_17
        self.hole_card_revealed = False

    @property
    def up_card(self) -> Optional[Card]:
        return self.hand.cards[0] if self.hand.cards else None

    @property
    def hole_card(self) -> Optional[Card]:
        return self.hand.cards[1] if len(self.hand.cards) > 1 else None

    @property
    def has_blackjack(self) -> bool:
        return self.hand.is_blackjack

    @property
    def shows_ace(self) -> bool:
        return self.up_card is not None and self.up_card.is_ace

    @property
    def shows_ten(self) -> bool:
        return self.up_card is not None and self.up_card.is_ten_value

    def add_card(self, card: Card) -> None:
        self.hand.add_card(card)

    def reveal_hole_card(self) -> None:
        self.hole_card_revealed = True

    def should_hit(self) -> bool:
        total = self.hand.total
        if total > DEALER_STAND_TOTAL:
            return False
        if total == DEALER_STAND_TOTAL:
            # only soft 17 is in question
            return self.hand.is_soft and self.hits_soft_17
        return True

    def visible_cards(self) -> List[str]:
        labels = self.hand.labels()
        if not self.hole_card_revealed and len(labels) >= 2:
            labels[1] = "??"
        return labels

    def clear_hand(self) -> None:
        self.hand.clear()
        self.hole_card_revealed = False

    def __str__(self) -> str:
        if not self.hole_card_revealed and len(self.hand.cards) >= 2:
            return f"Dealer: {self.up_card} + [Hidden]"
        return f"Dealer: {self.hand.label()}"
