"""Action legality, execution and payouts.

Every command checks its `can_*` predicate first and raises
`IllegalActionError` without touching the hand, the player or the shoe when
it fails.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Optional, Tuple

from .cards import Card, Shoe
from .errors import IllegalActionError, ShoeExhaustedError
from .hand import Hand
from .players import Dealer, Player
from .settings import GameSettings, to_decimal
from .types import HandStatus


class GameRules:
    def __init__(self, settings: Optional[GameSettings] = None):
        self.settings = settings or GameSettings()

    # Action validation

    def can_hit(self, hand: Hand) -> bool:
        return hand.status is HandStatus.ACTIVE and not hand.is_busted

    def can_stand(self, hand: Hand) -> bool:
        return hand.status is HandStatus.ACTIVE and not hand.is_busted

    def can_double_down(self, hand: Hand, player: Player) -> bool:
        if hand.is_split_aces:
            return False
        if len(hand.cards) != 2:
            return False
        if hand.is_from_split and not self.settings.double_after_split:
            return False
        if player.bankroll < hand.bet:
            return False
        return hand.status is HandStatus.ACTIVE and not hand.is_busted

    def can_split(self, hand: Hand, player: Player) -> bool:
        if not hand.is_pair or hand.status is not HandStatus.ACTIVE:
            return False
        if player.split_count >= self.settings.max_splits:
            return False
        return player.bankroll >= hand.bet

    def can_offer_insurance(self, dealer: Dealer, player: Player, hand: Hand) -> bool:
        if not dealer.shows_ace:
            return False
        if player.bankroll < self.insurance_cost(hand):
            return False
        # only before any player action
        return len(hand.cards) == 2

    def can_offer_even_money(self, hand: Hand, dealer: Dealer) -> bool:
        return hand.is_blackjack and dealer.shows_ace

    # Commands

    def hit(self, hand: Hand, shoe: Shoe) -> Card:
        if not self.can_hit(hand):
            raise IllegalActionError(f"Cannot hit a hand that is {hand.status.name}")
        card = shoe.draw()
        hand.add_card(card)
        return card

    def stand(self, hand: Hand) -> None:
        if not self.can_stand(hand):
            raise IllegalActionError(f"Cannot stand on a hand that is {hand.status.name}")
        hand.status = HandStatus.STANDING

    def double_down(self, hand: Hand, player: Player, shoe: Shoe) -> Card:
        if not self.can_double_down(hand, player):
            raise IllegalActionError("Cannot double down on this hand")
        _require_cards(shoe, 1)
        player.debit(hand.bet)
        hand.bet *= 2
        hand.doubled = True
        card = shoe.draw()
        hand.add_card(card)
        if not hand.is_busted:
            hand.status = HandStatus.STANDING
        return card

    def execute_split(self, hand: Hand, player: Player, shoe: Shoe) -> Tuple[Hand, Hand]:
        """Split a pair into two hands, each carrying the original bet.

        The first hand gets its second card now. The second waits for its card
        until play reaches it, except with Aces: both get exactly one card and
        both stand.
        """
        if not self.can_split(hand, player):
            raise IllegalActionError("Cannot split this hand")
        index = next(i for i, h in enumerate(player.hands) if h is hand)
        first_card, second_card = hand.cards
        splitting_aces = first_card.is_ace
        _require_cards(shoe, 2 if splitting_aces else 1)

        player.debit(hand.bet)
        first = Hand.split_child(first_card, hand.bet)
        second = Hand.split_child(second_card, hand.bet)
        player.hands[index:index + 1] = [first, second]

        first.add_card(shoe.draw())
        if splitting_aces:
            second.add_card(shoe.draw())
            first.status = HandStatus.STANDING
            second.status = HandStatus.STANDING
        return first, second

    def take_insurance(self, player: Player, hand: Hand, dealer: Dealer) -> Decimal:
        if not self.can_offer_insurance(dealer, player, hand):
            raise IllegalActionError("Insurance is not available")
        cost = self.insurance_cost(hand)
        player.debit(cost)
        return cost

    def accept_even_money(self, hand: Hand) -> Decimal:
        if not hand.is_blackjack:
            raise IllegalActionError("Even money can only be taken on blackjack")
        hand.status = HandStatus.WON
        return self.calculate_even_money_payout(hand.bet)

    def play_dealer(self, dealer: Dealer, shoe: Shoe) -> List[Card]:
        drawn: List[Card] = []
        while dealer.should_hit():
            card = shoe.draw()
            dealer.add_card(card)
            drawn.append(card)
        return drawn

    # Payout calculations (all include the returned stake)

    def insurance_cost(self, hand: Hand) -> Decimal:
        return hand.bet / 2

    def calculate_blackjack_payout(self, bet: Any) -> Decimal:
        bet = to_decimal(bet)
        return bet + bet * self.settings.blackjack_payout

    def calculate_win_payout(self, bet: Any) -> Decimal:
        return to_decimal(bet) * 2

    def calculate_insurance_payout(self, insurance_bet: Any) -> Decimal:
        insurance_bet = to_decimal(insurance_bet)
        return insurance_bet + insurance_bet * self.settings.insurance_payout

    def calculate_push_payout(self, bet: Any) -> Decimal:
        return to_decimal(bet)

    def calculate_even_money_payout(self, bet: Any) -> Decimal:
        return to_decimal(bet) * 2

    def settle_hand(
        self,
        hand: Hand,
        dealer: Dealer,
        insurance_taken: bool = False,
        insurance_bet: Any = 0,
    ) -> Decimal:
        """Compare a finished hand to the dealer, set its final status and
        return the amount to credit to the player."""
        payout = Decimal("0")
        if insurance_taken and dealer.has_blackjack:
            payout += self.calculate_insurance_payout(insurance_bet)

        if hand.is_busted:
            hand.status = HandStatus.LOST
            return payout

        if dealer.hand.is_busted:
            payout += self._pay_win(hand)
            return payout

        if hand.is_blackjack and not dealer.has_blackjack:
            payout += self._pay_win(hand)
        elif dealer.has_blackjack and not hand.is_blackjack:
            hand.status = HandStatus.LOST
        elif hand.total > dealer.hand.total:
            payout += self._pay_win(hand)
        elif hand.total < dealer.hand.total:
            hand.status = HandStatus.LOST
        else:
            payout += self.calculate_push_payout(hand.bet)
            hand.status = HandStatus.PUSH
        return payout

    def _pay_win(self, hand: Hand) -> Decimal:
        if hand.is_blackjack:
            hand.status = HandStatus.BLACKJACK
            return self.calculate_blackjack_payout(hand.bet)
        hand.status = HandStatus.WON
        return self.calculate_win_payout(hand.bet)

    # Bet limits

    def is_valid_bet(self, amount: Any) -> bool:
        return self.settings.is_valid_bet(amount)

    @property
    def minimum_bet(self) -> Decimal:
        return self.settings.table_minimum

    @property
    def maximum_bet(self) -> Decimal:
        return self.settings.table_maximum


def _require_cards(shoe: Shoe, count: int) -> None:
    if shoe.cards_remaining < count:
        raise ShoeExhaustedError(f"Shoe has {shoe.cards_remaining} cards, {count} needed")
