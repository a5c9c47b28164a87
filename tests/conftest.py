import random
from decimal import Decimal

import pytest

from blackjack_table.cards import Card, Shoe
from blackjack_table.hand import Hand
from blackjack_table.players import Dealer, Player
from blackjack_table.rules import GameRules
from blackjack_table.settings import GameSettings


class NoShuffle(random.Random):
    """Leaves the shoe in factory order so stack_top decides the deal."""

    def shuffle(self, x, *args, **kwargs):
        return None


def cards(*ranks):
    return [Card(r) for r in ranks]


def hand(*ranks, bet="10"):
    return Hand(cards=cards(*ranks), bet=Decimal(bet))


def dealer_with(*ranks, hits_soft_17=True):
    d = Dealer(hits_soft_17=hits_soft_17)
    for c in cards(*ranks):
        d.add_card(c)
    return d


def stacked_shoe(ranks, num_decks=6):
    shoe = Shoe(num_decks, rng=NoShuffle())
    shoe.stack_top(ranks)
    return shoe


@pytest.fixture
def settings():
    return GameSettings()


@pytest.fixture
def rules(settings):
    return GameRules(settings)


@pytest.fixture
def player():
    return Player("Alice", 1, Decimal("100"))
