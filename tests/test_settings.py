from decimal import Decimal

import pytest

from blackjack_table.errors import IllegalActionError, InvalidConfigurationError
from blackjack_table.players import Player
from blackjack_table.settings import GameSettings, new_game_settings


def test_defaults():
    s = GameSettings()
    assert s.table_minimum == Decimal("5")
    assert s.table_maximum == Decimal("500")
    assert s.num_decks == 6
    assert s.dealer_hits_soft_17
    assert s.blackjack_payout == Decimal("1.5")
    assert s.max_splits == 3
    assert str(s).startswith("Table: $5-$500")


def test_amounts_become_decimals():
    s = new_game_settings("2.5", 100, 1000.50, num_decks=8)
    assert s.table_minimum == Decimal("2.5")
    assert s.starting_bankroll == Decimal("1000.5")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"table_minimum": 0},
        {"table_minimum": 50, "table_maximum": 50},
        {"starting_bankroll": -1},
        {"num_decks": 3},
        {"blackjack_payout": 0},
        {"max_splits": -1},
        {"table_minimum": "abc"},
    ],
)
def test_invalid_settings(kwargs):
    with pytest.raises(InvalidConfigurationError):
        GameSettings(**kwargs)


def test_dict_round_trip():
    s = GameSettings(num_decks=2, double_after_split=False)
    d = s.to_dict()
    assert d["table_minimum"] == "5"
    assert GameSettings.from_dict(dict(d, unknown=1)) == s


@pytest.mark.parametrize("seat", [0, 8, "1"])
def test_seat_range(seat):
    with pytest.raises(InvalidConfigurationError):
        Player("X", seat, 100)


def test_negative_bankroll_rejected():
    with pytest.raises(InvalidConfigurationError):
        Player("X", 1, -5)


def test_player_bets_and_debits():
    p = Player("X", 3, "50")
    p.place_bet(20)
    assert p.bankroll == Decimal("30")
    assert p.in_round
    with pytest.raises(IllegalActionError):
        p.debit(Decimal("31"))
    p.add_winnings(Decimal("40"))
    assert p.bankroll == Decimal("70")
    p.clear_hands()
    assert not p.in_round


def test_bet_must_be_covered():
    p = Player("X", 3, "10")
    with pytest.raises(IllegalActionError):
        p.place_bet(11)
    with pytest.raises(InvalidConfigurationError):
        p.place_bet(-1)
    assert p.bankroll == Decimal("10")


@pytest.mark.parametrize("amount", ["NaN", "Infinity", "-inf", Decimal("NaN")])
def test_non_finite_amounts_rejected(amount):
    with pytest.raises(InvalidConfigurationError):
        GameSettings(table_minimum=amount)
    with pytest.raises(InvalidConfigurationError):
        Player("X", 1, amount)


def test_text_values_are_parsed():
    s = GameSettings(num_decks="8", max_splits=" 2 ", dealer_hits_soft_17="false", double_after_split="True")
    assert s.num_decks == 8
    assert s.max_splits == 2
    assert s.dealer_hits_soft_17 is False
    assert s.double_after_split is True
    assert s == GameSettings(num_decks=8, max_splits=2, dealer_hits_soft_17=False)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"num_decks": True},
        {"num_decks": 6.0},
        {"max_splits": "two"},
        {"dealer_hits_soft_17": "sometimes"},
        {"double_after_split": 1},
    ],
)
def test_badly_typed_settings(kwargs):
    with pytest.raises(InvalidConfigurationError):
        GameSettings(**kwargs)
