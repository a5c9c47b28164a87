from collections import Counter

import pytest

from blackjack_table.cards import RANKS, Card, Shoe, card_value, hand_totals, new_shoe
from blackjack_table.errors import InvalidConfigurationError, ShoeExhaustedError

from conftest import NoShuffle, cards


def test_card_values():
    assert card_value("A") == 11
    assert card_value("K") == 10
    assert card_value("10") == 10
    assert card_value("7") == 7
    assert Card("Q", "S").is_ten_value
    assert Card("A").is_ace


def test_card_labels():
    assert Card("10", "S").label() == "10S"
    assert str(Card("A", "H")) == "Ace of Hearts"


def test_unknown_rank_rejected():
    with pytest.raises(ValueError):
        Card("1")
    with pytest.raises(ValueError):
        Card("A", "X")


@pytest.mark.parametrize(
    "ranks,total,soft",
    [
        (("A", "6"), 17, True),
        (("A", "6", "8"), 15, False),
        (("A", "A"), 12, True),
        (("A", "A", "9"), 21, True),
        (("K", "Q", "5"), 25, False),
        (("A", "A", "A", "K", "K"), 23, False),
    ],
)
def test_hand_totals(ranks, total, soft):
    assert hand_totals(cards(*ranks)) == (total, soft)


def test_new_shoe_composition():
    shoe = new_shoe(6)
    assert shoe.cards_remaining == 312
    assert shoe.cards_dealt == 0
    counts = Counter(c.rank for c in shoe.peek(312))
    assert set(counts) == set(RANKS)
    assert all(n == 24 for n in counts.values())


def test_deal_keeps_card_count():
    shoe = Shoe(2, seed=3)
    for _ in range(30):
        shoe.deal_card()
        assert shoe.cards_remaining + shoe.cards_dealt == 104
    assert shoe.cards_dealt == 30


def test_empty_shoe():
    shoe = Shoe(1, seed=1)
    for _ in range(52):
        assert shoe.deal_card() is not None
    assert shoe.deal_card() is None
    with pytest.raises(ShoeExhaustedError):
        shoe.draw()


def test_unsupported_deck_count():
    with pytest.raises(InvalidConfigurationError):
        Shoe(3)


def test_shuffle_is_idempotent():
    shoe = Shoe(6, seed=11)
    for _ in range(100):
        shoe.draw()
    shoe.shuffle()
    assert (shoe.cards_dealt, shoe.cards_remaining) == (0, 312)
    shoe.shuffle()
    assert (shoe.cards_dealt, shoe.cards_remaining) == (0, 312)


def test_seed_reproduces_order():
    assert Shoe(6, seed=7).peek(20) == Shoe(6, seed=7).peek(20)
    assert Shoe(6, seed=7).peek(20) != Shoe(6, seed=8).peek(20)


def test_penetration_thresholds():
    six = Shoe(6, seed=1)
    assert not six.needs_reshuffle
    for _ in range(233):
        six.draw()
    assert not six.needs_reshuffle
    six.draw()
    assert six.needs_reshuffle

    two = Shoe(2, seed=1)
    for _ in range(52):
        two.draw()
    assert two.needs_reshuffle

    # a single deck reshuffles every round
    assert Shoe(1, seed=1).needs_reshuffle


def test_shuffle_notifies_observers():
    seen = []
    shoe = Shoe(1, seed=2)
    shoe.subscribe(lambda s: seen.append(s.cards_remaining))
    shoe.shuffle()
    assert seen == [52]


def test_stack_top_puts_ranks_first():
    shoe = Shoe(6, rng=NoShuffle())
    picked = shoe.stack_top(["9", "K", "9"])
    assert [c.rank for c in picked] == ["9", "K", "9"]
    assert [shoe.draw().rank for _ in range(3)] == ["9", "K", "9"]
    assert shoe.cards_remaining + shoe.cards_dealt == 312


def test_stack_top_missing_rank_leaves_shoe_intact():
    shoe = Shoe(1, rng=NoShuffle())
    before = shoe.peek(52)
    with pytest.raises(RuntimeError):
        shoe.stack_top(["A"] * 5)
    assert sorted(c.label() for c in shoe.peek(52)) == sorted(c.label() for c in before)
