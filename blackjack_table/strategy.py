"""Six-deck, H17, DAS basic strategy.

Charts are written the way they are printed: one row per player total (or
pair card value), one letter per dealer up-card from 2 through Ace.

    H = hit, S = stand, D = double, P = split

Rows are expanded once at import into read-only lookup tables keyed by
(player total or pair value, dealer value), with the dealer Ace as 11.
Anything missing from a table falls back to "stand on 17 or more, else hit".
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from .cards import Card
from .hand import Hand
from .types import Action

DEALER_VALUES = (2, 3, 4, 5, 6, 7, 8, 9, 10, 11)

HARD_CHART = {
    20: "SSSSSSSSSS",
    19: "SSSSSSSSSS",
    18: "SSSSSSSSSS",
    17: "SSSSSSSSSS",
    16: "SSSSSHHHHH",
    15: "SSSSSHHHHH",
    14: "SSSSSHHHHH",
    13: "SSSSSHHHHH",
    12: "HHSSSHHHHH",
    11: "DDDDDDDDDD",
    10: "DDDDDDDDHH",
    9: "HDDDDHHHHH",
    8: "HHHHHHHHHH",
    7: "HHHHHHHHHH",
    6: "HHHHHHHHHH",
    5: "HHHHHHHHHH",
}

SOFT_CHART = {
    20: "SSSSSSSSSS",  # A,9
    19: "SSSSDSSSSS",  # A,8
    18: "DDDDDSSHHH",  # A,7
    17: "HDDDDHHHHH",  # A,6
    16: "HHDDDHHHHH",  # A,5
    15: "HHDDDHHHHH",  # A,4
    14: "HHHDDHHHHH",  # A,3
    13: "HHHDDHHHHH",  # A,2
}

PAIR_CHART = {
    11: "PPPPPPPPPP",
    10: "SSSSSSSSSS",
    9: "PPPPPSPPSS",
    8: "PPPPPPPPPP",
    7: "PPPPPPHHHH",
    6: "PPPPPHHHHH",
    5: "DDDDDDDDHH",
    4: "HHHPPHHHHH",
    3: "PPPPPPHHHH",
    2: "PPPPPPHHHH",
}

ACTION_CODES = {"H": Action.HIT, "S": Action.STAND, "D": Action.DOUBLE, "P": Action.SPLIT}

LookupTable = Mapping[Tuple[int, int], Action]


def _expand(chart: Dict[int, str]) -> LookupTable:
    table: Dict[Tuple[int, int], Action] = {}
    for key, row in chart.items():
        if len(row) != len(DEALER_VALUES):
            raise ValueError(f"chart row {key} has {len(row)} columns")
        for dealer, code in zip(DEALER_VALUES, row):
            table[(key, dealer)] = ACTION_CODES[code]
    return MappingProxyType(table)


HARD_TABLE = _expand(HARD_CHART)
SOFT_TABLE = _expand(SOFT_CHART)
PAIR_TABLE = _expand(PAIR_CHART)


def dealer_value(card: Card) -> int:
    # Ace is 11 for lookups
    return card.value


def _fallback(total: int) -> Action:
    return Action.STAND if total >= 17 else Action.HIT


def hard_action(total: int, dealer: int) -> Action:
    return HARD_TABLE.get((total, dealer), _fallback(total))


def soft_action(total: int, dealer: int) -> Action:
    return SOFT_TABLE.get((total, dealer), _fallback(total))


def pair_action(pair_value: int, dealer: int) -> Action:
    return PAIR_TABLE.get((pair_value, dealer), _fallback(pair_value * 2))


def decide(
    total: int,
    is_soft: bool,
    pair_value: Optional[int],
    dealer: int,
    exclude_split: bool = False,
) -> Action:
    """Chart decision from primitive hand facts.

    With `exclude_split`, a pair is played as the total it makes (A,A as soft
    12), so callers that cannot split never get Split back.
    """
    if pair_value is not None:
        action = pair_action(pair_value, dealer)
        if action is not Action.SPLIT or not exclude_split:
            return action
    if is_soft:
        return soft_action(total, dealer)
    return hard_action(total, dealer)


def recommended_action(hand: Hand, dealer_up_card: Card, exclude_split: bool = False) -> Action:
    return decide(hand.total, hand.is_soft, hand.pair_value, dealer_value(dealer_up_card), exclude_split)


def double_fallback(total: int, is_soft: bool) -> Action:
    """Action to take when the chart says Double but doubling is not allowed."""
    if is_soft and total >= 18:
        return Action.STAND
    return Action.HIT


def chart_rows() -> List[str]:
    header = "      " + " ".join(f"{'A' if d == 11 else d:>2}" for d in DEALER_VALUES)
    lines: List[str] = []
    for title, chart, fmt in (
        ("Hard totals", HARD_CHART, lambda k: f"{k:>4}"),
        ("Soft totals", SOFT_CHART, lambda k: f"A,{k - 11:<2}"),
        ("Pairs", PAIR_CHART, lambda k: f"{'A' if k == 11 else k:>2},{'A' if k == 11 else k:<1}"),
    ):
        lines.append(title)
        lines.append(header)
        for key in sorted(chart, reverse=True):
            lines.append(f"{fmt(key):<6}" + " ".join(f"{code:>2}" for code in chart[key]))
        lines.append("")
    return lines
