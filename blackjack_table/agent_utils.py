"""Shared utilities for agent implementations."""

from __future__ import annotations

from .cards import card_value
from .types import Observation


def rank_of(label: str) -> str:
    """Rank part of a card label such as 'AH' or '10S'."""
    return label[:-1]


def normalize_rank(rank: str) -> str:
    """Accept 'T' for ten and lower-case face letters."""
    rank = rank.strip().upper()
    if rank == "T":
        return "10"
    return rank


def parse_dealer_upcard(observation: Observation) -> int:
    """Dealer up-card value from an observation, Ace as 11, faces as 10."""
    return card_value(rank_of(observation.dealer_upcard))
