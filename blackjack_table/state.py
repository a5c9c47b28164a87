"""Pure round-flow helpers: phase transitions and turn order."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .players import Player
from .types import GamePhase, HandStatus


@dataclass(frozen=True)
class Cursor:
    player_index: int
    hand_index: int


def next_phase(phase: GamePhase, *, dealer_peeks: bool = False, dealer_needed: bool = True, needs_reshuffle: bool = False) -> GamePhase:
    if phase is GamePhase.BETTING:
        return GamePhase.DEALING
    if phase is GamePhase.DEALING:
        return GamePhase.INSURANCE_OFFER if dealer_peeks else GamePhase.PLAYER_ACTIONS
    if phase is GamePhase.INSURANCE_OFFER:
        return GamePhase.PLAYER_ACTIONS
    if phase is GamePhase.PLAYER_ACTIONS:
        return GamePhase.DEALER_ACTION if dealer_needed else GamePhase.SETTLEMENT
    if phase is GamePhase.DEALER_ACTION:
        return GamePhase.SETTLEMENT
    if phase is GamePhase.SETTLEMENT:
        return GamePhase.SHUFFLING if needs_reshuffle else GamePhase.BETTING
    return GamePhase.BETTING


def next_turn(players: Sequence[Player], after: Optional[Cursor] = None) -> Optional[Cursor]:
    """First ACTIVE hand strictly after `after`.

    `players` must already be in seat order; players not in the round are
    skipped. Returns None when every hand has been played.
    """
    for pi, player in enumerate(players):
        if not player.in_round:
            continue
        if after is not None and pi < after.player_index:
            continue
        for hi, hand in enumerate(player.hands):
            if after is not None and pi == after.player_index and hi <= after.hand_index:
                continue
            if hand.status is HandStatus.ACTIVE:
                return Cursor(pi, hi)
    return None
