from __future__ import annotations

from typing import Any

from ..agent_utils import parse_dealer_upcard
from ..strategy import decide, double_fallback
from ..types import Action, Observation


class BasicStrategyAgent:
    """Six-deck, H17, DAS basic strategy.

    Looks the hand up in the strategy charts. When the chart says Split but
    splitting is not allowed, the pair is played as its total; when it says
    Double but doubling is not allowed, soft 18 or more stands and anything
    else hits.
    """

    def act(self, observation: Observation, info: Any) -> Action:
        actions = observation.allowed_actions
        hand = observation.player
        action = decide(
            hand.total,
            hand.is_soft,
            hand.pair_value,
            parse_dealer_upcard(observation),
            exclude_split=Action.SPLIT not in actions,
        )
        if action is Action.DOUBLE and Action.DOUBLE not in actions:
            action = double_fallback(hand.total, hand.is_soft)
        if isinstance(info, dict):
            info["chart_action"] = action.name
        return action
