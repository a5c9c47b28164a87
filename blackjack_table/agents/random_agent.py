from __future__ import annotations

import random
from typing import Any, Optional

from ..errors import IllegalActionError
from ..types import Action, Observation


class RandomAgent:
    """Uniform choice among the legal actions."""

    def __init__(self, seed: Optional[int] = 0, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random(seed)

    def act(self, observation: Observation, info: Any) -> Action:
        # stable order so a seed always reproduces the same choices
        actions = sorted(observation.allowed_actions, key=lambda a: a.value)
        if not actions:
            raise IllegalActionError("No legal action for this hand")
        return self.rng.choice(actions)
