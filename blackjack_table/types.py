from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto
from typing import List, Optional


class Action(Enum):
    HIT = auto()
    STAND = auto()
    DOUBLE = auto()
    SPLIT = auto()


class HandStatus(Enum):
    ACTIVE = auto()
    STANDING = auto()
    BUSTED = auto()
    BLACKJACK = auto()
    WON = auto()
    LOST = auto()
    PUSH = auto()


class HandOrigin(Enum):
    DEALT = auto()
    SPLIT_PENDING = auto()  # split child holding one card, second still owed
    SPLIT = auto()


class GamePhase(Enum):
    BETTING = auto()
    DEALING = auto()
    INSURANCE_OFFER = auto()
    PLAYER_ACTIONS = auto()
    DEALER_ACTION = auto()
    SETTLEMENT = auto()
    SHUFFLING = auto()


# Statuses a hand can no longer leave within the round
SETTLED_STATUSES = frozenset({HandStatus.BLACKJACK, HandStatus.WON, HandStatus.LOST, HandStatus.PUSH})


@dataclass
class HandView:
    cards: List[str]
    total: int
    is_soft: bool
    is_pair: bool
    pair_value: Optional[int]
    can_split: bool
    can_double: bool


@dataclass
class Observation:
    player: HandView
    dealer_upcard: str
    seat: int
    hand_index: int
    num_hands: int
    allowed_actions: List[Action]
    bankroll: Decimal

    def to_dict(self) -> dict:
        return {
            "player": {
                "cards": self.player.cards,
                "total": self.player.total,
                "is_soft": self.player.is_soft,
                "is_pair": self.player.is_pair,
                "pair_value": self.player.pair_value,
                "can_split": self.player.can_split,
                "can_double": self.player.can_double,
            },
            "dealer_upcard": self.dealer_upcard,
            "seat": self.seat,
            "hand_index": self.hand_index,
            "num_hands": self.num_hands,
            "allowed_actions": [a.name for a in self.allowed_actions],
            "bankroll": str(self.bankroll),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Observation":
        p = data["player"]
        return cls(
            player=HandView(
                cards=list(p["cards"]),
                total=p["total"],
                is_soft=p["is_soft"],
                is_pair=p["is_pair"],
                pair_value=p["pair_value"],
                can_split=p["can_split"],
                can_double=p["can_double"],
            ),
            dealer_upcard=data["dealer_upcard"],
            seat=data["seat"],
            hand_index=data["hand_index"],
            num_hands=data["num_hands"],
            allowed_actions=[Action[a] for a in data["allowed_actions"]],
            bankroll=Decimal(data["bankroll"]),
        )


@dataclass
class HandResult:
    seat: int
    hand_index: int
    cards: List[str]
    bet: Decimal
    payout: Decimal
    status: HandStatus

    @property
    def net(self) -> Decimal:
        return self.payout - self.bet

    def to_dict(self) -> dict:
        return {
            "seat": self.seat,
            "hand_index": self.hand_index,
            "cards": self.cards,
            "bet": str(self.bet),
            "payout": str(self.payout),
            "status": self.status.name,
        }
