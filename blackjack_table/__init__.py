from .cards import Card, Shoe, new_shoe
from .errors import BlackjackError, IllegalActionError, InvalidConfigurationError, ShoeExhaustedError
from .hand import Hand
from .players import Dealer, Player
from .rules import GameRules
from .settings import GameSettings, new_game_settings
from .table import Table
from .types import Action, GamePhase, HandOrigin, HandResult, HandStatus, HandView, Observation

__all__ = [
    "Card",
    "Shoe",
    "new_shoe",
    "Hand",
    "Player",
    "Dealer",
    "GameRules",
    "GameSettings",
    "new_game_settings",
    "Table",
    "Action",
    "GamePhase",
    "HandOrigin",
    "HandResult",
    "HandStatus",
    "HandView",
    "Observation",
    "BlackjackError",
    "IllegalActionError",
    "InvalidConfigurationError",
    "ShoeExhaustedError",
]
