from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation
from typing import Any, Dict

from .constants import (
    DEFAULT_BLACKJACK_PAYOUT,
    DEFAULT_INSURANCE_PAYOUT,
    DEFAULT_MAX_SPLITS,
    DEFAULT_NUM_DECKS,
    DEFAULT_STARTING_BANKROLL,
    DEFAULT_TABLE_MAXIMUM,
    DEFAULT_TABLE_MINIMUM,
    SUPPORTED_DECK_COUNTS,
)
from .errors import InvalidConfigurationError

_MONEY_FIELDS = ("table_minimum", "table_maximum", "starting_bankroll", "blackjack_payout", "insurance_payout")
_INT_FIELDS = ("num_decks", "max_splits")
_BOOL_FIELDS = ("dealer_hits_soft_17", "double_after_split")

_TRUE_WORDS = ("1", "true", "yes", "on")
_FALSE_WORDS = ("0", "false", "no", "off")


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise InvalidConfigurationError(f"Not an amount: {value!r}")
    try:
        # str() first so 0.1 becomes Decimal('0.1'), not the binary float
        d = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidConfigurationError(f"Not an amount: {value!r}") from e
    if not d.is_finite():
        raise InvalidConfigurationError(f"Not an amount: {value!r}")
    return d


def to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidConfigurationError(f"Not a whole number: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as e:
            raise InvalidConfigurationError(f"Not a whole number: {value!r}") from e
    raise InvalidConfigurationError(f"Not a whole number: {value!r}")


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        low = value.strip().lower()
        if low in _TRUE_WORDS:
            return True
        if low in _FALSE_WORDS:
            return False
    raise InvalidConfigurationError(f"Not true or false: {value!r}")


def parse_setting(name: str, value: Any) -> Any:
    """Coerce one raw setting value (a string from a file or the command line) to its field type."""
    if name in _MONEY_FIELDS:
        return to_decimal(value)
    if name in _INT_FIELDS:
        return to_int(value)
    if name in _BOOL_FIELDS:
        return to_bool(value)
    raise InvalidConfigurationError(f"Unknown setting {name!r}")


@dataclass(frozen=True)
class GameSettings:
    table_minimum: Decimal = DEFAULT_TABLE_MINIMUM
    table_maximum: Decimal = DEFAULT_TABLE_MAXIMUM
    starting_bankroll: Decimal = DEFAULT_STARTING_BANKROLL
    num_decks: int = DEFAULT_NUM_DECKS
    dealer_hits_soft_17: bool = True  # H17; False => S17
    blackjack_payout: Decimal = DEFAULT_BLACKJACK_PAYOUT  # 3:2
    insurance_payout: Decimal = DEFAULT_INSURANCE_PAYOUT  # 2:1
    max_splits: int = DEFAULT_MAX_SPLITS  # re-splits allowed, hands = max_splits + 1
    double_after_split: bool = True

    def __post_init__(self):
        for name in _MONEY_FIELDS + _INT_FIELDS + _BOOL_FIELDS:
            object.__setattr__(self, name, parse_setting(name, getattr(self, name)))
        if self.table_minimum <= 0:
            raise InvalidConfigurationError("Table minimum must be positive")
        if self.table_maximum <= self.table_minimum:
            raise InvalidConfigurationError("Table maximum must be greater than table minimum")
        if self.starting_bankroll < 0:
            raise InvalidConfigurationError("Starting bankroll cannot be negative")
        if self.num_decks not in SUPPORTED_DECK_COUNTS:
            raise InvalidConfigurationError(
                f"Unsupported deck count {self.num_decks}; expected one of {SUPPORTED_DECK_COUNTS}"
            )
        if self.blackjack_payout <= 0 or self.insurance_payout <= 0:
            raise InvalidConfigurationError("Payout ratios must be positive")
        if self.max_splits < 0:
            raise InvalidConfigurationError("Max splits cannot be negative")

    def is_valid_bet(self, amount: Any) -> bool:
        amount = to_decimal(amount)
        return self.table_minimum <= amount <= self.table_maximum

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            v = getattr(self, f.name)
            out[f.name] = str(v) if isinstance(v, Decimal) else v
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameSettings":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def __str__(self) -> str:
        rule = "H17" if self.dealer_hits_soft_17 else "S17"
        das = "DAS" if self.double_after_split else "no DAS"
        return (
            f"Table: ${self.table_minimum}-${self.table_maximum}, Starting Bankroll: ${self.starting_bankroll}, "
            f"{self.num_decks} Decks, {rule}, {das}, Blackjack pays {self.blackjack_payout}:1"
        )


def new_game_settings(
    table_minimum: Any,
    table_maximum: Any,
    starting_bankroll: Any,
    num_decks: int = DEFAULT_NUM_DECKS,
    dealer_hits_soft_17: bool = True,
    blackjack_payout: Any = DEFAULT_BLACKJACK_PAYOUT,
    insurance_payout: Any = DEFAULT_INSURANCE_PAYOUT,
    max_splits: int = DEFAULT_MAX_SPLITS,
    double_after_split: bool = True,
) -> GameSettings:
    return GameSettings(
        table_minimum=table_minimum,
        table_maximum=table_maximum,
        starting_bankroll=starting_bankroll,
        num_decks=num_decks,
        dealer_hits_soft_17=dealer_hits_soft_17,
        blackjack_payout=blackjack_payout,
        insurance_payout=insurance_payout,
        max_splits=max_splits,
        double_after_split=double_after_split,
    )
