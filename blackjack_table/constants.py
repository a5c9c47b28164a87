"""Constants and configuration values for blackjack_table."""

from __future__ import annotations

from decimal import Decimal

# Shoe
CARDS_PER_DECK = 52
SUPPORTED_DECK_COUNTS = (1, 2, 4, 6, 8)
# Fraction of the shoe dealt before a reshuffle; one deck reshuffles every round
PENETRATION_BY_DECKS = {1: 0.01, 2: 0.50}
DEFAULT_PENETRATION = 0.75

# Table defaults (standard US casino rules)
DEFAULT_TABLE_MINIMUM = Decimal("5")
DEFAULT_TABLE_MAXIMUM = Decimal("500")
DEFAULT_STARTING_BANKROLL = Decimal("1000")
DEFAULT_NUM_DECKS = 6
DEFAULT_BLACKJACK_PAYOUT = Decimal("1.5")  # 3:2
DEFAULT_INSURANCE_PAYOUT = Decimal("2.0")  # 2:1
DEFAULT_MAX_SPLITS = 3  # four hands total

# Seats, first base to third base
MIN_SEAT = 1
MAX_SEAT = 7

# Dealer
DEALER_STAND_TOTAL = 17
BLACKJACK_TOTAL = 21

# Preference keys
BANKROLL_KEY = "PlayerBankroll"
SETTINGS_KEYS = {
    "table_minimum": "TableMinimum",
    "table_maximum": "TableMaximum",
    "starting_bankroll": "StartingBankroll",
    "num_decks": "NumberOfDecks",
    "dealer_hits_soft_17": "DealerHitsSoft17",
    "blackjack_payout": "BlackjackPayout",
    "insurance_payout": "InsurancePayout",
    "max_splits": "MaxSplits",
    "double_after_split": "DoubleAfterSplit",
}

# Agents
AVAILABLE_AGENTS = {"basic", "random"}

# CLI defaults
DEFAULT_ROUNDS = 1000
DEFAULT_SEED = 42
DEFAULT_SEATS = "1"
DEFAULT_HEARTBEAT_SECONDS = 60
DEFAULT_PREFS_FILE = "blackjack_prefs.json"
JSONL_EXTENSION = ".jsonl"
TRACE_PREVIEW_ROUNDS = 10
