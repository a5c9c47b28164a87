from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from typing import Any, Dict, List, Optional

from .agent_utils import normalize_rank
from .agents.basic import BasicStrategyAgent
from .agents.random_agent import RandomAgent
from .cards import Card
from .cli_helpers import HeartbeatTracker, create_event_emitter, setup_logging
from .constants import (
    AVAILABLE_AGENTS,
    DEFAULT_HEARTBEAT_SECONDS,
    DEFAULT_PREFS_FILE,
    DEFAULT_ROUNDS,
    DEFAULT_SEATS,
    DEFAULT_SEED,
    SUPPORTED_DECK_COUNTS,
)
from .errors import BlackjackError, InvalidConfigurationError
from .hand import Hand
from .settings import GameSettings, parse_setting
from .simulate import run_session
from .storage import (
    PreferencesStore,
    get_saved_bankroll,
    load_settings,
    reset_bankroll,
    reset_settings,
    save_settings,
)
from .strategy import chart_rows, recommended_action


def build_agent(name: str, args: argparse.Namespace | None = None) -> Any:
    if name == "basic":
        return BasicStrategyAgent()
    if name == "random":
        seed = getattr(args, "seed", 0) if args else 0
        return RandomAgent(seed=seed)
    raise ValueError(f"Unknown agent: {name}")


def _seats(text: str) -> List[int]:
    try:
        seats = [int(s) for s in text.split(",") if s.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"seats must be comma-separated numbers, got {text!r}")
    if not seats:
        raise argparse.ArgumentTypeError("at least one seat is required")
    return seats


def _card(text: str) -> Card:
    try:
        return Card(normalize_rank(text))
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _cards(text: str) -> List[Card]:
    return [_card(r) for r in text.split(",") if r.strip()]


def _run_settings(args: argparse.Namespace) -> GameSettings:
    settings = load_settings(PreferencesStore(args.prefs)) if args.prefs else GameSettings()
    overrides: Dict[str, Any] = {}
    if args.decks is not None:
        overrides["num_decks"] = args.decks
    if args.s17:
        overrides["dealer_hits_soft_17"] = False
    if args.no_das:
        overrides["double_after_split"] = False
    return dataclasses.replace(settings, **overrides) if overrides else settings


def cmd_run(args: argparse.Namespace) -> None:
    settings = _run_settings(args)
    agent = build_agent(args.agent, args)

    log_file, log_fh = setup_logging(args)
    heartbeat = HeartbeatTracker(max(0, int(args.heartbeat_secs)), total_rounds=args.rounds)
    emit = create_event_emitter(args.debug, log_fh, heartbeat)

    try:
        result = run_session(
            agent,
            rounds=args.rounds,
            seats=args.seats,
            seed=args.seed,
            settings=settings,
            bet=args.bet,
            log_fn=emit,
        )
    finally:
        log_fh.close()

    result["settings"] = settings.to_dict()
    if args.report:
        with open(args.report, "w", encoding="utf-8") as f:
            json.dump(result, f, indent=2)
    print(json.dumps(result["metrics"], indent=2))
    print(f"event log written to {log_file}")


def cmd_strategy(args: argparse.Namespace) -> None:
    if args.chart:
        for line in chart_rows():
            print(line)
        return
    if not args.cards or args.up is None:
        raise InvalidConfigurationError("--cards and --up are required unless --chart is given")
    hand = Hand(cards=list(args.cards))
    action = recommended_action(hand, args.up, exclude_split=args.no_split)
    ranks = ",".join(c.rank for c in hand.cards)
    print(f"{ranks} ({hand.total}{' soft' if hand.is_soft else ''}) vs {args.up.rank}: {action.name}")


def cmd_settings(args: argparse.Namespace) -> None:
    store = PreferencesStore(args.prefs)
    if args.reset:
        reset_settings(store)
    if args.reset_bankroll:
        reset_bankroll(store)
    if args.set:
        settings = load_settings(store)
        updates: Dict[str, Any] = {}
        for item in args.set:
            if "=" not in item:
                raise InvalidConfigurationError(f"Expected key=value, got {item!r}")
            key, raw = item.split("=", 1)
            key = key.strip()
            updates[key] = parse_setting(key, raw)
        save_settings(store, dataclasses.replace(settings, **updates))
    if args.show or not (args.set or args.reset or args.reset_bankroll):
        settings = load_settings(store)
        saved = get_saved_bankroll(store)
        out = {"settings": settings.to_dict(), "bankroll": str(saved) if saved is not None else None}
        print(json.dumps(out, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="blackjack-table", description="Casino blackjack rules engine")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_run = sub.add_parser("run", help="Simulate rounds with AI seats")
    p_run.add_argument("--agent", choices=sorted(AVAILABLE_AGENTS), default="basic")
    p_run.add_argument("--rounds", type=int, default=DEFAULT_ROUNDS)
    p_run.add_argument("--seats", type=_seats, default=_seats(DEFAULT_SEATS), help="Comma-separated seat numbers (1-7)")
    p_run.add_argument("--decks", type=int, choices=SUPPORTED_DECK_COUNTS, default=None)
    p_run.add_argument("--s17", action="store_true", help="Dealer stands on soft 17")
    p_run.add_argument("--no-das", action="store_true", help="No doubling after a split")
    p_run.add_argument("--bet", type=str, default=None, help="Flat bet per round (default: table minimum)")
    p_run.add_argument("--seed", type=int, default=DEFAULT_SEED)
    p_run.add_argument("--prefs", type=str, default=None, help="Load table settings from this preferences file")
    p_run.add_argument("--report", type=str, default=None)
    # Debug/logging
    p_run.add_argument("--debug", action="store_true", help="Print per-event debug lines to stdout")
    p_run.add_argument("--log-jsonl", type=str, default=None, help="Write JSONL events to this file")
    p_run.add_argument(
        "--heartbeat-secs",
        type=int,
        default=DEFAULT_HEARTBEAT_SECONDS,
        help="Print a heartbeat line every N seconds (0 to disable)",
    )
    p_run.set_defaults(func=cmd_run)

    p_strat = sub.add_parser("strategy", help="Look up the basic strategy play")
    p_strat.add_argument("--cards", type=_cards, default=None, help="Player cards, e.g. A,7")
    p_strat.add_argument("--up", type=_card, default=None, help="Dealer up-card, e.g. 9")
    p_strat.add_argument("--no-split", action="store_true", help="Play pairs as totals")
    p_strat.add_argument("--chart", action="store_true", help="Print the full strategy charts")
    p_strat.set_defaults(func=cmd_strategy)

    p_set = sub.add_parser("settings", help="Show or change saved table settings")
    p_set.add_argument("--prefs", type=str, default=DEFAULT_PREFS_FILE)
    p_set.add_argument("--show", action="store_true")
    p_set.add_argument("--set", action="append", default=[], metavar="KEY=VALUE")
    p_set.add_argument("--reset", action="store_true", help="Forget saved settings")
    p_set.add_argument("--reset-bankroll", action="store_true", help="Forget the saved bankroll")
    p_set.set_defaults(func=cmd_settings)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except BlackjackError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
