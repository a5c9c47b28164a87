"""Helper functions for CLI operations."""

from __future__ import annotations

import json
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from .constants import DEFAULT_HEARTBEAT_SECONDS, JSONL_EXTENSION


class HeartbeatTracker:
    """Track session progress and print a heartbeat line every N seconds."""

    def __init__(self, heartbeat_seconds: int = DEFAULT_HEARTBEAT_SECONDS, total_rounds: int = 0):
        self.heartbeat_seconds = heartbeat_seconds
        self.total_rounds = total_rounds
        self.last_heartbeat = time.monotonic()
        self.start_time = self.last_heartbeat
        self.max_round_seen = 0
        self.shuffles = 0

    def should_print_heartbeat(self) -> bool:
        if self.heartbeat_seconds <= 0:
            return False
        now = time.monotonic()
        return now - self.last_heartbeat >= self.heartbeat_seconds

    def record_event(self, event: Dict[str, Any]) -> None:
        rnd = event.get("round")
        if isinstance(rnd, int):
            self.max_round_seen = max(self.max_round_seen, rnd)
        if event.get("event") == "shuffle":
            self.shuffles += 1

    def print_heartbeat(self) -> None:
        now = time.monotonic()
        elapsed = now - self.start_time
        done = self.max_round_seen
        pct = (done / self.total_rounds) * 100 if self.total_rounds else 0
        print(f"[heartbeat] {elapsed:.0f}s run: round={done}/{self.total_rounds} ({pct:.1f}%) shuffles={self.shuffles}")
        self.last_heartbeat = now


def setup_logging(args) -> Tuple[str, Any]:
    """Open the JSONL event log, defaulting to logs/<ts>_run_<agent>.jsonl."""
    log_file = getattr(args, "log_jsonl", None)
    if not log_file:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        Path("logs").mkdir(parents=True, exist_ok=True)
        log_file = str(Path("logs") / f"{ts}_run_{args.agent}{JSONL_EXTENSION}")
    log_fh = open(log_file, "a", encoding="utf-8")
    return log_file, log_fh


def format_debug_line(event: Dict[str, Any]) -> Optional[str]:
    kind = event.get("event")
    rnd = event.get("round")
    if kind == "decision":
        obs = event.get("obs", {})
        p = obs.get("player", {})
        return (
            f"[round {rnd} seat {event.get('seat')} h{event.get('hand_index')}] "
            f"up={obs.get('dealer_upcard')} cards={p.get('cards')} total={p.get('total')} act={event.get('action')}"
        )
    if kind == "scored" and event.get("mistake"):
        return f"[round {rnd} seat {event.get('seat')}] mistake: {event.get('action')} (basic: {event.get('baseline_action')})"
    if kind == "hand_settled":
        return (
            f"[round {rnd} seat {event.get('seat')} h{event.get('hand_index')}] "
            f"{event.get('status')} bet={event.get('bet')} payout={event.get('payout')}"
        )
    if kind in ("shuffle", "dealer_blackjack", "player_inactive"):
        details = {k: v for k, v in event.items() if k not in ("event", "round", "phase")}
        return f"[round {rnd}] {kind} {details}"
    return None


def create_event_emitter(
    debug: bool,
    log_fh: Optional[Any],
    heartbeat_tracker: HeartbeatTracker,
) -> Callable[[Dict[str, Any]], None]:
    """Create an event emission function for logging and heartbeats."""

    def emit(event: Dict[str, Any]) -> None:
        heartbeat_tracker.record_event(event)

        if debug:
            line = format_debug_line(event)
            if line:
                print(line)

        if heartbeat_tracker.should_print_heartbeat():
            heartbeat_tracker.print_heartbeat()

        if log_fh:
            event = dict(event, timestamp=datetime.now().isoformat())
            log_fh.write(json.dumps(event, default=str) + "\n")
            log_fh.flush()

    return emit
