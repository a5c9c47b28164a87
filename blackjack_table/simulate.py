from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional

from .agents.basic import BasicStrategyAgent
from .constants import DEFAULT_ROUNDS, DEFAULT_SEED, TRACE_PREVIEW_ROUNDS
from .settings import GameSettings, to_decimal
from .table import Table
from .types import Action, GamePhase, Observation


@dataclass
class SessionMetrics:
    rounds: int
    hands: int
    wagered: str
    net: str
    ev_per_round: float
    decisions: int
    mistakes: int
    mistake_rate: float
    shuffles: int


def run_session(
    agent: Any = None,
    rounds: int = DEFAULT_ROUNDS,
    seats: Iterable[int] = (1,),
    seed: Optional[int] = DEFAULT_SEED,
    settings: Optional[GameSettings] = None,
    bet: Any = None,
    *,
    log_fn: Optional[Callable[[Dict[str, Any]], None]] = None,
) -> Dict[str, Any]:
    """Play `rounds` rounds with AI seats and score every decision against
    basic strategy.

    Every seat shares `agent` (basic strategy when omitted) and bets the same
    flat amount each round. The session ends early once nobody can cover it.
    """
    settings = settings or GameSettings()
    agent = agent if agent is not None else BasicStrategyAgent()
    baseline = BasicStrategyAgent()
    bet_amount = to_decimal(bet) if bet is not None else settings.table_minimum

    table = Table(settings, seed=seed, log_fn=log_fn)
    for seat in seats:
        table.seat_player(f"Player {seat}", seat, agent=agent)
    starting = {p.seat: p.bankroll for p in table.players}

    played = 0
    hands = 0
    wagered = Decimal("0")
    decisions = 0
    mistakes = 0
    previews: List[Dict[str, Any]] = []

    for _ in range(rounds):
        bettors = [p for p in table.players if p.is_active and p.bankroll >= bet_amount]
        if not bettors:
            break
        for p in bettors:
            table.place_bet(p.seat, bet_amount)
        phase = table.auto_advance()
        if phase is not GamePhase.BETTING:
            raise RuntimeError(f"Round stopped in {phase.name} with no human seated")

        played += 1
        results = table.results
        hands += len(results)
        wagered += sum((r.bet for r in results), Decimal("0"))
        for d in table.trace:
            obs = Observation.from_dict(d["obs"])
            baseline_action = baseline.act(obs, info={})
            decisions += 1
            mistake = Action[d["action"]] is not baseline_action
            if mistake:
                mistakes += 1
            d["baseline_action"] = baseline_action.name
            d["mistake"] = mistake
            if log_fn is not None:
                log_fn({"event": "scored", "round": d["round"], **{k: v for k, v in d.items() if k != "round"}})
        if len(previews) < TRACE_PREVIEW_ROUNDS:
            previews.append({"round": played, "results": [r.to_dict() for r in results]})

    net = sum((p.bankroll - starting[p.seat] for p in table.players), Decimal("0"))
    metrics = SessionMetrics(
        rounds=played,
        hands=hands,
        wagered=str(wagered),
        net=str(net),
        ev_per_round=float(net / played) if played else 0.0,
        decisions=decisions,
        mistakes=mistakes,
        mistake_rate=mistakes / decisions if decisions else 0.0,
        shuffles=table.shuffles,
    )
    return {
        "metrics": metrics.__dict__,
        "players": [
            {"name": p.name, "seat": p.seat, "bankroll": str(p.bankroll), "is_active": p.is_active}
            for p in table.players
        ],
        "trace_preview": previews,
    }
