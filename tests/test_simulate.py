from decimal import Decimal

from blackjack_table.agents import RandomAgent
from blackjack_table.settings import GameSettings
from blackjack_table.simulate import run_session


def test_basic_strategy_makes_no_mistakes():
    out = run_session(rounds=200, seed=3)
    m = out["metrics"]
    assert m["rounds"] == 200
    assert m["hands"] >= 200
    assert m["decisions"] > 0
    assert m["mistakes"] == 0
    assert m["mistake_rate"] == 0.0


def test_random_agent_is_scored_against_basic_strategy():
    m = run_session(RandomAgent(seed=1), rounds=200, seed=3)["metrics"]
    assert m["mistakes"] > 0
    assert 0 < m["mistake_rate"] <= 1


def test_same_seed_same_session():
    assert run_session(rounds=100, seed=9) == run_session(rounds=100, seed=9)


def test_net_matches_bankrolls():
    out = run_session(rounds=100, seats=(1, 4, 7), seed=5)
    start = GameSettings().starting_bankroll
    total = sum(Decimal(p["bankroll"]) - start for p in out["players"])
    assert Decimal(out["metrics"]["net"]) == total
    assert [p["seat"] for p in out["players"]] == [1, 4, 7]


def test_stops_when_nobody_can_bet():
    out = run_session(rounds=10, settings=GameSettings(starting_bankroll="4"))
    assert out["metrics"]["rounds"] == 0
    assert out["metrics"]["ev_per_round"] == 0.0


def test_flat_bet_and_wagered():
    out = run_session(rounds=10, seed=2, bet=25)
    assert Decimal(out["metrics"]["wagered"]) >= Decimal("250")


def test_events_are_logged():
    events = []
    out = run_session(rounds=20, seed=4, log_fn=events.append)
    scored = [e for e in events if e["event"] == "scored"]
    assert len(scored) == out["metrics"]["decisions"]
    assert all(e["mistake"] is False for e in scored)
    assert len(out["trace_preview"]) == 10


def test_single_deck_shuffles_every_round():
    m = run_session(rounds=25, seed=6, settings=GameSettings(num_decks=1))["metrics"]
    assert m["shuffles"] == 25
