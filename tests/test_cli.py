import json

import pytest

from blackjack_table.cli import main


def test_run_prints_metrics(tmp_path, capsys):
    log = tmp_path / "events.jsonl"
    report = tmp_path / "report.json"
    code = main([
        "run", "--rounds", "20", "--seats", "1,2", "--seed", "7",
        "--log-jsonl", str(log), "--report", str(report), "--heartbeat-secs", "0",
    ])
    assert code == 0
    out = capsys.readouterr().out
    metrics = json.loads(out[: out.index("}") + 1])
    assert metrics["rounds"] == 20
    assert metrics["mistakes"] == 0

    lines = [json.loads(line) for line in log.read_text().splitlines()]
    assert lines and all("timestamp" in e for e in lines)
    assert {"deal", "round_settled"} <= {e["event"] for e in lines}
    assert json.loads(report.read_text())["settings"]["num_decks"] == 6


def test_run_rule_flags(tmp_path, capsys):
    report = tmp_path / "report.json"
    main([
        "run", "--rounds", "5", "--decks", "2", "--s17", "--no-das",
        "--log-jsonl", str(tmp_path / "e.jsonl"), "--report", str(report), "--heartbeat-secs", "0",
    ])
    settings = json.loads(report.read_text())["settings"]
    assert settings["num_decks"] == 2
    assert settings["dealer_hits_soft_17"] is False
    assert settings["double_after_split"] is False


def test_run_debug_lines(tmp_path, capsys):
    main([
        "run", "--rounds", "5", "--debug", "--log-jsonl", str(tmp_path / "e.jsonl"), "--heartbeat-secs", "0",
    ])
    assert "[round 1 seat 1" in capsys.readouterr().out


def test_run_rejects_bad_bet(tmp_path, capsys):
    code = main(["run", "--rounds", "5", "--bet", "1000", "--log-jsonl", str(tmp_path / "e.jsonl")])
    assert code == 2
    assert capsys.readouterr().err.startswith("error: ")


def test_run_uses_saved_settings(tmp_path, capsys):
    prefs = tmp_path / "prefs.json"
    assert main(["settings", "--prefs", str(prefs), "--set", "num_decks=8", "--set", "table_minimum=10"]) == 0
    report = tmp_path / "report.json"
    main([
        "run", "--rounds", "3", "--prefs", str(prefs),
        "--log-jsonl", str(tmp_path / "e.jsonl"), "--report", str(report), "--heartbeat-secs", "0",
    ])
    data = json.loads(report.read_text())
    assert data["settings"]["num_decks"] == 8
    assert data["settings"]["table_minimum"] == "10"


def test_strategy_lookup(capsys):
    assert main(["strategy", "--cards", "5,5", "--up", "9"]) == 0
    assert capsys.readouterr().out.strip() == "5,5 (10) vs 9: DOUBLE"
    main(["strategy", "--cards", "A,7", "--up", "t"])
    assert capsys.readouterr().out.strip().endswith("HIT")
    main(["strategy", "--cards", "8,8", "--up", "10", "--no-split"])
    assert capsys.readouterr().out.strip().endswith("HIT")


def test_strategy_chart(capsys):
    main(["strategy", "--chart"])
    out = capsys.readouterr().out
    assert "Hard totals" in out and "Soft totals" in out and "Pairs" in out


def test_strategy_needs_cards(capsys):
    assert main(["strategy"]) == 2


def test_strategy_bad_rank():
    with pytest.raises(SystemExit):
        main(["strategy", "--cards", "Z,5", "--up", "9"])


def test_settings_show_and_reset(tmp_path, capsys):
    prefs = tmp_path / "prefs.json"
    main(["settings", "--prefs", str(prefs), "--set", "dealer_hits_soft_17=false"])
    main(["settings", "--prefs", str(prefs), "--show"])
    shown = json.loads(capsys.readouterr().out)
    assert shown["settings"]["dealer_hits_soft_17"] is False
    assert shown["bankroll"] is None

    main(["settings", "--prefs", str(prefs), "--reset"])
    capsys.readouterr()
    main(["settings", "--prefs", str(prefs)])
    assert json.loads(capsys.readouterr().out)["settings"]["dealer_hits_soft_17"] is True


def test_settings_rejects_bad_values(tmp_path, capsys):
    prefs = tmp_path / "prefs.json"
    assert main(["settings", "--prefs", str(prefs), "--set", "num_decks=5"]) == 2
    assert main(["settings", "--prefs", str(prefs), "--set", "colour=red"]) == 2
    assert main(["settings", "--prefs", str(prefs), "--set", "table_maximum=1"]) == 2
    assert not prefs.exists()


def test_run_rejects_nan_bet(tmp_path, capsys):
    code = main(["run", "--rounds", "5", "--bet", "nan", "--log-jsonl", str(tmp_path / "e.jsonl")])
    assert code == 2
    assert capsys.readouterr().err.startswith("error: ")


def test_settings_with_corrupt_file(tmp_path, capsys):
    prefs = tmp_path / "prefs.json"
    prefs.write_text("{not json")
    assert main(["settings", "--prefs", str(prefs), "--show"]) == 2
    assert capsys.readouterr().err.startswith("error: ")
