"""Unit tests for the terminal driver."""

import io
import json

import yaml

from show_runner.console import ConsoleDriver, build_session, main
from show_runner.models.state import ShowPhase


def write_show(tmp_path):
    content = tmp_path / "content"
    content.mkdir()
    (content / "config.yaml").write_text(yaml.safe_dump({
        "pointSystemEnabled": True,
        "gameOrder": ["finale"],
        "games": {
            "finale": {
                "type": "final-quiz",
                "title": "Finale",
                "questions": [{"question": "Beispiel", "answer": "B"}, {"question": "Q1", "answer": "A1"}],
            },
        },
    }), encoding="utf-8")
    runner = tmp_path / "runner.yaml"
    runner.write_text(yaml.safe_dump({
        "contentRoot": str(content),
        "storePath": str(tmp_path / "state.json"),
        "debounceSec": 0,
    }), encoding="utf-8")
    return runner


def test_driver_plays_final_quiz(tmp_path, monkeypatch):
    monkeypatch.delenv("SHOW_RUNNER_CONTENT_ROOT", raising=False)
    session = build_session(str(write_show(tmp_path)))
    out = io.StringIO()
    driver = ConsoleDriver(session, out=out)
    session.start()

    for line in ["", "", "n", "bet 5 5", "judge 1 ja", "judge 2 ja", "n", "n", "bet 10 4", "judge 1 yes", "judge 2 no", ">"]:
        assert driver.handle(line) is True

    assert session.controller.phase is ShowPhase.SCORING
    assert session.ledger.team1_points == 10
    assert session.ledger.team2_points == -4

    driver.handle("commit")
    assert "Bitte wähle mindestens ein Team aus" in out.getvalue()
    driver.handle("toggle 1")
    driver.handle("commit")
    assert session.ledger.team1_points == 11
    assert json.loads(open(tmp_path / "state.json", encoding="utf-8").read())["team1Points"] == "11"


def test_unknown_command_reports_error(tmp_path):
    session = build_session(str(write_show(tmp_path)))
    out = io.StringIO()
    session.start()
    assert ConsoleDriver(session, out=out).handle("dance") is True
    assert "Unknown command: dance" in out.getvalue()


def test_quit(tmp_path):
    session = build_session(str(write_show(tmp_path)))
    assert ConsoleDriver(session, out=io.StringIO()).handle("q") is False


def test_main_opens_with_global_rules(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("\n\n\nq\n"))
    assert main(["--config", str(write_show(tmp_path)), "--reset"]) == 0
    out = capsys.readouterr().out
    assert out.index('"phase": "GLOBAL_RULES"') < out.index('"phase": "LANDING"')
    assert '"title": "Regelwerk"' in out
    assert '"phase": "RULES"' in out


def test_main_skip_rules_starts_at_landing(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("q\n"))
    assert main(["--config", str(write_show(tmp_path)), "--skip-rules"]) == 0
    out = capsys.readouterr().out
    assert "GLOBAL_RULES" not in out
    assert '"phase": "LANDING"' in out
