"""Terminal driver for running a show from the operator's keyboard.

Each input line is either a navigation key or an operator command::

    <enter> | n | >        forward (ArrowRight)
    b | <                  backward (ArrowLeft)
    click                  click on the play area
    bet 10 5               final-quiz bets for team 1 and team 2
    guess 90 92            guessing-game guesses
    judge 1 yes            final-quiz judgment for one team
    judge yes              quizjagd judgment for the acting team
    tier easy|3            quizjagd tier selection
    timer                  simple-quiz countdown ran out
    replay | long          audio-guess clip controls
    toggle 1               select/deselect a winner on the scoring screen
    commit                 award the selected teams
    viewer open|close      image viewer state
    teams a,b,c,d          assign players to teams
    reset                  zero both totals
    q                      quit
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, List, Optional, TextIO

from .audio import CrossfadeEngine, SilentMusicPlayer
from .config import load_runner_config
from .content.provider import LocalConfigProvider
from .errors import ShowRunnerError
from .input_router import InputRouter
from .ledger import ScoreLedger
from .persistence import JsonFileStore
from .session import GameSession

_logger = logging.getLogger("console")

FORWARD_WORDS = {"", "n", ">", "next"}
BACKWARD_WORDS = {"b", "<", "back"}
YES_WORDS = {"y", "yes", "ja", "1", "true", "richtig"}


def _is_yes(word: str) -> bool:
    return word.strip().lower() in YES_WORDS


class ConsoleDriver:
    """Translate operator lines into router events and session commands."""

    def __init__(self, session: GameSession, out: Optional[TextIO] = None) -> None:
        self.session = session
        self._out = out or sys.stdout

    def _key(self, key: str) -> None:
        self.session.route({"type": "keydown", "key": key})

    def handle(self, line: str) -> bool:
        """Process one line. Returns False when the operator quits."""
        words = line.strip().split()
        command = words[0].lower() if words else ""
        args = words[1:]

        if command in ("q", "quit", "exit"):
            return False
        if command in FORWARD_WORDS:
            self._key("ArrowRight")
        elif command in BACKWARD_WORDS:
            self._key("ArrowLeft")
        elif command == "click":
            self.session.route({"type": "click", "target": {"tag": "div"}})
        else:
            try:
                self._command(command, args)
            except (ShowRunnerError, ValueError, IndexError) as exc:
                self._print({"error": str(exc)})
                return True
        self.show()
        return True

    def _command(self, command: str, args: List[str]) -> None:
        session = self.session
        controller = session.controller
        machine = session.machine

        if command == "toggle" and controller is not None:
            controller.toggle_winner(args[0])
        elif command == "commit" and controller is not None:
            if not controller.commit_scoring():
                self._print({"warning": "Bitte wähle mindestens ein Team aus"})
        elif command == "viewer":
            if args and args[0] == "open":
                session.router.open_viewer()
            else:
                session.router.close_viewer()
        elif command == "teams":
            names = " ".join(args).split(",")
            session.ledger.assign_teams(names, randomize=session.settings.team_randomization_enabled)
        elif command == "reset":
            session.ledger.reset()
        elif command == "bet" and hasattr(machine, "submit_bets"):
            machine.submit_bets(*(args + ["", ""])[:2])
        elif command == "guess" and hasattr(machine, "submit_guesses"):
            machine.submit_guesses(*(args + ["", ""])[:2])
        elif command == "tier" and hasattr(machine, "select_tier"):
            machine.select_tier(args[0])
        elif command == "judge" and machine is not None:
            if machine.game_type == "quizjagd":
                machine.judge(_is_yes(args[0]))
            elif hasattr(machine, "judge"):
                machine.judge(args[0], _is_yes(args[1]))
        elif command == "timer" and controller is not None:
            expire = controller.timer_callback()
            if expire is None:
                raise ValueError("No countdown in this phase")
            expire()
        elif command == "replay" and hasattr(machine, "replay_short"):
            machine.replay_short()
        elif command == "long" and hasattr(machine, "play_long"):
            machine.play_long()
        else:
            raise ValueError(f"Unknown command: {command}")

    def show(self) -> None:
        self._print(self.session.view())

    def _print(self, payload: Any) -> None:
        self._out.write(json.dumps(payload, ensure_ascii=False, indent=2) + "\n")
        self._out.flush()

    def run(self, lines: TextIO) -> None:
        self.show()
        for line in lines:
            if not self.handle(line):
                break


def build_session(config_path: Optional[str] = None) -> GameSession:
    config = load_runner_config(config_path)
    provider = LocalConfigProvider(config.content_root)
    ledger = ScoreLedger(JsonFileStore(config.store_path))
    router = InputRouter(
        forward_keys=config.forward_keys,
        backward_keys=config.backward_keys,
        debounce_sec=config.debounce_sec,
    )
    crossfade = CrossfadeEngine(SilentMusicPlayer(), steps=config.fade_steps, logger=_logger)
    return GameSession(
        provider,
        ledger,
        router,
        crossfade=crossfade,
        fade_ms=config.fade_ms,
        position_bonus=config.position_bonus,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run a quiz show from the terminal.")
    parser.add_argument("--config", default=None, help="Runner config YAML")
    parser.add_argument("--start", type=int, default=0, help="Game index to start at")
    parser.add_argument("--reset", action="store_true", help="Zero both team totals first")
    parser.add_argument("--skip-rules", action="store_true", help="Start without the show-wide rules screen")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        session = build_session(args.config)
    except ShowRunnerError as exc:
        print(f"Failed to start: {exc}", file=sys.stderr)
        return 1

    if args.reset:
        session.ledger.reset()
    if args.start == 0 and not args.skip_rules:
        session.show_global_rules()
    else:
        session.start(args.start)
    ConsoleDriver(session).run(sys.stdin)
    return 1 if session.error else 0


if __name__ == "__main__":
    raise SystemExit(main())
