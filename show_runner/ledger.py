"""Two-team score ledger and team roster.

Open question resolved here: the ledger never floors a total. A negative
delta is applied as-is; any "never below zero" policy belongs to the caller
(quizjagd clamps its own debit before calling ``award_points``).
"""

from __future__ import annotations

import json
import logging
import random
from typing import Any, Optional, Sequence

from .models.state import Team
from .persistence import KeyValueStore

_logger = logging.getLogger("ledger")

POINTS_KEYS = {Team.TEAM1: "team1Points", Team.TEAM2: "team2Points"}
ROSTER_KEYS = {Team.TEAM1: "team1", Team.TEAM2: "team2"}


def _parse_points(raw: Optional[str]) -> int:
    """Missing or non-numeric stored values count as 0."""
    if raw is None:
        return 0
    try:
        return int(str(raw).strip())
    except ValueError:
        try:
            return int(float(str(raw).strip()))
        except (ValueError, OverflowError):
            return 0


def _parse_names(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return []
    if not isinstance(data, list):
        return []
    return [str(name) for name in data]


class ScoreLedger:
    """Durable two-team point totals.

    Totals are read from the store once at construction and written back on
    every mutation, so a restarted runner resumes the tally.
    """

    def __init__(self, store: KeyValueStore, logger: Optional[Any] = None) -> None:
        self._store = store
        self._logger = logger or _logger
        self._points = {team: _parse_points(store.get(key)) for team, key in POINTS_KEYS.items()}
        self._members = {team: _parse_names(store.get(key)) for team, key in ROSTER_KEYS.items()}

    @property
    def team1_points(self) -> int:
        return self._points[Team.TEAM1]

    @property
    def team2_points(self) -> int:
        return self._points[Team.TEAM2]

    def points(self, team: Team | str) -> int:
        return self._points[Team.from_value(team)]

    def award_points(self, team: Team | str, delta: int) -> int:
        """Add ``delta`` (may be negative) to a team's total and persist it.

        Returns:
            The team's new total.
        """
        team = Team.from_value(team)
        new_total = self._points[team] + int(delta)
        self._points[team] = new_total
        self._store.set(POINTS_KEYS[team], str(new_total))
        self._logger.info(f"[LEDGER] {team.value} {int(delta):+d} -> {new_total}")
        return new_total

    def reset(self) -> None:
        """Zero both totals."""
        for team, key in POINTS_KEYS.items():
            self._points[team] = 0
            self._store.set(key, "0")
        self._logger.info("[LEDGER] Points reset")

    # -------------------- Roster --------------------

    def team_members(self, team: Team | str) -> list[str]:
        return list(self._members[Team.from_value(team)])

    def set_teams(self, team1: Sequence[str], team2: Sequence[str]) -> None:
        self._members[Team.TEAM1] = [str(n) for n in team1]
        self._members[Team.TEAM2] = [str(n) for n in team2]
        for team, key in ROSTER_KEYS.items():
            self._store.set(key, json.dumps(self._members[team], ensure_ascii=False))

    def assign_teams(
        self,
        names: Sequence[str],
        randomize: bool = True,
        rng: Optional[random.Random] = None,
    ) -> tuple[list[str], list[str]]:
        """Split player names alternately into two teams, optionally shuffled."""
        ordered = [str(n).strip() for n in names if str(n).strip()]
        if randomize:
            (rng or random).shuffle(ordered)
        team1 = ordered[0::2]
        team2 = ordered[1::2]
        self.set_teams(team1, team2)
        return team1, team2

    def to_payload(self) -> dict[str, Any]:
        return {
            "team1Points": self.team1_points,
            "team2Points": self.team2_points,
            "team1": self.team_members(Team.TEAM1),
            "team2": self.team_members(Team.TEAM2),
        }


def build_summary(ledger: ScoreLedger, point_system_enabled: bool) -> dict[str, Any]:
    """Final announcement for the end of the show."""
    if not point_system_enabled:
        return {"text": "Das Spiel ist zu Ende!", "subtitle": "Vielen Dank fürs Spielen!", "members": [], "winner": None}

    t1, t2 = ledger.team1_points, ledger.team2_points
    if t1 == t2:
        return {"text": "Es ist ein Unentschieden!", "subtitle": "", "members": [], "winner": None}

    winner = Team.TEAM1 if t1 > t2 else Team.TEAM2
    members = [name[:1].upper() + name[1:] for name in ledger.team_members(winner)]
    return {
        "text": f"{winner.label} hat gewonnen!",
        "subtitle": "",
        "members": members,
        "winner": winner.value,
    }
