"""Show state enums and view payload builders."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class Team(str, Enum):
    """The two competing teams."""

    TEAM1 = "team1"
    TEAM2 = "team2"

    @property
    def label(self) -> str:
        return "Team 1" if self is Team.TEAM1 else "Team 2"

    def other(self) -> Team:
        return Team.TEAM2 if self is Team.TEAM1 else Team.TEAM1

    @classmethod
    def from_value(cls, value: Any) -> Team:
        """Parse 'team1', 'Team 2', '1', 2 ... into a Team."""
        if isinstance(value, Team):
            return value
        raw = str(value or "").lower().replace(" ", "").strip()
        if raw in {"team1", "1", "t1"}:
            return cls.TEAM1
        if raw in {"team2", "2", "t2"}:
            return cls.TEAM2
        raise ValueError(f"Unknown team: {value!r}")


class Intent(str, Enum):
    """Abstract navigation signals."""

    FORWARD = "forward"
    BACKWARD = "backward"


class ShowPhase(str, Enum):
    """Per-game phases driven by the session phase controller."""

    LANDING = "LANDING"
    RULES = "RULES"
    PLAY = "PLAY"
    SCORING = "SCORING"
    TRANSITION = "TRANSITION"


EXAMPLE_LABEL = "Beispiel"


def question_label(
    index: int,
    total: int,
    noun: str = "Frage",
    example_label: str = EXAMPLE_LABEL,
) -> str:
    """Label for the question at ``index`` where index 0 is the Example.

    ``total`` is the full list length including the Example.
    """
    if index == 0:
        return example_label
    return f"{noun} {index} von {max(total - 1, 0)}"


def build_play_view(
    game_type: str,
    label: str,
    question_index: int,
    **fields: Any,
) -> dict[str, Any]:
    """Build the common view payload every play machine returns."""
    payload: dict[str, Any] = {
        "gameType": game_type,
        "label": label,
        "questionIndex": question_index,
        "isExample": question_index == 0,
    }
    payload.update(fields)
    return payload


def build_scoring_view(selected: dict[Team, bool], point_value: int) -> dict[str, Any]:
    """Build the payload for the SCORING screen."""
    can_commit = any(selected.values())
    payload: dict[str, Any] = {
        "team1Selected": bool(selected.get(Team.TEAM1)),
        "team2Selected": bool(selected.get(Team.TEAM2)),
        "pointValue": point_value,
        "canCommit": can_commit,
    }
    if not can_commit:
        payload["warning"] = "Bitte wähle mindestens ein Team aus"
    return payload


def build_error_view(message: Optional[str]) -> dict[str, Any]:
    """Payload for the terminal error screen."""
    return {"title": "Error loading game", "message": message or ""}
