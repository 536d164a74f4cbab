"""Guessing game: both teams guess a number, the closer guess wins."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Optional

from ..content.questions import format_number, randomize_questions
from ..errors import parse_operator_number
from ..models.game import GuessingGameConfig
from ..models.state import Team, build_play_view, question_label
from .base import PlayMachine, ReportComplete

QUESTION = "question"
RESULT = "result"


@dataclass(frozen=True)
class GuessResult:
    answer: float
    team1_guess: float
    team2_guess: float

    @property
    def team1_diff(self) -> float:
        return abs(self.team1_guess - self.answer)

    @property
    def team2_diff(self) -> float:
        return abs(self.team2_guess - self.answer)

    @property
    def winner(self) -> Optional[Team]:
        """Strictly closer team, or None for a tie."""
        if self.team1_diff < self.team2_diff:
            return Team.TEAM1
        if self.team2_diff < self.team1_diff:
            return Team.TEAM2
        return None

    @property
    def verdict(self) -> str:
        winner = self.winner
        if winner is None:
            return "Gleichstand!"
        return f"{winner.label} ist näher dran!"


def evaluate_guesses(answer: float, team1_guess: Any, team2_guess: Any) -> GuessResult:
    """Compare two raw guesses against ``answer``; blanks count as 0."""
    return GuessResult(
        answer=answer,
        team1_guess=parse_operator_number(team1_guess),
        team2_guess=parse_operator_number(team2_guess),
    )


class GuessingGameMachine(PlayMachine):
    """Question phase collects guesses; forward only acts in the result phase."""

    game_type = "guessing-game"

    def __init__(
        self,
        config: GuessingGameConfig,
        report_complete: ReportComplete,
        rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__(config, report_complete)
        self.questions = randomize_questions(config.questions, config.randomize_questions, rng)
        self.index = 0
        self.phase = QUESTION
        self.result: Optional[GuessResult] = None

    def submit_guesses(self, team1_guess: Any, team2_guess: Any) -> Optional[GuessResult]:
        if not self.active or self.phase != QUESTION or not self.questions:
            return None
        self.result = evaluate_guesses(self.questions[self.index].answer, team1_guess, team2_guess)
        self.phase = RESULT
        return self.result

    def forward(self) -> None:
        if not self.questions:
            self._finish()
            return
        if self.phase != RESULT:
            return
        if self.index < len(self.questions) - 1:
            self.index += 1
            self.phase = QUESTION
            self.result = None
        else:
            self._finish()

    def view(self) -> dict[str, Any]:
        label = question_label(self.index, len(self.questions))
        if not self.questions:
            return build_play_view(self.game_type, label, self.index, phase=self.phase)
        q = self.questions[self.index]
        payload = build_play_view(
            self.game_type,
            label,
            self.index,
            question=q.question,
            phase=self.phase,
        )
        if self.phase == RESULT and self.result is not None:
            r = self.result
            winner = r.winner
            payload.update(
                answer=format_number(r.answer),
                answerImage=q.answer_image,
                team1Guess=format_number(r.team1_guess),
                team2Guess=format_number(r.team2_guess),
                team1Diff=format_number(r.team1_diff),
                team2Diff=format_number(r.team2_diff),
                winner=winner.value if winner else None,
                verdict=r.verdict,
            )
        return payload
