"""Final quiz: teams bet points, see the answer, and are judged."""

from __future__ import annotations

from typing import Any, Optional

from ..errors import parse_operator_number
from ..ledger import ScoreLedger
from ..models.game import FinalQuizConfig
from ..models.state import Team, build_play_view, question_label
from .base import PlayMachine, ReportComplete

QUESTION = "question"
BETTING = "betting"
ANSWER = "answer"
JUDGING = "judging"


class FinalQuizMachine(PlayMachine):
    """Four sub-phases per question: question, betting, answer, judging.

    Judging applies ``+bet`` or ``-bet`` to the ledger immediately. Judging the
    same team again first reverses the previous delta, so the ledger only ever
    reflects the latest judgment. The Example is judged without touching the
    ledger.
    """

    game_type = "final-quiz"

    def __init__(
        self,
        config: FinalQuizConfig,
        report_complete: ReportComplete,
        ledger: ScoreLedger,
    ) -> None:
        super().__init__(config, report_complete)
        self.questions = list(config.questions)
        self._ledger = ledger
        self.index = 0
        self.phase = QUESTION
        self._reset_question()

    def _reset_question(self) -> None:
        self.bets: dict[Team, int] = {Team.TEAM1: 0, Team.TEAM2: 0}
        self.results: dict[Team, Optional[bool]] = {Team.TEAM1: None, Team.TEAM2: None}

    @property
    def is_example(self) -> bool:
        return self.index == 0

    @property
    def can_advance(self) -> bool:
        """The next-question control unlocks once both teams are judged."""
        return self.phase == JUDGING and all(r is not None for r in self.results.values())

    def submit_bets(self, team1_bet: Any, team2_bet: Any) -> bool:
        """Lock in both bets (blank counts as 0) and reveal the answer."""
        if not self.active or self.phase != BETTING:
            return False
        self.bets = {
            Team.TEAM1: int(parse_operator_number(team1_bet, integer=True)),
            Team.TEAM2: int(parse_operator_number(team2_bet, integer=True)),
        }
        self.phase = ANSWER
        # The answer screen hands over to judging without waiting for input.
        self.phase = JUDGING
        return True

    def judge(self, team: Team | str, correct: bool) -> bool:
        if not self.active or self.phase != JUDGING:
            return False
        team = Team.from_value(team)
        bet = self.bets[team]
        previous = self.results[team]

        if not self.is_example:
            if previous is not None:
                self._ledger.award_points(team, -bet if previous else bet)
            self._ledger.award_points(team, bet if correct else -bet)

        self.results[team] = bool(correct)
        return True

    def forward(self) -> None:
        if not self.questions:
            self._finish()
            return
        if self.phase == QUESTION:
            self.phase = BETTING
        elif self.phase == ANSWER:
            self.phase = JUDGING
        elif self.can_advance:
            if self.index < len(self.questions) - 1:
                self.index += 1
                self.phase = QUESTION
                self._reset_question()
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
            answerShown=self.phase in (ANSWER, JUDGING),
        )
        if self.phase in (ANSWER, JUDGING):
            payload.update(
                answer=q.answer,
                answerImage=q.answer_image,
                team1Bet=self.bets[Team.TEAM1],
                team2Bet=self.bets[Team.TEAM2],
            )
        if self.phase == JUDGING:
            payload.update(
                team1Result=self.results[Team.TEAM1],
                team2Result=self.results[Team.TEAM2],
                nextEnabled=self.can_advance,
            )
        return payload
