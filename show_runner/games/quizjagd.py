"""Quizjagd: teams alternate picking a difficulty tier and answering."""

from __future__ import annotations

import logging
import random
from typing import Any, Optional

from ..ledger import ScoreLedger
from ..models.game import QuizjagdConfig, QuizjagdQuestion, QuizjagdQuestionSet
from ..models.state import Team, build_play_view, question_label
from .base import PlayMachine, ReportComplete

_logger = logging.getLogger("quizjagd")

SELECTION = "selection"
QUESTION = "question"
ANSWER = "answer"

TIER_POINTS = {"easy": 3, "medium": 5, "hard": 7}
TIER_BY_POINTS = {points: tier for tier, points in TIER_POINTS.items()}


def tier_name(tier: Any) -> str:
    """Accept 'easy'/'medium'/'hard' or the point values 3/5/7."""
    if isinstance(tier, str) and tier.strip().lower() in TIER_POINTS:
        return tier.strip().lower()
    try:
        return TIER_BY_POINTS[int(tier)]
    except (KeyError, TypeError, ValueError):
        raise ValueError(f"Unknown tier: {tier!r}") from None


def build_pools(
    config: QuizjagdConfig,
    rng: Optional[random.Random] = None,
) -> dict[str, list[QuizjagdQuestion]]:
    """Split questions into tier pools, shuffled once, Examples in front."""
    rng = rng or random
    grouped: dict[str, list[QuizjagdQuestion]] = {tier: [] for tier in TIER_POINTS}
    if isinstance(config.questions, QuizjagdQuestionSet):
        for tier in TIER_POINTS:
            grouped[tier].extend(getattr(config.questions, tier))
    else:
        for q in config.questions:
            grouped[TIER_BY_POINTS[q.difficulty]].append(q)

    pools: dict[str, list[QuizjagdQuestion]] = {}
    for tier, items in grouped.items():
        examples = [q for q in items if q.is_example]
        rest = [q for q in items if not q.is_example]
        rng.shuffle(rest)
        if config.example_question is not None:
            example = config.example_question.model_copy(update={"is_example": True})
            examples.insert(0, example)
        pools[tier] = examples + rest
    return pools


class QuizjagdMachine(PlayMachine):
    """Turn-based tier selection with immediate scoring.

    A correct answer adds the tier value to the acting team. A wrong answer
    subtracts the tier value, but never more than the team currently has.
    The Example is played once before the first real turn and is neither
    scored nor counted.
    """

    game_type = "quizjagd"

    def __init__(
        self,
        config: QuizjagdConfig,
        report_complete: ReportComplete,
        ledger: ScoreLedger,
        rng: Optional[random.Random] = None,
        logger: Optional[Any] = None,
    ) -> None:
        super().__init__(config, report_complete)
        self._ledger = ledger
        self._logger = logger or _logger
        self.questions_per_team = config.questions_per_team
        self.pools = build_pools(config, rng)
        self._cursors = {tier: 0 for tier in TIER_POINTS}
        self.example_shown = False
        self.turns = {Team.TEAM1: 0, Team.TEAM2: 0}
        self.team = Team.TEAM1
        self.phase = SELECTION
        self.tier: Optional[str] = None
        self.current: Optional[QuizjagdQuestion] = None
        self.last_result: Optional[dict[str, Any]] = None

    @property
    def total_questions(self) -> int:
        return self.questions_per_team * 2

    @property
    def turns_taken(self) -> int:
        return sum(self.turns.values())

    def _peek(self, tier: str) -> Optional[int]:
        """Pool position of the next playable question in ``tier``."""
        pool = self.pools[tier]
        pos = self._cursors[tier]
        while pos < len(pool) and pool[pos].is_example and self.example_shown:
            pos += 1
        return pos if pos < len(pool) else None

    def tier_available(self, tier: Any) -> bool:
        return self._peek(tier_name(tier)) is not None

    def available_tiers(self) -> list[str]:
        return [tier for tier in TIER_POINTS if self._peek(tier) is not None]

    @property
    def game_over(self) -> bool:
        if all(count >= self.questions_per_team for count in self.turns.values()):
            return True
        return not self.available_tiers()

    def select_tier(self, tier: Any) -> bool:
        """Draw the next unused question of ``tier`` for the acting team."""
        if not self.active or self.phase != SELECTION:
            return False
        name = tier_name(tier)
        pos = self._peek(name)
        if pos is None:
            self._logger.info(f"[QUIZJAGD] Tier {name} exhausted")
            return False
        self._cursors[name] = pos + 1
        self.tier = name
        self.current = self.pools[name][pos]
        self.phase = QUESTION
        return True

    def forward(self) -> None:
        if self.phase == QUESTION:
            self.phase = ANSWER
        elif self.phase == SELECTION and self.game_over:
            self._finish()

    def judge(self, correct: bool) -> bool:
        """Score the shown answer and hand the turn to the other team."""
        if not self.active or self.phase != ANSWER or self.current is None or self.tier is None:
            return False

        value = TIER_POINTS[self.tier]
        if self.current.is_example:
            self.example_shown = True
            self.last_result = {"team": self.team.value, "correct": bool(correct), "delta": 0}
        else:
            if correct:
                delta = value
            else:
                delta = -min(value, max(self._ledger.points(self.team), 0))
            if delta:
                self._ledger.award_points(self.team, delta)
            self.last_result = {"team": self.team.value, "correct": bool(correct), "delta": delta}
            self.turns[self.team] += 1
            self.team = self.team.other()

        self.current = None
        self.tier = None
        self.phase = SELECTION
        if self.game_over:
            self._finish()
        return True

    def _question_index(self) -> int:
        """Acting team's question number, 0 for the Example."""
        team_index = min(self.turns[self.team] + 1, self.questions_per_team)
        if self.current is not None:
            return 0 if self.current.is_example else team_index
        pending_example = not self.example_shown and any(
            self._peek(tier) is not None and self.pools[tier][self._peek(tier)].is_example
            for tier in TIER_POINTS
        )
        return 0 if pending_example else team_index

    def view(self) -> dict[str, Any]:
        idx = self._question_index()
        label = question_label(idx, self.questions_per_team + 1)
        payload = build_play_view(
            self.game_type,
            label,
            idx,
            phase=self.phase,
            team=self.team.value,
            teamLabel=self.team.label,
            tiers={
                tier: {"points": points, "available": self._peek(tier) is not None}
                for tier, points in TIER_POINTS.items()
            },
            turns={team.value: count for team, count in self.turns.items()},
            lastResult=self.last_result,
        )
        if self.current is not None:
            payload.update(
                question=self.current.question,
                tier=self.tier,
                points=TIER_POINTS[self.tier] if self.tier else None,
                answerShown=self.phase == ANSWER,
            )
            if self.phase == ANSWER:
                payload["answer"] = self.current.answer
        return payload
