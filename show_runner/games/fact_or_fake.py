"""Fact or fake: show a statement, reveal FAKT/FAKE with an explanation."""

from __future__ import annotations

import random
from typing import Any, Optional

from ..content.questions import randomize_questions
from ..models.game import FactOrFakeConfig
from ..models.state import build_play_view, question_label
from .base import PlayMachine, ReportComplete
from .reveal import AnswerCursor, Step


class FactOrFakeMachine(PlayMachine):
    game_type = "fact-or-fake"
    supports_backward = True

    def __init__(
        self,
        config: FactOrFakeConfig,
        report_complete: ReportComplete,
        rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__(config, report_complete)
        self.questions = randomize_questions(config.questions, config.randomize_questions, rng)
        self.cursor = AnswerCursor(len(self.questions))

    def forward(self) -> None:
        if self.cursor.forward() is Step.FINISHED:
            self._finish()

    def backward(self) -> None:
        self.cursor.backward()

    def view(self) -> dict[str, Any]:
        idx = self.cursor.index
        label = question_label(idx, len(self.questions))
        if not self.questions:
            return build_play_view(self.game_type, label, idx, statement=None, answerShown=False)

        q = self.questions[idx]
        payload = build_play_view(
            self.game_type,
            label,
            idx,
            statement=q.statement,
            answerShown=self.cursor.answer_shown,
        )
        if self.cursor.answer_shown:
            payload.update(
                answer=q.verdict,
                isFact=q.verdict == "FAKT",
                description=q.description or None,
            )
        return payload
