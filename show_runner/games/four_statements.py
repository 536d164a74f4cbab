"""Four statements: reveal statements one at a time, then expose the fake."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Optional

from ..content.questions import randomize_questions
from ..models.game import FourStatementsConfig, FourStatementsQuestion
from ..models.state import build_play_view, question_label
from .base import PlayMachine, ReportComplete


@dataclass(frozen=True)
class Statement:
    text: str
    is_wrong: bool


def shuffle_statements(q: FourStatementsQuestion, rng: Optional[random.Random] = None) -> list[Statement]:
    statements = [Statement(s, False) for s in q.true_statements]
    statements.append(Statement(q.wrong_statement, True))
    (rng or random).shuffle(statements)
    return statements


class FourStatementsMachine(PlayMachine):
    """Reveal cycle of ``len(statements) + 2`` steps per question.

    Backward mirrors forward exactly: hide the answer, un-reveal statements one
    by one, then step back to the previous question fully revealed.
    """

    game_type = "four-statements"
    supports_backward = True

    def __init__(
        self,
        config: FourStatementsConfig,
        report_complete: ReportComplete,
        rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__(config, report_complete)
        self._rng = rng
        self.questions = randomize_questions(config.questions, config.randomize_questions, rng)
        self.index = 0
        self.revealed_count = 0
        self.answer_shown = False
        self._shuffled: dict[int, list[Statement]] = {}

    def statements(self, index: Optional[int] = None) -> list[Statement]:
        """Statement order for a question, fixed on first access."""
        idx = self.index if index is None else index
        if idx not in self._shuffled:
            self._shuffled[idx] = shuffle_statements(self.questions[idx], self._rng)
        return self._shuffled[idx]

    def forward(self) -> None:
        if not self.questions:
            self._finish()
            return
        if self.revealed_count < len(self.statements()):
            self.revealed_count += 1
        elif not self.answer_shown:
            self.answer_shown = True
        elif self.index < len(self.questions) - 1:
            self.index += 1
            self.revealed_count = 0
            self.answer_shown = False
        else:
            self._finish()

    def backward(self) -> None:
        if self.answer_shown:
            self.answer_shown = False
        elif self.revealed_count > 0:
            self.revealed_count -= 1
        elif self.index > 0:
            self.index -= 1
            self.revealed_count = len(self.statements())
            self.answer_shown = True

    def view(self) -> dict[str, Any]:
        label = question_label(self.index, len(self.questions))
        if not self.questions:
            return build_play_view(self.game_type, label, self.index, statements=[], answerShown=False)

        visible = []
        for stmt in self.statements()[: self.revealed_count]:
            entry: dict[str, Any] = {"text": stmt.text}
            if self.answer_shown:
                entry["isWrong"] = stmt.is_wrong
            visible.append(entry)

        return build_play_view(
            self.game_type,
            label,
            self.index,
            question=self.questions[self.index].question,
            statements=visible,
            revealedCount=self.revealed_count,
            answerShown=self.answer_shown,
        )
