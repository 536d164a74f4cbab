"""Question cursor shared by the reveal-then-advance games."""

from __future__ import annotations

from enum import Enum


class Step(str, Enum):
    REVEALED = "revealed"
    HIDDEN = "hidden"
    ADVANCED = "advanced"
    RETREATED = "retreated"
    FINISHED = "finished"
    NONE = "none"


class AnswerCursor:
    """Two-step cycle per question: reveal the answer, then advance.

    Backward never skips the answer-visible sub-state: it hides a shown answer
    first, and only then steps to the previous question with its answer shown.
    """

    def __init__(self, count: int) -> None:
        self.count = count
        self.index = 0
        self.answer_shown = False

    @property
    def is_last(self) -> bool:
        return self.index >= self.count - 1

    def forward(self) -> Step:
        if self.count == 0:
            return Step.FINISHED
        if not self.answer_shown:
            self.answer_shown = True
            return Step.REVEALED
        if self.is_last:
            return Step.FINISHED
        self.index += 1
        self.answer_shown = False
        return Step.ADVANCED

    def backward(self) -> Step:
        if self.answer_shown:
            self.answer_shown = False
            return Step.HIDDEN
        if self.index > 0:
            self.index -= 1
            self.answer_shown = True
            return Step.RETREATED
        return Step.NONE
