"""Image game: show a picture, reveal what it shows."""

from __future__ import annotations

from typing import Any

from ..models.game import ImageGameConfig
from ..models.state import build_play_view, question_label
from .base import PlayMachine, ReportComplete
from .reveal import AnswerCursor, Step


class ImageGameMachine(PlayMachine):
    """Questions arrive already ordered: Example first, the rest shuffled."""

    game_type = "image-game"
    supports_backward = True

    def __init__(self, config: ImageGameConfig, report_complete: ReportComplete) -> None:
        super().__init__(config, report_complete)
        self.questions = list(config.questions)
        self.cursor = AnswerCursor(len(self.questions))

    def forward(self) -> None:
        if self.cursor.forward() is Step.FINISHED:
            self._finish()

    def backward(self) -> None:
        self.cursor.backward()

    def view(self) -> dict[str, Any]:
        idx = self.cursor.index
        label = question_label(idx, len(self.questions), noun="Bild")
        if not self.questions:
            return build_play_view(self.game_type, label, idx, image=None, answerShown=False)
        q = self.questions[idx]
        payload = build_play_view(
            self.game_type,
            label,
            idx,
            image=q.image,
            answerShown=self.cursor.answer_shown,
        )
        if self.cursor.answer_shown:
            payload["answer"] = q.answer
        return payload
