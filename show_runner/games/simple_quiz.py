"""Simple quiz: question, reveal answer, next question."""

from __future__ import annotations

import random
from typing import Any, Optional

from ..content.questions import randomize_questions
from ..models.game import SimpleQuizConfig
from ..models.state import build_play_view, question_label
from .base import PlayMachine, ReportComplete
from .reveal import AnswerCursor, Step


class SimpleQuizMachine(PlayMachine):
    """Two-step reveal cycle with an optional per-question countdown.

    The countdown runs while the answer is hidden and stops on reveal.
    """

    game_type = "simple-quiz"
    supports_backward = True

    def __init__(
        self,
        config: SimpleQuizConfig,
        report_complete: ReportComplete,
        rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__(config, report_complete)
        self.questions = randomize_questions(config.questions, config.randomize_questions, rng)
        self.cursor = AnswerCursor(len(self.questions))
        self.timer_running = False
        self._start_timer()

    @property
    def current(self):
        return self.questions[self.cursor.index] if self.questions else None

    def _start_timer(self) -> None:
        q = self.current
        self.timer_running = bool(q is not None and q.timer and not self.cursor.answer_shown)

    def timer_expired(self) -> None:
        self.timer_running = False

    def forward(self) -> None:
        step = self.cursor.forward()
        if step is Step.FINISHED:
            self.timer_running = False
            self._finish()
        elif step is Step.REVEALED:
            self.timer_running = False
        else:
            self._start_timer()

    def backward(self) -> None:
        step = self.cursor.backward()
        if step is Step.HIDDEN:
            self._start_timer()
        elif step is Step.RETREATED:
            self.timer_running = False

    def view(self) -> dict[str, Any]:
        q = self.current
        idx = self.cursor.index
        label = question_label(idx, len(self.questions), example_label="Beispiel Frage")
        if q is None:
            return build_play_view(self.game_type, label, idx, question=None, answerShown=False)

        payload = build_play_view(
            self.game_type,
            label,
            idx,
            question=q.question,
            questionImage=q.question_image,
            questionAudio=q.question_audio,
            answerShown=self.cursor.answer_shown,
        )
        if q.timer:
            payload["timer"] = {"seconds": q.timer, "running": self.timer_running}
        if self.cursor.answer_shown:
            payload.update(
                answer=q.answer,
                answerList=q.answer_list,
                answerImage=q.answer_image,
                answerAudio=q.answer_audio,
            )
            if q.replace_image and q.answer_image:
                payload["questionImage"] = None
        return payload
