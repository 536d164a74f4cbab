"""Audio guess: play a short clip, reveal the song and play the full track."""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

from ..audio import AudioClip, ClipFactory, SilentClip, play_clip, release_clip
from ..models.game import AudioGuessConfig
from ..models.state import build_play_view, question_label
from .base import PlayMachine, ReportComplete
from .reveal import AnswerCursor, Step

_logger = logging.getLogger("audio_guess")

AUDIO_GUESS_ROUTE = "/audio-guess"


def audio_sources(folder: str, audio_file: str) -> list[str]:
    """URL of a clip plus fallback encodings for .wav files."""
    base = f"{AUDIO_GUESS_ROUTE}/{quote(folder)}/{quote(audio_file)}"
    sources = [base]
    if base.lower().endswith(".wav"):
        stem = base[:-4]
        sources.extend([stem + ".mp3", stem + ".opus"])
    return sources


class AudioGuessMachine(PlayMachine):
    """Reveal cycle that owns two clips per question.

    Which clip autoplays depends on the direction a state is entered from:
    the short excerpt while the answer is hidden, the full song once it is
    shown. Both clips are paused and detached whenever the question changes
    and on teardown.
    """

    game_type = "audio-guess"
    supports_backward = True

    def __init__(
        self,
        config: AudioGuessConfig,
        report_complete: ReportComplete,
        clip_factory: Optional[ClipFactory] = None,
        logger: Optional[Any] = None,
    ) -> None:
        super().__init__(config, report_complete)
        self.questions = list(config.questions)
        self.cursor = AnswerCursor(len(self.questions))
        self._clip_factory: ClipFactory = clip_factory or SilentClip
        self._logger = logger or _logger
        self.short_clip: Optional[AudioClip] = None
        self.long_clip: Optional[AudioClip] = None
        self._load_clips()
        play_clip(self.short_clip, self._logger)

    def _load_clips(self) -> None:
        self._release_clips()
        if not self.questions:
            return
        q = self.questions[self.cursor.index]
        self.short_clip = self._clip_factory(audio_sources(q.folder, q.audio_file)[0])
        self.long_clip = self._clip_factory(audio_sources(q.folder, q.long_audio_file)[0])

    def _release_clips(self) -> None:
        release_clip(self.short_clip)
        release_clip(self.long_clip)
        self.short_clip = None
        self.long_clip = None

    def replay_short(self) -> None:
        if self.long_clip is not None:
            self.long_clip.pause()
        play_clip(self.short_clip, self._logger)

    def play_long(self) -> None:
        if self.short_clip is not None:
            self.short_clip.pause()
        play_clip(self.long_clip, self._logger)

    def forward(self) -> None:
        step = self.cursor.forward()
        if step is Step.REVEALED:
            self.play_long()
        elif step is Step.ADVANCED:
            self._load_clips()
            play_clip(self.short_clip, self._logger)
        elif step is Step.FINISHED:
            self._release_clips()
            self._finish()

    def backward(self) -> None:
        step = self.cursor.backward()
        if step is Step.HIDDEN:
            self.replay_short()
        elif step is Step.RETREATED:
            self._load_clips()
            play_clip(self.long_clip, self._logger)

    def teardown(self) -> None:
        self._release_clips()
        super().teardown()

    def view(self) -> dict[str, Any]:
        idx = self.cursor.index
        label = question_label(idx, len(self.questions), noun="Song")
        if not self.questions:
            return build_play_view(self.game_type, label, idx, answerShown=False)
        q = self.questions[idx]
        payload = build_play_view(
            self.game_type,
            label,
            idx,
            shortSources=audio_sources(q.folder, q.audio_file),
            longSources=audio_sources(q.folder, q.long_audio_file),
            answerShown=self.cursor.answer_shown,
        )
        if self.cursor.answer_shown:
            payload["answer"] = q.answer
        return payload
