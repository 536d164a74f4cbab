"""Play machine registry and factory."""

from __future__ import annotations

import random
from typing import Any, Optional

from ..audio import ClipFactory
from ..ledger import ScoreLedger
from ..models.game import GameConfig
from .audio_guess import AudioGuessMachine
from .base import PlayMachine, ReportComplete
from .fact_or_fake import FactOrFakeMachine
from .final_quiz import FinalQuizMachine
from .four_statements import FourStatementsMachine
from .guessing_game import GuessingGameMachine
from .image_game import ImageGameMachine
from .quizjagd import QuizjagdMachine
from .simple_quiz import SimpleQuizMachine

MACHINES: dict[str, type[PlayMachine]] = {
    machine.game_type: machine
    for machine in (
        SimpleQuizMachine,
        GuessingGameMachine,
        FinalQuizMachine,
        AudioGuessMachine,
        ImageGameMachine,
        FourStatementsMachine,
        FactOrFakeMachine,
        QuizjagdMachine,
    )
}


def create_play_machine(
    config: GameConfig,
    report_complete: ReportComplete,
    *,
    ledger: Optional[ScoreLedger] = None,
    clip_factory: Optional[ClipFactory] = None,
    rng: Optional[random.Random] = None,
    logger: Optional[Any] = None,
) -> PlayMachine:
    """Get the play machine for a validated game config.

    Args:
        config: Typed game config; its ``type`` tag selects the machine
        report_complete: Called once when the last question is resolved
        ledger: Required by the variants that score during play
        clip_factory: Audio clip source for audio-guess
        rng: Random source for shuffles

    Returns:
        A fresh play machine positioned on question 0
    """
    game_type = config.type

    if game_type in ("final-quiz", "quizjagd") and ledger is None:
        raise ValueError(f"{game_type} needs a score ledger")

    if game_type == "simple-quiz":
        return SimpleQuizMachine(config, report_complete, rng=rng)

    if game_type == "guessing-game":
        return GuessingGameMachine(config, report_complete, rng=rng)

    if game_type == "final-quiz":
        return FinalQuizMachine(config, report_complete, ledger=ledger)

    if game_type == "audio-guess":
        return AudioGuessMachine(config, report_complete, clip_factory=clip_factory, logger=logger)

    if game_type == "image-game":
        return ImageGameMachine(config, report_complete)

    if game_type == "four-statements":
        return FourStatementsMachine(config, report_complete, rng=rng)

    if game_type == "fact-or-fake":
        return FactOrFakeMachine(config, report_complete, rng=rng)

    if game_type == "quizjagd":
        return QuizjagdMachine(config, report_complete, ledger=ledger, rng=rng, logger=logger)

    raise ValueError(f"No play machine for game type {game_type!r}")
