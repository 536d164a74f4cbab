"""Pydantic models for the show runner."""

from .game import (
    GAME_CONFIG_MODELS,
    GameConfig,
    GameType,
    QuizjagdConfig,
    parse_game_config,
)
from .settings import GameData, GameshowConfig, Settings
from .state import Intent, ShowPhase, Team

__all__ = [
    "GAME_CONFIG_MODELS",
    "GameConfig",
    "GameType",
    "QuizjagdConfig",
    "parse_game_config",
    "GameData",
    "GameshowConfig",
    "Settings",
    "Intent",
    "ShowPhase",
    "Team",
]
