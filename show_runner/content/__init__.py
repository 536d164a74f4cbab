"""Content package for show config loading."""

from .loaders import load_app_config, resolve_game_definition, resolve_game_order
from .provider import LocalConfigProvider
from .questions import format_number, pin_example, randomize_questions

__all__ = [
    "load_app_config",
    "resolve_game_definition",
    "resolve_game_order",
    "LocalConfigProvider",
    "format_number",
    "pin_example",
    "randomize_questions",
]
