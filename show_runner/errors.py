"""Exception types for the show runner."""

from __future__ import annotations

from typing import Any


class ShowRunnerError(Exception):
    """Base exception for the show runner."""


class ConfigLoadError(ShowRunnerError):
    """Game or show configuration could not be fetched or parsed."""


class GameNotFoundError(ConfigLoadError):
    """No game is configured at the requested index or id."""


class MediaPlaybackError(ShowRunnerError):
    """Audio or image media failed to load or play."""


def parse_operator_number(raw: Any, *, integer: bool = False) -> float:
    """Parse a bet or guess typed by the operator.

    Blank or malformed input counts as 0 so the show never stalls on an
    unfilled field.
    """
    if raw is None:
        return 0
    if isinstance(raw, bool):
        return int(raw)
    if isinstance(raw, (int, float)):
        return int(raw) if integer else raw
    text = str(raw).strip().replace(",", ".")
    if not text:
        return 0
    try:
        value = float(text)
    except ValueError:
        return 0
    if value != value or value in (float("inf"), float("-inf")):
        return 0
    return int(value) if integer else value
