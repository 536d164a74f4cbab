"""Per-variant play machines."""

from .base import PlayMachine
from .registry import MACHINES, create_play_machine

__all__ = ["PlayMachine", "MACHINES", "create_play_machine"]
