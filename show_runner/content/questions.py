"""Question list helpers."""

from __future__ import annotations

import random
from typing import Callable, Optional, Sequence, TypeVar

T = TypeVar("T")


def randomize_questions(
    questions: Sequence[T],
    should_randomize: bool = False,
    rng: Optional[random.Random] = None,
) -> list[T]:
    """Shuffle questions while keeping the Example at index 0.

    Returns a copy; the input is never mutated.
    """
    qs = list(questions)
    if not should_randomize or len(qs) <= 1:
        return qs
    rest = qs[1:]
    (rng or random).shuffle(rest)
    return [qs[0]] + rest


def pin_example(
    items: Sequence[T],
    is_example: Callable[[T], bool],
    rng: Optional[random.Random] = None,
) -> list[T]:
    """Shuffle ``items`` and move the first Example to the front.

    Used for media-folder games where the Example is marked by name rather
    than by position. Additional Examples are dropped.
    """
    example = next((item for item in items if is_example(item)), None)
    rest = [item for item in items if not is_example(item)]
    (rng or random).shuffle(rest)
    return ([example] if example is not None else []) + rest


def format_number(n: float) -> str:
    """Format with dot-separated thousands, e.g. 1234567 -> '1.234.567'."""
    sign = "-" if n < 0 else ""
    n = abs(n)
    if float(n).is_integer():
        return sign + f"{int(n):,}".replace(",", ".")
    # Fixed point; repr switches to exponent notation below 1e-4.
    whole, _, frac = f"{n:.10f}".rstrip("0").rstrip(".").partition(".")
    if not frac:
        return sign + f"{int(whole):,}".replace(",", ".")
    return sign + f"{int(whole):,}".replace(",", ".") + "," + frac
