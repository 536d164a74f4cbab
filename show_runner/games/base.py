"""Play machine interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar

from ..models.state import Intent

ReportComplete = Callable[[], None]


class PlayMachine(ABC):
    """Forward/backward driven play state for one mini-game.

    Implementations call ``report_complete`` exactly once, when the last
    question is resolved. After :meth:`teardown` a machine ignores all input.
    """

    game_type: ClassVar[str] = ""
    supports_backward: ClassVar[bool] = False

    def __init__(self, config: Any, report_complete: ReportComplete) -> None:
        self.config = config
        self._report_complete = report_complete
        self._completed = False
        self._torn_down = False

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def active(self) -> bool:
        return not (self._completed or self._torn_down)

    @property
    def total_questions(self) -> int:
        """Counted questions, the Example excluded."""
        return self.config.total_questions

    @abstractmethod
    def forward(self) -> None:
        """Handle a forward intent."""
        raise NotImplementedError

    def backward(self) -> None:
        """Handle a backward intent. No-op unless the variant supports it."""

    @abstractmethod
    def view(self) -> dict[str, Any]:
        """Snapshot of what is currently visible."""
        raise NotImplementedError

    def teardown(self) -> None:
        """Release resources; called by the controller when play ends."""
        self._torn_down = True

    def on_intent(self, intent: Intent) -> None:
        if not self.active:
            return
        if intent is Intent.FORWARD:
            self.forward()
        elif intent is Intent.BACKWARD and self.supports_backward:
            self.backward()

    def _finish(self) -> None:
        if not self.active:
            return
        self._completed = True
        self._report_complete()
