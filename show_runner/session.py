"""Game session sequencer.

Owns the ordered list of games for one show: shows the show-wide rules
("Regelwerk") before the first game, loads the game at the current index, builds its phase controller, advances to the next game or the final
summary, and turns a config failure into a terminal error state.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Optional, Protocol

from .audio import ClipFactory, CrossfadeEngine
from .controller import SessionPhaseController
from .errors import ConfigLoadError
from .input_router import HandlerLease, InputRouter
from .ledger import ScoreLedger, build_summary
from .models.settings import GameData, Settings
from .models.state import Intent, build_error_view

_logger = logging.getLogger("session")

DEFAULT_FADE_MS = 2000
GLOBAL_RULES_TITLE = "Regelwerk"


class GameConfigProvider(Protocol):
    def get_settings(self) -> Settings:
        ...

    def get_game_config(self, index: int) -> GameData:
        ...


class GameSession:
    """Sequence games for one show run."""

    def __init__(
        self,
        provider: GameConfigProvider,
        ledger: ScoreLedger,
        router: InputRouter,
        settings: Optional[Settings] = None,
        *,
        crossfade: Optional[CrossfadeEngine] = None,
        fade_ms: int = DEFAULT_FADE_MS,
        position_bonus: bool = False,
        clip_factory: Optional[ClipFactory] = None,
        rng: Optional[random.Random] = None,
        logger: Optional[Any] = None,
    ) -> None:
        self._provider = provider
        self.ledger = ledger
        self.router = router
        self.settings = settings if settings is not None else provider.get_settings()
        self._crossfade = crossfade
        self._fade_ms = int(fade_ms)
        self._position_bonus = bool(position_bonus)
        self._clip_factory = clip_factory
        self._rng = rng
        self._logger = logger or _logger

        self.game: Optional[GameData] = None
        self.controller: Optional[SessionPhaseController] = None
        self.error: Optional[str] = None
        self.finished = False
        self.showing_global_rules = False
        self._rules_lease: Optional[HandlerLease] = None

    @property
    def current_index(self) -> int:
        return self.game.current_index if self.game is not None else 0

    @property
    def point_system_enabled(self) -> bool:
        if self.game is not None:
            return self.game.point_system_enabled
        return self.settings.point_system_enabled

    @property
    def machine(self):
        return self.controller.machine if self.controller is not None else None

    def show_global_rules(self) -> None:
        """Show the show-wide rules; a forward intent then starts game 0."""
        if self.error is not None:
            return
        self._drop_controller()
        self.game = None
        self.finished = False
        self.showing_global_rules = True
        self._rules_lease = self.router.subscribe("session:GLOBAL_RULES", self._on_rules_intent)

    def _on_rules_intent(self, intent: Intent) -> None:
        if intent is Intent.FORWARD:
            self.start(0)

    def _leave_global_rules(self) -> None:
        self.showing_global_rules = False
        self.router.release(self._rules_lease)
        self._rules_lease = None

    def start(self, index: int = 0) -> bool:
        """Load the game at ``index`` and show its landing screen.

        Returns:
            False if the config could not be loaded; the session is then in
            its terminal error state.
        """
        if self.error is not None:
            return False
        self._leave_global_rules()
        self._drop_controller()
        try:
            game = self._provider.get_game_config(index)
        except ConfigLoadError as exc:
            self.error = str(exc)
            self._logger.error(f"[SESSION] Failed to load game {index}: {exc}")
            return False

        self.game = game
        self.controller = SessionPhaseController(
            game.config,
            self.ledger,
            self.router,
            point_system_enabled=game.point_system_enabled,
            point_value=index + 1 if self._position_bonus else 1,
            on_rules_shown=self._fade_out,
            on_game_finished=self._fade_in,
            on_next_game=self.next_game,
            clip_factory=self._clip_factory,
            rng=self._rng,
            logger=self._logger,
        )
        self._logger.info(f"[SESSION] Game {index + 1}/{game.total_games}: {game.game_id}")
        return True

    def next_game(self) -> bool:
        """Advance to the next game, or to the summary after the last one."""
        if self.error is not None or self.finished or self.game is None:
            return False
        if self.game.is_last:
            self._drop_controller()
            self.finished = True
            self._logger.info("[SESSION] Show finished")
            return True
        return self.start(self.game.current_index + 1)

    def route(self, event: Any):
        """Feed one raw input event to the router."""
        if self.error is not None or self.finished:
            return None
        return self.router.route(event)

    def summary(self) -> dict[str, Any]:
        return build_summary(self.ledger, self.point_system_enabled)

    def view(self) -> dict[str, Any]:
        if self.error is not None:
            return {"phase": "ERROR", "error": build_error_view(self.error)}
        if self.finished:
            return {"phase": "SUMMARY", "summary": self.summary(), "points": self.ledger.to_payload()}
        if self.showing_global_rules:
            return {
                "phase": "GLOBAL_RULES",
                "title": GLOBAL_RULES_TITLE,
                "rules": list(self.settings.global_rules),
                "points": self.ledger.to_payload(),
            }
        if self.controller is None or self.game is None:
            return {"phase": "IDLE"}
        payload = self.controller.view()
        payload.update(
            gameIndex=self.game.current_index,
            totalGames=self.game.total_games,
            isLast=self.game.is_last,
            points=self.ledger.to_payload(),
        )
        return payload

    def _drop_controller(self) -> None:
        if self.controller is not None:
            self.controller.detach()
            self.controller = None

    def _fade_out(self) -> None:
        if self._crossfade is not None:
            self._crossfade.fade_out(self._fade_ms)

    def _fade_in(self) -> None:
        if self._crossfade is not None:
            self._crossfade.fade_in(self._fade_ms)
