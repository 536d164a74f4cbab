"""Session phase controller.

Drives one mini-game through LANDING -> RULES -> PLAY -> SCORING|TRANSITION
and owns the input router's handler slot outside of PLAY. During PLAY the
active play machine owns the slot.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Callable, Optional

from .audio import ClipFactory
from .games.base import PlayMachine
from .games.registry import create_play_machine
from .input_router import HandlerLease, InputRouter
from .ledger import ScoreLedger
from .models.game import GameConfig
from .models.state import Intent, ShowPhase, Team, build_scoring_view

_logger = logging.getLogger("controller")

Hook = Callable[[], None]
MachineFactory = Callable[..., PlayMachine]


class SessionPhaseController:
    """Generic per-game phase machine shared by every variant."""

    def __init__(
        self,
        config: GameConfig,
        ledger: ScoreLedger,
        router: InputRouter,
        *,
        point_system_enabled: bool = True,
        point_value: int = 1,
        machine_factory: MachineFactory = create_play_machine,
        on_rules_shown: Optional[Hook] = None,
        on_game_finished: Optional[Hook] = None,
        on_next_game: Optional[Hook] = None,
        clip_factory: Optional[ClipFactory] = None,
        rng: Optional[random.Random] = None,
        logger: Optional[Any] = None,
    ) -> None:
        self.config = config
        self._ledger = ledger
        self._router = router
        self.point_system_enabled = bool(point_system_enabled)
        self.point_value = int(point_value)
        self._machine_factory = machine_factory
        self._on_rules_shown = on_rules_shown
        self._on_game_finished = on_game_finished
        self._on_next_game = on_next_game
        self._clip_factory = clip_factory
        self._rng = rng
        self._logger = logger or _logger

        self.phase = ShowPhase.LANDING
        self.machine: Optional[PlayMachine] = None
        self.selected: dict[Team, bool] = {Team.TEAM1: False, Team.TEAM2: False}
        self._lease: Optional[HandlerLease] = None
        self._play_generation = 0
        self._take_input()

    # -------------------- Input ownership --------------------

    def _take_input(self) -> None:
        self._lease = self._router.subscribe(f"controller:{self.phase.value}", self._on_intent)

    def _on_intent(self, intent: Intent) -> None:
        if intent is Intent.FORWARD:
            self.advance()
        elif intent is Intent.BACKWARD:
            self.retreat()

    def guarded(self, fn: Callable[..., Any]) -> Callable[..., Any]:
        """Wrap a deferred callback so it no-ops once this phase loses the router."""
        if self._lease is None:
            return lambda *args, **kwargs: None
        return self._lease.guard(fn)

    def timer_callback(self) -> Optional[Callable[[], Any]]:
        """Countdown expiry for the running machine, bound to the current play lease."""
        if self.phase is not ShowPhase.PLAY or self.machine is None:
            return None
        expire = getattr(self.machine, "timer_expired", None)
        return self.guarded(expire) if expire is not None else None

    def detach(self) -> None:
        """Give up the router slot and tear down any running machine."""
        if self.machine is not None:
            self.machine.teardown()
        self._router.release(self._lease)
        self._lease = None

    # -------------------- Transitions --------------------

    def advance(self) -> None:
        """Forward intent."""
        if self.phase is ShowPhase.LANDING:
            self._set_phase(ShowPhase.RULES)
            self._take_input()
            self._fire("on_rules_shown", self._on_rules_shown)
        elif self.phase is ShowPhase.RULES:
            self._enter_play()
        elif self.phase is ShowPhase.PLAY:
            if self.machine is not None:
                self.machine.forward()
        elif self.phase is ShowPhase.TRANSITION:
            self._fire("on_next_game", self._on_next_game)
        # Forward intents in SCORING are ignored.

    def retreat(self) -> None:
        """Backward intent; only meaningful during PLAY."""
        if self.phase is ShowPhase.PLAY and self.machine is not None:
            self.machine.backward()

    def _enter_play(self) -> None:
        self._play_generation += 1
        generation = self._play_generation
        self._set_phase(ShowPhase.PLAY)
        self.machine = self._machine_factory(
            self.config,
            lambda: self._complete_from(generation),
            ledger=self._ledger,
            clip_factory=self._clip_factory,
            rng=self._rng,
            logger=self._logger,
        )
        self._lease = self._router.subscribe(f"play:{self.config.type}", self.machine.on_intent)

    def _complete_from(self, generation: int) -> None:
        if generation != self._play_generation:
            self._logger.debug("[CONTROLLER] Ignoring completion from a stale machine")
            return
        self.complete()

    def complete(self) -> None:
        """Called when the active play machine resolved its last question."""
        if self.phase is not ShowPhase.PLAY:
            self._logger.debug(f"[CONTROLLER] complete() ignored in {self.phase.value}")
            return
        if self.machine is not None:
            self.machine.teardown()

        needs_scoring = self.point_system_enabled or type(self.config).requires_scoring
        self._set_phase(ShowPhase.SCORING if needs_scoring else ShowPhase.TRANSITION)
        self._take_input()
        self._fire("on_game_finished", self._on_game_finished)

    # -------------------- Scoring --------------------

    def toggle_winner(self, team: Team | str) -> bool:
        if self.phase is not ShowPhase.SCORING:
            return False
        team = Team.from_value(team)
        self.selected[team] = not self.selected[team]
        return self.selected[team]

    def commit_scoring(self) -> bool:
        """Award ``point_value`` to each selected team and move on.

        Returns:
            False (staying in SCORING) when no team is selected.
        """
        if self.phase is not ShowPhase.SCORING:
            return False
        if not any(self.selected.values()):
            self._logger.info("[CONTROLLER] Commit refused: no team selected")
            return False
        for team, chosen in self.selected.items():
            if chosen:
                self._ledger.award_points(team, self.point_value)
        self._set_phase(ShowPhase.TRANSITION)
        self._take_input()
        return True

    # -------------------- Helpers --------------------

    def _set_phase(self, phase: ShowPhase) -> None:
        self._logger.info(f"[CONTROLLER] {self.phase.value} -> {phase.value}")
        self.phase = phase

    def _fire(self, name: str, hook: Optional[Hook]) -> None:
        if hook is None:
            return
        try:
            hook()
        except Exception as exc:
            self._logger.error(f"[CONTROLLER] Hook {name} failed: {exc}")

    def rules(self) -> list[str]:
        rules = self.config.rules_or_default()
        total = self.config.total_questions
        if total > 0:
            rules.append(f"Es gibt insgesamt {total} Fragen.")
        return rules

    def view(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "phase": self.phase.value,
            "title": self.config.title,
            "gameType": self.config.type,
        }
        if self.phase is ShowPhase.RULES:
            payload["rules"] = self.rules()
        elif self.phase is ShowPhase.PLAY and self.machine is not None:
            payload["play"] = self.machine.view()
        elif self.phase is ShowPhase.SCORING:
            payload["scoring"] = build_scoring_view(self.selected, self.point_value)
        return payload
