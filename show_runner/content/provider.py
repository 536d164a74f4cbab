"""Local game configuration provider."""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional

from ..errors import ConfigLoadError, GameNotFoundError
from ..models.game import parse_game_config
from ..models.settings import GameData, Settings
from .loaders import (
    inject_media_questions,
    list_background_music,
    load_app_config,
    resolve_game_definition,
    resolve_game_order,
)

_logger = logging.getLogger("provider")


class LocalConfigProvider:
    """Serve settings and per-index game configs from a content root.

    The config file is re-read on every call so edits show up without a
    restart, matching how the HTTP endpoints behave.
    """

    def __init__(
        self,
        root: str,
        rng: Optional[random.Random] = None,
        logger: Optional[Any] = None,
    ) -> None:
        self.root = root
        self._rng = rng
        self._logger = logger or _logger

    def get_settings(self) -> Settings:
        """Show settings; defaults when the config cannot be read."""
        try:
            return Settings.from_dict(load_app_config(self.root))
        except ConfigLoadError as exc:
            self._logger.warning(f"[PROVIDER] Using default settings: {exc}")
            return Settings()

    def get_game_order(self) -> Dict[str, Any]:
        app_config = load_app_config(self.root)
        order = resolve_game_order(app_config)
        settings = Settings.from_dict(app_config)
        return {
            "gameOrder": order,
            "totalGames": len(order),
            "pointSystemEnabled": settings.point_system_enabled,
            "teamRandomizationEnabled": settings.team_randomization_enabled,
        }

    def get_game_config(self, index: int) -> GameData:
        """Load and validate the game at ``index``.

        Raises:
            ConfigLoadError: if the index is out of range or the config is invalid.
        """
        app_config = load_app_config(self.root)
        order = resolve_game_order(app_config)
        if not isinstance(index, int) or index < 0 or index >= len(order):
            raise GameNotFoundError(f"Game not found at index {index}")

        game_id = order[index]
        raw = resolve_game_definition(self.root, app_config, game_id)
        raw = inject_media_questions(self.root, raw, self._rng)
        config = parse_game_config(raw)
        self._logger.info(f"[PROVIDER] Loaded game {index + 1}/{len(order)}: {game_id} ({config.type})")

        return GameData(
            game_id=game_id,
            config=config,
            current_index=index,
            total_games=len(order),
            point_system_enabled=Settings.from_dict(app_config).point_system_enabled,
        )

    def background_music(self) -> List[str]:
        return list_background_music(self.root)
