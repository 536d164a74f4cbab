"""Show-wide settings models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


DEFAULT_GLOBAL_RULES: list[str] = [
    "Es gibt mehrere Spiele.",
    "Bei jedem Spiel wird am Ende entschieden welches Team das Spiel gewonnen hat.",
    "Das erste Spiel ist 1 Punkt wert, das zweite 2 Punkte, etc.",
    "Das Team mit den meisten Punkten gewinnt am Ende.",
]


class Settings(BaseModel):
    """Settings fetched once at session start."""

    point_system_enabled: bool = Field(default=True, alias="pointSystemEnabled")
    team_randomization_enabled: bool = Field(default=True, alias="teamRandomizationEnabled")
    global_rules: list[str] = Field(default_factory=lambda: list(DEFAULT_GLOBAL_RULES), alias="globalRules")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create from dict; anything but an explicit ``false`` enables a flag."""
        rules = data.get("globalRules", data.get("global_rules"))
        return cls(
            point_system_enabled=data.get("pointSystemEnabled", data.get("point_system_enabled")) is not False,
            team_randomization_enabled=data.get(
                "teamRandomizationEnabled", data.get("team_randomization_enabled")
            ) is not False,
            global_rules=list(rules) if rules else list(DEFAULT_GLOBAL_RULES),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "pointSystemEnabled": self.point_system_enabled,
            "teamRandomizationEnabled": self.team_randomization_enabled,
            "globalRules": list(self.global_rules),
        }


class GameshowConfig(BaseModel):
    """A named show: an ordered list of game references."""

    name: str = ""
    game_order: list[str] = Field(default_factory=list, alias="gameOrder")

    model_config = {"populate_by_name": True}


class GameData(BaseModel):
    """Everything the session needs to run the game at one index."""

    game_id: str = Field(alias="gameId")
    config: Any
    current_index: int = Field(alias="currentIndex")
    total_games: int = Field(alias="totalGames")
    point_system_enabled: bool = Field(default=True, alias="pointSystemEnabled")

    model_config = {"populate_by_name": True, "arbitrary_types_allowed": True}

    @property
    def is_last(self) -> bool:
        return self.current_index + 1 >= self.total_games

    def to_payload(self) -> dict[str, Any]:
        config = self.config
        if isinstance(config, BaseModel):
            config = config.model_dump(by_alias=True, exclude_none=True)
        return {
            "gameId": self.game_id,
            "config": config,
            "currentIndex": self.current_index,
            "totalGames": self.total_games,
            "pointSystemEnabled": self.point_system_enabled,
        }
