"""Runner configuration.

Operational settings (input keys, debounce, fades, store location) are read
from an optional YAML file and can be overridden with ``SHOW_RUNNER_*``
environment variables. Show content lives separately under ``content_root``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .errors import ConfigLoadError

ENV_PREFIX = "SHOW_RUNNER_"


def _as_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _as_keys(value: Any, default: List[str]) -> List[str]:
    if value is None:
        return list(default)
    if isinstance(value, str):
        return [k.strip() for k in value.split(",") if k.strip()]
    return [str(k) for k in value]


@dataclass
class RunnerConfig:
    """Settings for one runner process."""

    content_root: str = "."
    store_path: str = "show_state.json"
    forward_keys: List[str] = field(default_factory=lambda: ["ArrowRight"])
    backward_keys: List[str] = field(default_factory=lambda: ["ArrowLeft"])
    debounce_sec: float = 0.1
    fade_ms: int = 2000
    fade_steps: int = 20
    position_bonus: bool = False
    host: str = "0.0.0.0"
    port: int = 8080

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RunnerConfig:
        """Create from a parsed YAML mapping (camelCase or snake_case keys)."""
        def pick(snake: str, camel: str, default: Any) -> Any:
            value = data.get(snake, data.get(camel))
            return default if value is None else value

        defaults = cls()
        return cls(
            content_root=str(pick("content_root", "contentRoot", defaults.content_root)),
            store_path=str(pick("store_path", "storePath", defaults.store_path)),
            forward_keys=_as_keys(pick("forward_keys", "forwardKeys", None), defaults.forward_keys),
            backward_keys=_as_keys(pick("backward_keys", "backwardKeys", None), defaults.backward_keys),
            debounce_sec=float(pick("debounce_sec", "debounceSec", defaults.debounce_sec)),
            fade_ms=int(pick("fade_ms", "fadeMs", defaults.fade_ms)),
            fade_steps=int(pick("fade_steps", "fadeSteps", defaults.fade_steps)),
            position_bonus=_as_bool(pick("position_bonus", "positionBonus", None), defaults.position_bonus),
            host=str(pick("host", "host", defaults.host)),
            port=int(pick("port", "port", defaults.port)),
        )

    def with_env(self, environ: Optional[Mapping[str, str]] = None) -> RunnerConfig:
        """Return a copy with ``SHOW_RUNNER_*`` overrides applied."""
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name)
            return value if value not in (None, "") else None

        overrides: Dict[str, Any] = {}
        for name, attr in (("CONTENT_ROOT", "content_root"), ("STORE_PATH", "store_path"), ("HOST", "host")):
            if get(name) is not None:
                overrides[attr] = get(name)
        if get("FORWARD_KEYS") is not None:
            overrides["forward_keys"] = _as_keys(get("FORWARD_KEYS"), self.forward_keys)
        if get("BACKWARD_KEYS") is not None:
            overrides["backward_keys"] = _as_keys(get("BACKWARD_KEYS"), self.backward_keys)
        if get("DEBOUNCE_SEC") is not None:
            overrides["debounce_sec"] = float(get("DEBOUNCE_SEC"))
        if get("FADE_MS") is not None:
            overrides["fade_ms"] = int(get("FADE_MS"))
        if get("POSITION_BONUS") is not None:
            overrides["position_bonus"] = _as_bool(get("POSITION_BONUS"))
        if get("PORT") is not None:
            overrides["port"] = int(get("PORT"))

        data = dict(self.__dict__)
        data.update(overrides)
        return RunnerConfig(**data)


def load_runner_config(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> RunnerConfig:
    """Load a runner config file (if given) and apply env overrides.

    Raises:
        ConfigLoadError: if ``path`` is given but unreadable or not a mapping.
    """
    data: Dict[str, Any] = {}
    if path:
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigLoadError(f"Failed to read runner config {path}: {exc}") from exc
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigLoadError(f"Runner config {path} must be a mapping")
        data = loaded or {}
    return RunnerConfig.from_dict(data).with_env(environ)
