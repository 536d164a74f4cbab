"""Show content loaders.

Load the show configuration from YAML or JSON files under a content root::

    <root>/config.yaml | config.json
    <root>/games/<name>.yaml | <name>.json      (gameshow layout only)
    <root>/audio-guess/<folder>/short.wav
    <root>/image-guess/<file>.png

Two config layouts are understood. The flat layout carries ``gameOrder`` and
an inline ``games`` mapping. The gameshow layout names an ``activeGameshow``
among ``gameshows`` and resolves each ``gameOrder`` entry to a file in
``games/``; ``name/instance`` selects one instance of a multi-instance file.
"""

from __future__ import annotations

import json
import os
import random
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import yaml
from pydantic import ValidationError

from ..errors import ConfigLoadError, GameNotFoundError
from ..models.settings import GameshowConfig
from .questions import pin_example

EXAMPLE_PREFIX = "Beispiel_"
AUDIO_DIR = "audio-guess"
IMAGE_DIR = "image-guess"
AUDIO_EXTENSIONS = (".mp3", ".m4a", ".wav")
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif")


def _load_json_file(filepath: str) -> Optional[Any]:
    """Load a JSON file safely."""
    if not os.path.isfile(filepath):
        return None
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError):
        return None


def _load_yaml_file(filepath: str) -> Optional[Any]:
    """Load a YAML file safely."""
    if not os.path.isfile(filepath):
        return None
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except (yaml.YAMLError, OSError):
        return None


def _load_config_file(base_path: str) -> Optional[Any]:
    """Load a config file, trying .yaml first then .json."""
    data = _load_yaml_file(base_path + ".yaml")
    if data is not None:
        return data
    return _load_json_file(base_path + ".json")


def load_app_config(root: str) -> Dict[str, Any]:
    """Load ``config.yaml``/``config.json`` from the content root.

    Raises:
        ConfigLoadError: if neither file exists or parses to a mapping.
    """
    data = _load_config_file(os.path.join(root, "config"))
    if not isinstance(data, dict):
        raise ConfigLoadError(f"Failed to load config from {root}")
    return data


def resolve_game_order(app_config: Dict[str, Any]) -> List[str]:
    """Ordered game ids for either config layout."""
    if "gameshows" not in app_config:
        return [str(g) for g in app_config.get("gameOrder") or []]

    active = app_config.get("activeGameshow")
    shows = app_config.get("gameshows") or {}
    if active not in shows:
        raise ConfigLoadError(f"Active gameshow {active!r} not found")
    try:
        show = GameshowConfig.model_validate(shows[active])
    except ValidationError as exc:
        raise ConfigLoadError(f"Invalid gameshow {active!r}: {exc}") from exc
    return list(show.game_order)


def _parse_game_file(filepath: str) -> Any:
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            if filepath.endswith(".json"):
                return json.load(f)
            return yaml.safe_load(f)
    except (yaml.YAMLError, json.JSONDecodeError, OSError) as exc:
        raise ConfigLoadError(f"Failed to parse {filepath}: {exc}") from exc


def load_game_file(root: str, name: str) -> Optional[Dict[str, Any]]:
    """Load one game file from ``games/`` by its stem.

    Returns None when neither ``<name>.yaml`` nor ``<name>.json`` exists.

    Raises:
        ConfigLoadError: if the file exists but does not parse to a mapping.
    """
    base = os.path.join(root, "games", name)
    for ext in (".yaml", ".json"):
        filepath = base + ext
        if not os.path.isfile(filepath):
            continue
        data = _parse_game_file(filepath)
        if not isinstance(data, dict):
            raise ConfigLoadError(f"Game file games/{name}{ext} is not a mapping")
        return data
    return None


def _merge_instance(game_file: Dict[str, Any], instance_name: Optional[str], game_id: str) -> Dict[str, Any]:
    instances = game_file.get("instances") or {}
    if instance_name is None:
        if len(instances) != 1:
            raise ConfigLoadError(f"Game {game_id!r} has several instances; pick one as name/instance")
        instance_name = next(iter(instances))
    if instance_name not in instances:
        raise GameNotFoundError(f"Instance {instance_name!r} not found for game {game_id!r}")

    base = {k: v for k, v in game_file.items() if k != "instances"}
    base.update(instances[instance_name] or {})
    return base


def resolve_game_definition(root: str, app_config: Dict[str, Any], game_id: str) -> Dict[str, Any]:
    """Raw config dict for ``game_id`` in either layout.

    Raises:
        ConfigLoadError: if the game (or its instance) is not defined.
    """
    if "gameshows" not in app_config:
        game = (app_config.get("games") or {}).get(game_id)
        if not isinstance(game, dict):
            raise GameNotFoundError(f"Game configuration not found: {game_id}")
        return dict(game)

    name, _, instance = game_id.partition("/")
    game_file = load_game_file(root, name)
    if game_file is None:
        raise GameNotFoundError(f"Game file not found: games/{name}")
    if "instances" in game_file:
        return _merge_instance(game_file, instance or None, game_id)
    return dict(game_file)


def _pick_audio_file(files: List[str]) -> Optional[str]:
    if "short.wav" in files:
        return "short.wav"
    for filename in sorted(files):
        if filename.lower().endswith(AUDIO_EXTENSIONS) and not filename.startswith("."):
            return filename
    return None


def scan_audio_questions(root: str, rng: Optional[random.Random] = None) -> Optional[List[Dict[str, Any]]]:
    """Build audio-guess questions from ``audio-guess/<folder>/``.

    Returns None when the media directory is missing.
    """
    music_dir = os.path.join(root, AUDIO_DIR)
    if not os.path.isdir(music_dir):
        return None

    questions: List[Dict[str, Any]] = []
    for folder in sorted(os.listdir(music_dir)):
        folder_path = os.path.join(music_dir, folder)
        if not os.path.isdir(folder_path):
            continue
        audio_file = _pick_audio_file(os.listdir(folder_path))
        if audio_file is None:
            continue
        questions.append({
            "folder": folder,
            "audioFile": audio_file,
            "answer": folder[len(EXAMPLE_PREFIX):] if folder.startswith(EXAMPLE_PREFIX) else folder,
            "isExample": folder.startswith(EXAMPLE_PREFIX),
        })
    return pin_example(questions, lambda q: q["isExample"], rng)


def scan_image_questions(root: str, rng: Optional[random.Random] = None) -> Optional[List[Dict[str, Any]]]:
    """Build image-game questions from the files in ``image-guess/``."""
    images_dir = os.path.join(root, IMAGE_DIR)
    if not os.path.isdir(images_dir):
        return None

    questions: List[Dict[str, Any]] = []
    for filename in sorted(os.listdir(images_dir)):
        if not filename.lower().endswith(IMAGE_EXTENSIONS):
            continue
        stem = os.path.splitext(filename)[0]
        questions.append({
            "image": f"/{IMAGE_DIR}/{quote(filename)}",
            "answer": stem[len(EXAMPLE_PREFIX):] if stem.startswith(EXAMPLE_PREFIX) else stem,
            "isExample": filename.startswith(EXAMPLE_PREFIX),
        })
    return pin_example(questions, lambda q: q["isExample"], rng)


def inject_media_questions(
    root: str,
    game: Dict[str, Any],
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    """Replace audio/image game questions with what the media folders hold.

    The configured questions are kept when the media directory is missing.
    """
    game_type = game.get("type")
    if game_type == "audio-guess":
        questions = scan_audio_questions(root, rng)
    elif game_type == "image-game":
        questions = scan_image_questions(root, rng)
    else:
        return game
    if questions is None:
        return game
    return {**game, "questions": questions}


def list_background_music(root: str) -> List[str]:
    """Audio files available as background music."""
    music_dir = os.path.join(root, "background-music")
    if not os.path.isdir(music_dir):
        return []
    return sorted(
        f for f in os.listdir(music_dir)
        if f.lower().endswith(AUDIO_EXTENSIONS + (".ogg", ".opus")) and not f.startswith(".")
    )
