"""HTTP config provider.

Serves the show settings, game order and per-index game configs over the
same loaders the local runner uses, plus the media folders the game configs
point at.
"""

from __future__ import annotations

import logging
import os

from flask import Flask, jsonify, send_from_directory

from .config import load_runner_config
from .content.loaders import AUDIO_DIR, IMAGE_DIR
from .content.provider import LocalConfigProvider
from .errors import ConfigLoadError, GameNotFoundError

_logger = logging.getLogger("server")


def create_app(provider: LocalConfigProvider) -> Flask:
    app = Flask(__name__)

    @app.get("/healthz")
    def healthz():
        return jsonify({"ok": True})

    @app.get("/api/settings")
    def api_settings():
        return jsonify(provider.get_settings().to_payload())

    @app.get("/api/game-order")
    def api_game_order():
        try:
            return jsonify(provider.get_game_order())
        except ConfigLoadError as exc:
            _logger.error(f"[SERVER] Failed to load game order: {exc}")
            return jsonify({"error": "Failed to load config"}), 500

    @app.get("/api/game/<int:index>")
    def api_game(index: int):
        try:
            game = provider.get_game_config(index)
        except GameNotFoundError as exc:
            return jsonify({"error": str(exc)}), 404
        except ConfigLoadError as exc:
            _logger.error(f"[SERVER] Failed to load game {index}: {exc}")
            return jsonify({"error": str(exc)}), 500
        return jsonify(game.to_payload())

    @app.get("/api/background-music")
    def api_background_music():
        return jsonify(provider.background_music())

    @app.get(f"/{AUDIO_DIR}/<path:filename>")
    def audio_file(filename: str):
        return send_from_directory(os.path.abspath(os.path.join(provider.root, AUDIO_DIR)), filename)

    @app.get(f"/{IMAGE_DIR}/<path:filename>")
    def image_file(filename: str):
        return send_from_directory(os.path.abspath(os.path.join(provider.root, IMAGE_DIR)), filename)

    return app


def main(args=None) -> None:
    logging.basicConfig(level=logging.INFO)
    config = load_runner_config(os.environ.get("SHOW_RUNNER_CONFIG"))
    provider = LocalConfigProvider(config.content_root)

    app = create_app(provider)
    app.run(host=config.host, port=config.port, debug=False, use_reloader=False)


if __name__ == "__main__":
    main()
