"""Background-music crossfade and per-question audio clips.

Only the interface the phase controller and the audio-guess machine need is
modelled here; real playback is delegated to whatever backend implements the
``MusicPlayer`` / ``AudioClip`` protocols.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from .errors import MediaPlaybackError

_logger = logging.getLogger("audio")


class MusicPlayer(Protocol):
    """Background-music player controlled by the crossfade engine."""

    base_volume: float

    def set_volume(self, volume: float) -> None:
        ...

    def pause(self) -> None:
        ...

    def resume(self) -> None:
        ...

    def is_playing(self) -> bool:
        ...


class AudioClip(Protocol):
    """A single question clip owned by one play machine."""

    source: str

    def play(self) -> None:
        ...

    def pause(self) -> None:
        ...

    def detach(self) -> None:
        ...


ClipFactory = Callable[[str], AudioClip]


@dataclass
class SilentMusicPlayer:
    """Player without a sound device; tracks volume and play state only."""

    base_volume: float = 0.5
    volume: float = 0.5
    playing: bool = False

    def set_volume(self, volume: float) -> None:
        self.volume = max(0.0, min(1.0, float(volume)))

    def pause(self) -> None:
        self.playing = False

    def resume(self) -> None:
        self.playing = True

    def is_playing(self) -> bool:
        return self.playing


class SilentClip:
    """Clip that records what would have been played."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.playing = False
        self.detached = False

    def play(self) -> None:
        if self.detached:
            raise MediaPlaybackError(f"Clip already detached: {self.source}")
        self.playing = True
        _logger.debug(f"[AUDIO] play {self.source}")

    def pause(self) -> None:
        self.playing = False

    def detach(self) -> None:
        self.playing = False
        self.detached = True


def play_clip(clip: Optional[AudioClip], logger: Optional[Any] = None) -> bool:
    """Start a clip; playback failures are logged and swallowed."""
    if clip is None:
        return False
    try:
        clip.play()
        return True
    except MediaPlaybackError as exc:
        (logger or _logger).warning(f"[AUDIO] Playback failed for {clip.source}: {exc}")
        return False


def release_clip(clip: Optional[AudioClip]) -> None:
    """Pause and detach a clip."""
    if clip is None:
        return
    clip.pause()
    clip.detach()


class CrossfadeEngine:
    """Timer-driven volume ramps over a background player.

    Each fade runs as a chain of ``threading.Timer`` steps and returns
    immediately. Starting a new fade supersedes any ramp still running.
    """

    def __init__(
        self,
        player: MusicPlayer,
        steps: int = 20,
        logger: Optional[Any] = None,
    ) -> None:
        self._player = player
        self._steps = max(1, int(steps))
        self._logger = logger
        self._lock = threading.Lock()
        self._generation = 0
        self._timer: Optional[threading.Timer] = None

    def fade_out(self, duration_ms: int = 2000) -> None:
        """Ramp volume to 0, then pause and restore the base volume."""
        start = self._player.base_volume

        def apply(progress: float) -> None:
            self._player.set_volume(start * (1.0 - progress))

        def finish() -> None:
            self._player.pause()
            self._player.set_volume(self._player.base_volume)

        self._start_ramp("fade_out", duration_ms, apply, finish)

    def fade_in(self, duration_ms: int = 2000) -> None:
        """Resume playback at volume 0 and ramp up to the base volume."""
        self._player.set_volume(0.0)
        if not self._player.is_playing():
            self._player.resume()
        target = self._player.base_volume

        def apply(progress: float) -> None:
            self._player.set_volume(target * progress)

        def finish() -> None:
            self._player.set_volume(target)

        self._start_ramp("fade_in", duration_ms, apply, finish)

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _start_ramp(
        self,
        name: str,
        duration_ms: int,
        apply: Callable[[float], None],
        finish: Callable[[], None],
    ) -> None:
        self.cancel()
        with self._lock:
            generation = self._generation
        step_sec = max(0.0, float(duration_ms)) / 1000.0 / self._steps
        if self._logger:
            self._logger.debug(f"[AUDIO] {name} over {duration_ms}ms ({self._steps} steps)")
        self._schedule(generation, 1, step_sec, apply, finish)

    def _schedule(
        self,
        generation: int,
        step: int,
        step_sec: float,
        apply: Callable[[float], None],
        finish: Callable[[], None],
    ) -> None:
        timer = threading.Timer(
            step_sec,
            self._on_step,
            args=(generation, step, step_sec, apply, finish),
        )
        timer.daemon = True
        with self._lock:
            if generation != self._generation:
                return
            self._timer = timer
        timer.start()

    def _on_step(
        self,
        generation: int,
        step: int,
        step_sec: float,
        apply: Callable[[float], None],
        finish: Callable[[], None],
    ) -> None:
        with self._lock:
            if generation != self._generation:
                return
        try:
            apply(step / self._steps)
            if step >= self._steps:
                finish()
                return
        except Exception as exc:
            if self._logger:
                self._logger.error(f"[AUDIO] Fade step failed: {exc}")
            return
        self._schedule(generation, step + 1, step_sec, apply, finish)
