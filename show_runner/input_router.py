"""Input routing.

Normalizes raw keyboard/pointer event payloads into the two abstract intents
(forward / backward) and delivers them to exactly one subscribed handler.

Event payloads are plain dicts (or their JSON encoding)::

    {"type": "keydown", "key": "ArrowRight", "repeat": false}
    {"type": "click", "path": [{"tag": "span"}, {"tag": "button"}]}

For clicks, ``path`` lists the target element first followed by its
ancestors; ``target`` may be given instead for a single element.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Iterable, Optional, Sequence

from .models.state import Intent

_logger = logging.getLogger("input_router")

IntentHandler = Callable[[Intent], None]

INTERACTIVE_TAGS = {"button", "a", "input", "textarea", "select", "img"}
INTERACTIVE_ROLES = {"button", "link"}
MUSIC_WIDGET_CLASS = "music-controls"
IMAGE_VIEWER_ID = "imageLightbox"


def parse_event_json(raw: str) -> Optional[dict[str, Any]]:
    """Parse a JSON encoded input event into a dict."""
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return None
    return data if isinstance(data, dict) else None


def _click_path(event: dict[str, Any]) -> list[dict[str, Any]]:
    path = event.get("path")
    if isinstance(path, list):
        return [el for el in path if isinstance(el, dict)]
    target = event.get("target")
    if isinstance(target, dict):
        return [target]
    return []


def _classes(element: dict[str, Any]) -> set[str]:
    raw = element.get("classes", element.get("className", []))
    if isinstance(raw, str):
        return set(raw.split())
    if isinstance(raw, Iterable):
        return {str(c) for c in raw}
    return set()


def is_interactive_element(element: dict[str, Any]) -> bool:
    """True for elements that consume their own clicks."""
    tag = str(element.get("tag") or "").lower()
    if tag in INTERACTIVE_TAGS:
        return True
    if str(element.get("role") or "").lower() in INTERACTIVE_ROLES:
        return True
    if element.get("id") == IMAGE_VIEWER_ID:
        return True
    return MUSIC_WIDGET_CLASS in _classes(element)


def is_interactive_click(event: dict[str, Any]) -> bool:
    """True when the click target is, or is inside, an interactive element."""
    return any(is_interactive_element(el) for el in _click_path(event))


class HandlerLease:
    """Ownership of the router's single handler slot.

    A lease is revoked the moment another handler subscribes. Callbacks wrapped
    with :meth:`guard` become no-ops once revoked, so a timer scheduled by an
    exited phase can never act after the swap.
    """

    def __init__(self, owner: str, handler: IntentHandler) -> None:
        self.owner = owner
        self._handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def revoke(self) -> None:
        self._active = False

    def deliver(self, intent: Intent) -> bool:
        if not self._active:
            return False
        self._handler(intent)
        return True

    def guard(self, fn: Callable[..., Any]) -> Callable[..., Any]:
        def guarded(*args: Any, **kwargs: Any) -> Any:
            if not self._active:
                _logger.debug(f"[ROUTER] Dropped stale callback from {self.owner}")
                return None
            return fn(*args, **kwargs)

        return guarded


class InputRouter:
    """Translate input events to intents and hand them to the active owner."""

    def __init__(
        self,
        forward_keys: Sequence[str] = ("ArrowRight",),
        backward_keys: Sequence[str] = ("ArrowLeft",),
        debounce_sec: float = 0.1,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[Any] = None,
    ) -> None:
        self._forward_keys = set(forward_keys)
        self._backward_keys = set(backward_keys)
        self._debounce_sec = max(0.0, float(debounce_sec))
        self._clock = clock
        self._logger = logger or _logger

        self._lease: Optional[HandlerLease] = None
        self._viewer_open = False
        self._last_delivered: dict[Intent, float] = {}

    # -------------------- Ownership --------------------

    @property
    def owner(self) -> Optional[str]:
        return self._lease.owner if self._lease is not None else None

    def subscribe(self, owner: str, handler: IntentHandler) -> HandlerLease:
        """Make ``handler`` the sole intent receiver, revoking the previous one."""
        if self._lease is not None:
            self._lease.revoke()
        self._lease = HandlerLease(owner, handler)
        self._logger.debug(f"[ROUTER] Handler -> {owner}")
        return self._lease

    def release(self, lease: Optional[HandlerLease]) -> None:
        """Drop ``lease`` if it is still the current one."""
        if lease is None:
            return
        lease.revoke()
        if self._lease is lease:
            self._lease = None
            self._logger.debug(f"[ROUTER] Handler released by {lease.owner}")

    # -------------------- Image viewer --------------------

    @property
    def viewer_open(self) -> bool:
        return self._viewer_open

    def open_viewer(self) -> None:
        self._viewer_open = True

    def close_viewer(self) -> None:
        self._viewer_open = False

    # -------------------- Translation --------------------

    def translate(self, event: dict[str, Any]) -> Optional[Intent]:
        """Map an event to an intent, or None when it is suppressed."""
        if self._viewer_open:
            return None

        kind = str(event.get("type") or "").lower()
        if kind in ("keydown", "key"):
            if event.get("repeat"):
                return None
            key = str(event.get("key") or "")
            if key in self._forward_keys:
                return Intent.FORWARD
            if key in self._backward_keys:
                return Intent.BACKWARD
            return None

        if kind == "click":
            if is_interactive_click(event):
                return None
            return Intent.FORWARD

        return None

    def route(self, event: dict[str, Any] | str) -> Optional[Intent]:
        """Translate and deliver one raw event.

        Returns:
            The delivered intent, or None if suppressed, debounced or unowned.
        """
        if isinstance(event, str):
            parsed = parse_event_json(event)
            if parsed is None:
                return None
            event = parsed
        intent = self.translate(event)
        if intent is None:
            return None
        return intent if self.dispatch(intent) else None

    def dispatch(self, intent: Intent) -> bool:
        """Deliver an already-translated intent, applying the debounce guard."""
        lease = self._lease
        if lease is None or not lease.active:
            return False

        now = self._clock()
        last = self._last_delivered.get(intent)
        if last is not None and now - last < self._debounce_sec:
            self._logger.debug(f"[ROUTER] Debounced {intent.value}")
            return False

        self._last_delivered[intent] = now
        return lease.deliver(intent)
