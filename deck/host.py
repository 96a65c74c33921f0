"""
Page host: the window-side surface the navigation controller listens to.

PageHost stands in for the browser window. It owns the URL fragment, a
small event dispatcher, fullscreen state and session storage. Handlers are
isolated from each other the way a browser isolates event listeners: an
exception in one is logged and the remaining listeners still run.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Optional

log = logging.getLogger(__name__)

Handler = Callable[[Any], None]


@dataclass
class KeyEvent:
    key: str
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


@dataclass
class TouchEvent:
    screen_x: float


def _normalize_hash(value: str) -> str:
    value = value or ""
    if not value or value == "#":
        return ""
    return value if value.startswith("#") else f"#{value}"


class PageHost:
    """Window stand-in: URL fragment, events, fullscreen and session storage."""

    def __init__(self, location_hash: str = "") -> None:
        self._hash = _normalize_hash(location_hash)
        self._listeners: dict[tuple[str, Optional[str]], list[Handler]] = defaultdict(list)
        self.fullscreen = False
        self.session_storage: dict[str, str] = {}

    # ── URL fragment ─────────────────────────────────────────────────

    @property
    def location_hash(self) -> str:
        """Current fragment including the leading '#', or '' when unset."""
        return self._hash

    @location_hash.setter
    def location_hash(self, value: str) -> None:
        new = _normalize_hash(value)
        if new == self._hash:
            return
        self._hash = new
        self.dispatch("hashchange", new)

    # ── Events ───────────────────────────────────────────────────────

    def add_event_listener(self, event_type: str, handler: Handler,
                           target: Optional[str] = None) -> None:
        self._listeners[(event_type, target)].append(handler)

    def remove_event_listener(self, event_type: str, handler: Handler,
                              target: Optional[str] = None) -> None:
        handlers = self._listeners.get((event_type, target), [])
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event_type: str, target: Optional[str] = None) -> int:
        return len(self._listeners.get((event_type, target), []))

    def dispatch(self, event_type: str, event: Any = None,
                 target: Optional[str] = None) -> None:
        for handler in list(self._listeners.get((event_type, target), [])):
            try:
                handler(event)
            except Exception:
                log.exception("Unhandled error in %s listener", event_type)

    # ── Input helpers ────────────────────────────────────────────────

    def press(self, key: str) -> KeyEvent:
        event = KeyEvent(key)
        self.dispatch("keydown", event)
        return event

    def click(self, element_id: str) -> None:
        self.dispatch("click", None, target=element_id)

    def swipe(self, start_x: float, end_x: float) -> None:
        self.dispatch("touchstart", TouchEvent(start_x))
        self.dispatch("touchend", TouchEvent(end_x))

    def print_document(self) -> None:
        """Fire the before/after print pair around an (instant) print job."""
        self.dispatch("beforeprint")
        self.dispatch("afterprint")

    # ── Fullscreen ───────────────────────────────────────────────────

    def request_fullscreen(self) -> None:
        self.fullscreen = True

    def exit_fullscreen(self) -> None:
        self.fullscreen = False
