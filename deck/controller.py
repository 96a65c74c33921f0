"""
Slide navigation controller.

Owns the PresentationState and every transition between slides. Content
arrives through a Fetcher, the display is updated through a SlideView, and
input arrives as events from a PageHost. show_slide is the single mutation
point for the current position; every other navigation path routes
through it.

Lifecycle:
    controller = NavigationController(view, fetcher, host)
    await controller.start()      # load_all() then initialize_navigation()
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from deck.config import HASH_PREFIX, SWIPE_THRESHOLD
from deck.document import SlideView
from deck.fetcher import Fetcher
from deck.host import KeyEvent, PageHost, TouchEvent
from deck.loader import load_config, load_fragments
from deck.state import PresentationState

log = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Error loading presentation. Please refresh the page."

_HASH_RE = re.compile(rf"{re.escape(HASH_PREFIX)}(\d+)")

_DIGITS = frozenset("0123456789")


def format_hash(index: int) -> str:
    return f"{HASH_PREFIX}{index}"


def parse_hash(value: str) -> Optional[int]:
    """Return the slide index encoded in a URL fragment, if any."""
    match = _HASH_RE.search(value or "")
    return int(match.group(1)) if match else None


class NavigationController:
    """Load slides, track the current one, and keep view and URL in sync."""

    def __init__(self, view: SlideView, fetcher: Fetcher,
                 host: Optional[PageHost] = None) -> None:
        self.view = view
        self.fetcher = fetcher
        self.host = host or PageHost()
        self.state = PresentationState()
        self._navigation_ready = False
        self._touch_start_x = 0.0

        self.host.add_event_listener("beforeprint", self._on_before_print)
        self.host.add_event_listener("afterprint", self._on_after_print)

    # ── Read-only accessors ──────────────────────────────────────────

    @property
    def loaded(self) -> bool:
        return self.state.loaded

    @property
    def total_slides(self) -> int:
        return self.state.total

    @property
    def current_index(self) -> Optional[int]:
        return self.state.current_index

    # ── Loading ──────────────────────────────────────────────────────

    async def start(self) -> None:
        await self.load_all()
        if self.state.loaded:
            self.initialize_navigation()

    async def load_all(self) -> None:
        """Fetch configuration and fragments, then insert them exactly once."""
        if self.state.loaded:
            log.debug("Slides already loaded, skipping")
            return

        config = await load_config(self.fetcher)
        fragments = await load_fragments(self.fetcher, config)

        try:
            self.view.hide_loading()
            self.view.insert_fragments(fragments)
            slides = self.view.slide_ids()
        except Exception:
            log.exception("Error loading slides")
            self.view.show_loading_error(LOAD_ERROR_MESSAGE)
            return

        self.state.slides = slides
        self.state.loaded = True
        log.info("Successfully loaded %d slides", self.state.total)

    # ── Navigation ───────────────────────────────────────────────────

    def show_slide(self, index: int) -> None:
        """Activate slide *index*; out-of-range requests are ignored."""
        if not self.state.is_valid_index(index):
            return
        try:
            self.view.set_active(index)
            self.state.current_index = index
            self._update_navigation()
            self.host.location_hash = format_hash(index)
        except Exception:
            log.exception("Failed to show slide %d", index)

    def next_slide(self) -> None:
        if self.state.current_index is not None:
            self.show_slide(self.state.current_index + 1)

    def prev_slide(self) -> None:
        if self.state.current_index is not None:
            self.show_slide(self.state.current_index - 1)

    def first_slide(self) -> None:
        self.show_slide(0)

    def last_slide(self) -> None:
        self.show_slide(self.state.total - 1)

    def _update_navigation(self) -> None:
        index = self.state.current_index
        total = self.state.total
        self.view.set_counters(index + 1, total)
        self.view.set_controls_enabled(
            prev_enabled=index > 0,
            next_enabled=index < total - 1,
        )
        self.view.set_control_targets(
            prev_index=index - 1 if index > 0 else None,
            next_index=index + 1 if index < total - 1 else None,
        )

    # ── Event wiring ─────────────────────────────────────────────────

    def initialize_navigation(self) -> None:
        """Wire keyboard, click, touch and hash-change input. Runs once."""
        if self._navigation_ready:
            log.debug("Navigation already initialized")
            return
        self._navigation_ready = True

        host = self.host
        host.add_event_listener("keydown", self._on_key)
        host.add_event_listener("click", lambda _e: self.next_slide(), target="next-btn")
        host.add_event_listener("click", lambda _e: self.prev_slide(), target="prev-btn")
        host.add_event_listener("touchstart", self._on_touch_start)
        host.add_event_listener("touchend", self._on_touch_end)
        host.add_event_listener("hashchange", self.handle_hash_change)

        self.check_initial_slide()
        host.dispatch("deckready", self.state)

    def check_initial_slide(self) -> None:
        index = parse_hash(self.host.location_hash)
        if index is not None and self.state.is_valid_index(index):
            self.show_slide(index)
            return
        self.show_slide(0)

    def _on_key(self, event: KeyEvent) -> None:
        if not self.state.loaded:
            return

        key = event.key
        if key in ("ArrowRight", " "):
            event.prevent_default()
            self.next_slide()
        elif key == "ArrowLeft":
            event.prevent_default()
            self.prev_slide()
        elif key == "Home":
            event.prevent_default()
            self.first_slide()
        elif key == "End":
            event.prevent_default()
            self.last_slide()
        elif key in ("f", "F"):
            self.toggle_fullscreen()
        elif len(key) == 1 and key in _DIGITS:
            slide_num = int(key)
            if slide_num < self.state.total:
                self.show_slide(slide_num)

    def toggle_fullscreen(self) -> None:
        if self.host.fullscreen:
            self.host.exit_fullscreen()
        else:
            self.host.request_fullscreen()

    def _on_touch_start(self, event: TouchEvent) -> None:
        self._touch_start_x = event.screen_x

    def _on_touch_end(self, event: TouchEvent) -> None:
        diff = self._touch_start_x - event.screen_x
        if abs(diff) <= SWIPE_THRESHOLD:
            return
        if diff > 0:
            self.next_slide()   # swiped left
        else:
            self.prev_slide()   # swiped right

    def handle_hash_change(self, new_hash: Optional[str] = None) -> None:
        index = parse_hash(self.host.location_hash if new_hash is None else new_hash)
        if index is None or not self.state.is_valid_index(index):
            return
        if index != self.state.current_index:
            self.show_slide(index)

    # ── Print lifecycle ──────────────────────────────────────────────

    def before_print(self) -> None:
        """Force every slide visible so a full-document print shows all of them."""
        log.info("Preparing for print...")
        self.state.printing = True
        self.view.set_print_mode(True)

    def after_print(self) -> None:
        log.info("Print complete")
        self.state.printing = False
        self.view.set_print_mode(False)
        if self.state.current_index is not None:
            self.show_slide(self.state.current_index)

    def _on_before_print(self, _event=None) -> None:
        self.before_print()

    def _on_after_print(self, _event=None) -> None:
        self.after_print()
