"""
Optional presentation observers.

Neither observer is called by the controller. Each one attaches to a
PageHost and reacts to the "deckready" event fired after navigation is
initialized; detaching (or never attaching) disables it.

The viewer app attaches InstructionsBanner to every page it renders.
PresentationTimer is left to callers that present from a long-lived host.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from deck.config import INSTRUCTIONS_KEY
from deck.host import PageHost

log = logging.getLogger(__name__)

CONTROLS_HELP = [
    "→ or Space: Next slide",
    "←: Previous slide",
    "Home: First slide",
    "End: Last slide",
    "F: Toggle fullscreen",
    "0-9: Jump to slide",
    "Ctrl+P: Print to PDF",
]


class InstructionsBanner:
    """Log the keyboard controls once per browsing session."""

    def __init__(self, host: PageHost) -> None:
        self.host = host

    def attach(self) -> InstructionsBanner:
        self.host.add_event_listener("deckready", self._on_ready)
        return self

    def detach(self) -> None:
        self.host.remove_event_listener("deckready", self._on_ready)

    def _on_ready(self, _state=None) -> None:
        self.show()

    def show(self) -> bool:
        """Log the controls unless already shown. Returns True if shown."""
        if self.host.session_storage.get(INSTRUCTIONS_KEY):
            return False
        log.info("Presentation Controls:")
        for line in CONTROLS_HELP:
            log.info(line)
        self.host.session_storage[INSTRUCTIONS_KEY] = "true"
        return True


def format_elapsed(seconds: float) -> str:
    """Format a duration as M:SS."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


class PresentationTimer:
    """Log the elapsed presentation time once per interval on a daemon thread."""

    def __init__(self, interval: float = 1.0,
                 clock: Callable[[], float] = time.monotonic) -> None:
        self.interval = interval
        self._clock = clock
        self._start: Optional[float] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._host: Optional[PageHost] = None

    def attach(self, host: PageHost) -> PresentationTimer:
        self._host = host
        host.add_event_listener("deckready", self._on_ready)
        return self

    def detach(self) -> None:
        if self._host is not None:
            self._host.remove_event_listener("deckready", self._on_ready)
            self._host = None
        self.stop()

    def _on_ready(self, _state=None) -> None:
        self.start()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._start = self._clock()
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="presentation-timer", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self.interval * 2)
            self._thread = None

    def elapsed(self) -> float:
        if self._start is None:
            return 0.0
        return self._clock() - self._start

    def format_elapsed(self) -> str:
        return format_elapsed(self.elapsed())

    def tick(self) -> None:
        log.info("Presentation time: %s", self.format_elapsed())

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.tick()
