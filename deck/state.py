"""
Presentation state.

One instance per controller, created at page load, populated once by the
load phase and mutated afterwards only through NavigationController.show_slide
and the print hooks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class PresentationState:
    slides: list[str] = field(default_factory=list)  # slide ids, document order
    current_index: Optional[int] = None               # None until the first show_slide
    loaded: bool = False
    printing: bool = False

    @property
    def total(self) -> int:
        return len(self.slides)

    def is_valid_index(self, index: int) -> bool:
        return self.loaded and 0 <= index < self.total

    @property
    def current_slide_id(self) -> Optional[str]:
        if self.current_index is None or not self.is_valid_index(self.current_index):
            return None
        return self.slides[self.current_index]

    @property
    def at_first(self) -> bool:
        return self.current_index == 0

    @property
    def at_last(self) -> bool:
        return self.current_index == self.total - 1

    def to_dict(self) -> dict:
        """Serialize to JSON-safe dict."""
        return {
            "slides": list(self.slides),
            "total": self.total,
            "current_index": self.current_index,
            "loaded": self.loaded,
            "printing": self.printing,
        }
