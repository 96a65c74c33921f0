"""
Data classes for deck configuration.

A SlideDescriptor locates one slide's markup fragment; a DeckConfig is the
ordered list read from config/slides.json. Order defines navigation order.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from deck.config import FALLBACK_SLIDES
from deck.errors import ConfigError


@dataclass(frozen=True)
class SlideDescriptor:
    id: str    # DOM anchor, e.g. "slide-3"
    file: str  # fragment location relative to the deck root

    def to_dict(self) -> dict:
        return {"id": self.id, "file": self.file}

    @classmethod
    def from_dict(cls, d: dict, index: int = 0) -> SlideDescriptor:
        """Deserialize from dict. A missing id defaults to slide-<index>."""
        if not isinstance(d, dict) or not d.get("file"):
            raise ConfigError(f"Slide entry {index} has no 'file': {d!r}")
        return cls(id=str(d.get("id") or f"slide-{index}"), file=str(d["file"]))


@dataclass
class DeckConfig:
    slides: list[SlideDescriptor] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.slides)

    def to_dict(self) -> dict:
        """Serialize to JSON-safe dict."""
        return {"slides": [s.to_dict() for s in self.slides]}

    @classmethod
    def from_dict(cls, d: dict) -> DeckConfig:
        if not isinstance(d, dict) or not isinstance(d.get("slides"), list):
            raise ConfigError("Slide configuration must contain a 'slides' list")
        return cls(slides=[SlideDescriptor.from_dict(s, i) for i, s in enumerate(d["slides"])])

    @classmethod
    def from_json(cls, text: str) -> DeckConfig:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid slide configuration: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def fallback(cls) -> DeckConfig:
        """Single-slide configuration used when the real one is unavailable."""
        return cls.from_dict({"slides": FALLBACK_SLIDES})
