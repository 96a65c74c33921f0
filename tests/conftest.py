"""Shared fixtures: an in-memory fetcher and a minimal presentation page."""

from __future__ import annotations

import asyncio
import json

import pytest

from deck.controller import NavigationController
from deck.document import DocumentView
from deck.errors import FetchError
from deck.host import PageHost

PAGE_HTML = """<!DOCTYPE html>
<html><body>
<div id="loading-indicator"><div class="loading-text">Loading...</div></div>
<main id="presentation-container"></main>
<nav class="navigation">
  <button id="prev-btn">prev</button>
  <span id="current-slide">0</span> / <span id="total-slides">0</span>
  <button id="next-btn">next</button>
</nav>
</body></html>"""


class DictFetcher:
    """Fetcher serving text from a dict; unknown locations fail."""

    def __init__(self, files: dict[str, str]) -> None:
        self.files = dict(files)
        self.requested: list[str] = []

    def fetch_text(self, location: str) -> str:
        self.requested.append(location)
        if location not in self.files:
            raise FetchError(location, "404 Not Found")
        return self.files[location]


def slide_fragment(slide_id: str, title: str = "") -> str:
    return f'<div class="slide" id="{slide_id}"><div class="slide-content"><h2>{title or slide_id}</h2></div></div>'


def deck_files(n: int, missing: tuple[int, ...] = ()) -> dict[str, str]:
    """Config plus fragments for an n-slide deck; indices in *missing* have no fragment."""
    slides = [{"id": f"slide-{i}", "file": f"slides/s{i}.html"} for i in range(n)]
    files = {"config/slides.json": json.dumps({"slides": slides})}
    for i in range(n):
        if i not in missing:
            files[f"slides/s{i}.html"] = slide_fragment(f"slide-{i}", f"Slide {i}")
    return files


def make_controller(files: dict[str, str], location_hash: str = "",
                    start: bool = True) -> NavigationController:
    controller = NavigationController(
        DocumentView(PAGE_HTML), DictFetcher(files), PageHost(location_hash),
    )
    if start:
        asyncio.run(controller.start())
    return controller


@pytest.fixture
def five_slides() -> NavigationController:
    return make_controller(deck_files(5))


@pytest.fixture
def deck_root(tmp_path):
    """A three-slide deck on disk, plus a file outside the deck root."""
    root = tmp_path / "deck"
    (root / "config").mkdir(parents=True)
    (root / "slides").mkdir()
    (root / "img").mkdir()
    slides = [{"id": f"slide-{i}", "file": f"slides/s{i}.html"} for i in range(3)]
    (root / "config" / "slides.json").write_text(json.dumps({"slides": slides}), encoding="utf-8")
    for i in range(3):
        (root / "slides" / f"s{i}.html").write_text(slide_fragment(f"slide-{i}", f"Slide {i}"), encoding="utf-8")
    (root / "img" / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    (root / "notes.bin").write_bytes(b"\x00\x01")
    (tmp_path / "secret.txt").write_text("outside", encoding="utf-8")
    return root
