#!/usr/bin/env python3
"""
Presentation viewer web app.

A Flask app that serves a deck root as static files and renders the
presentation page by running the navigation controller against the page
template. Run with:  python webapp/app.py [deck_root]

Routes:
    /                 presentation page (?slide=N initial slide, ?print=1 all slides)
    /api/slides       JSON summary of the loaded deck
    /<path>           static file under the deck root (403 outside it, 404 if missing)
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

# Ensure project root is importable
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from flask import Flask, abort, jsonify, render_template, request, send_file

from deck.config import CONTENT_TYPES, DECK_ROOT, DEFAULT_CONTENT_TYPE, HOST, PORT
from deck.controller import NavigationController, format_hash
from deck.document import DocumentView
from deck.fetcher import FileFetcher
from deck.host import PageHost
from deck.observers import InstructionsBanner

log = logging.getLogger(__name__)


# ── Helpers ──────────────────────────────────────────────────────────

class PathEscapeError(Exception):
    """Requested path resolves outside the deck root."""


def resolve_deck_path(root: Path, filename: str) -> Path:
    """Resolve *filename* under *root*, refusing anything that escapes it."""
    root = Path(root).resolve()
    path = (root / filename).resolve()
    if not path.is_relative_to(root):
        raise PathEscapeError(filename)
    return path


def content_type_for(path: Path) -> str:
    return CONTENT_TYPES.get(path.suffix.lower(), DEFAULT_CONTENT_TYPE)


def _run(coro):
    """Run a coroutine to completion from synchronous code."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop and loop.is_running():
        import concurrent.futures
        with concurrent.futures.ThreadPoolExecutor() as pool:
            return pool.submit(asyncio.run, coro).result()
    return asyncio.run(coro)


def build_controller(deck_root: Path, page_html: str, slide: Optional[int] = None,
                     session_storage: Optional[dict] = None) -> NavigationController:
    """Load the deck into a fresh page and initialize navigation.

    *session_storage* is shared across pages so the controls banner is
    logged once for the lifetime of the viewer, not once per request.
    """
    host = PageHost(format_hash(slide) if slide is not None else "")
    if session_storage is not None:
        host.session_storage = session_storage
    InstructionsBanner(host).attach()
    controller = NavigationController(DocumentView(page_html), FileFetcher(deck_root), host)
    _run(controller.start())
    return controller


# ── App factory ──────────────────────────────────────────────────────

def create_app(deck_root: Optional[Path] = None) -> Flask:
    app = Flask(__name__, static_url_path="/_viewer")
    app.config["DECK_ROOT"] = Path(deck_root or DECK_ROOT).resolve()
    session_storage: dict[str, str] = {}

    def _deck_root() -> Path:
        return app.config["DECK_ROOT"]

    def _controller(slide: Optional[int] = None) -> NavigationController:
        page_html = render_template("index.html", title=_deck_root().name)
        return build_controller(_deck_root(), page_html, slide, session_storage)

    @app.route("/")
    def presentation():
        """Presentation page with all slides inserted and one active."""
        slide = request.args.get("slide", type=int)
        controller = _controller(slide)
        if request.args.get("print") == "1":
            controller.before_print()
        return controller.view.render()

    @app.route("/api/slides")
    def slides_summary():
        controller = _controller()
        return jsonify({
            "total": controller.total_slides,
            "slides": controller.state.slides,
            "loaded": controller.loaded,
        })

    @app.route("/<path:filename>")
    def deck_file(filename: str):
        try:
            path = resolve_deck_path(_deck_root(), filename)
        except PathEscapeError:
            log.warning("Refused path outside deck root: %s", filename)
            abort(403)
        if not path.is_file():
            abort(404)
        return send_file(path, mimetype=content_type_for(path))

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s  %(name)s  %(message)s")
    root = Path(sys.argv[1]) if len(sys.argv) > 1 else DECK_ROOT
    create_app(root).run(host=HOST, port=PORT, debug=False)
