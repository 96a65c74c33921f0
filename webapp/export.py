"""
Export a deck to PDF through a headless browser.

Starts the viewer on a background thread, renders it in headless Chromium
with Playwright, waits until the slides are in place, and writes a single
PDF using one of three strategies:

- screenshot       one viewport screenshot per slide, fitted onto Letter pages
- print            one print of the whole document with every slide visible
- print-per-slide  one printed page per slide, merged into one document
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from deck.config import (
    DECK_ROOT,
    DEVICE_SCALE_FACTOR,
    EXPORT_STRATEGIES,
    HOST,
    NAVIGATION_TIMEOUT_MS,
    OUTPUT_PDF,
    PORT,
    PORT_ATTEMPTS,
    PRINT_VIEWPORT,
    READY_TIMEOUT_MS,
    SCREENSHOT_VIEWPORT,
    SETTLE_MS,
    SLIDE_SETTLE_MS,
)
from deck.errors import ExportError
from webapp.app import create_app
from webapp.pdf import images_to_pdf, merge_pdfs, write_pdf

log = logging.getLogger(__name__)

READY_JS = """() => {
    const slides = document.querySelectorAll('.slide');
    const indicator = document.querySelector('#loading-indicator');
    return slides.length > 0 && indicator !== null && indicator.style.display === 'none';
}"""

COUNT_SLIDES_JS = "() => document.querySelectorAll('.slide').length"

HIDE_NAVIGATION_JS = """() => {
    const nav = document.querySelector('.navigation');
    if (nav) nav.style.display = 'none';
}"""

SHOW_ONLY_JS = """(index) => {
    document.querySelectorAll('.slide').forEach((slide, i) => {
        const on = i === index;
        slide.classList.toggle('active', on);
        slide.classList.remove('print-visible');
        slide.style.display = on ? 'block' : 'none';
        if (on) slide.style.opacity = '1';
    });
}"""

SHOW_ALL_JS = """() => {
    document.body.classList.add('printing');
    document.querySelectorAll('.slide').forEach(slide => {
        slide.classList.add('print-visible');
        slide.style.display = 'block';
        slide.style.opacity = '1';
    });
}"""

PRINT_CSS = """
.navigation, .loading-indicator, #loading-indicator { display: none !important; }
.slide {
    width: 100vw !important;
    height: 100vh !important;
    page-break-after: always !important;
    page-break-inside: avoid !important;
    box-sizing: border-box !important;
    display: block !important;
}
.slide-content { overflow: hidden !important; }
"""

_LETTER_LANDSCAPE = {"width": "11in", "height": "8.5in"}
_NO_MARGIN = {"top": "0", "right": "0", "bottom": "0", "left": "0"}


# ── Viewer server ────────────────────────────────────────────────────

class _QuietHandler(WSGIRequestHandler):
    def log_message(self, format, *args):
        pass  # suppress HTTP logs


def _start_viewer_server(root: Path, port: int = PORT) -> tuple[WSGIServer, int]:
    """Serve the viewer on a daemon thread, trying successive ports."""
    app = create_app(root)
    for candidate in range(port, port + PORT_ATTEMPTS):
        try:
            server = make_server(HOST, candidate, app, handler_class=_QuietHandler)
        except OSError:
            log.debug("Port %d unavailable", candidate)
            continue
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        log.info("Local server started on port %d", candidate)
        return server, candidate
    raise ExportError(f"Could not start viewer on ports {port}-{port + PORT_ATTEMPTS - 1}")


def viewer_url(port: int, print_mode: bool = False) -> str:
    url = f"http://{HOST}:{port}/"
    return url + "?print=1" if print_mode else url


# ── Page steps ───────────────────────────────────────────────────────

def wait_until_ready(page) -> int:
    """Wait for the slides to be inserted and the loading indicator hidden."""
    page.wait_for_function(READY_JS, timeout=READY_TIMEOUT_MS)
    page.wait_for_timeout(SETTLE_MS)
    total = page.evaluate(COUNT_SLIDES_JS)
    log.info("Found %d slides", total)
    return total


def capture_screenshots(page, total: int) -> list[bytes]:
    shots: list[bytes] = []
    for i in range(total):
        log.info("Capturing slide %d/%d...", i + 1, total)
        page.evaluate(SHOW_ONLY_JS, i)
        page.wait_for_timeout(SLIDE_SETTLE_MS)
        shots.append(page.screenshot(type="png", full_page=False))
    return shots


def print_each_slide(page, total: int) -> list[bytes]:
    page.add_style_tag(content=PRINT_CSS)
    pages: list[bytes] = []
    for i in range(total):
        log.info("Printing slide %d/%d...", i + 1, total)
        page.evaluate(SHOW_ONLY_JS, i)
        page.wait_for_timeout(SLIDE_SETTLE_MS)
        pages.append(page.pdf(
            **_LETTER_LANDSCAPE, print_background=True, margin=_NO_MARGIN,
        ))
    return pages


def print_document(page) -> bytes:
    page.add_style_tag(content=PRINT_CSS)
    page.evaluate(SHOW_ALL_JS)
    return page.pdf(
        **_LETTER_LANDSCAPE,
        print_background=True,
        display_header_footer=False,
        margin=_NO_MARGIN,
        prefer_css_page_size=True,
    )


def run_strategy(page, url: str, strategy: str, output: Path) -> Path:
    """Drive an open browser page through one export strategy."""
    page.goto(url, wait_until="networkidle", timeout=NAVIGATION_TIMEOUT_MS)
    total = wait_until_ready(page)
    if total == 0:
        raise ExportError("Presentation has no slides")
    page.evaluate(HIDE_NAVIGATION_JS)

    if strategy == "screenshot":
        return images_to_pdf(capture_screenshots(page, total), output)
    if strategy == "print-per-slide":
        return merge_pdfs(print_each_slide(page, total), output)
    if strategy == "print":
        return write_pdf(print_document(page), output)
    raise ExportError(f"Unknown export strategy: {strategy}")


# ── Entry point ──────────────────────────────────────────────────────

def export_pdf(
    deck_root: Optional[Path] = None,
    output: Optional[Path] = None,
    strategy: str = "screenshot",
    port: int = PORT,
) -> Path:
    """Render the deck in headless Chromium and write it to a single PDF."""
    if strategy not in EXPORT_STRATEGIES:
        raise ExportError(f"Unknown export strategy: {strategy}")
    deck_root = Path(deck_root or DECK_ROOT)
    output = Path(output or OUTPUT_PDF)
    viewport = SCREENSHOT_VIEWPORT if strategy == "screenshot" else PRINT_VIEWPORT

    log.info("Starting %s PDF export of %s", strategy, deck_root)
    server, port = _start_viewer_server(deck_root, port)
    try:
        with sync_playwright() as p:
            browser = p.chromium.launch(
                headless=True, args=["--no-sandbox", "--disable-setuid-sandbox"],
            )
            try:
                page = browser.new_page(viewport=viewport, device_scale_factor=DEVICE_SCALE_FACTOR)
                url = viewer_url(port, print_mode=strategy == "print")
                result = run_strategy(page, url, strategy, output)
            finally:
                browser.close()
    except PlaywrightError as e:
        raise ExportError(f"Browser automation failed: {e}") from e
    finally:
        server.shutdown()
        server.server_close()
        log.info("Server closed")

    log.info("PDF generated successfully: %s", result)
    return result
