"""
Path configuration and constants for the deck viewer and exporter.
"""

from pathlib import Path
import os

# ── Deck layout ──────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DECK_ROOT = Path(os.environ.get("DECK_ROOT", PROJECT_ROOT / "example_deck"))
SLIDES_CONFIG = "config/slides.json"

# Used when config/slides.json cannot be fetched or parsed
FALLBACK_SLIDES = [
    {"id": "slide-0", "file": "slides/slide-00-title.html"},
]

# ── Navigation ───────────────────────────────────────────────────────
SWIPE_THRESHOLD = 50  # px of horizontal travel before a touch counts as a swipe
HASH_PREFIX = "slide-"
INSTRUCTIONS_KEY = "instructionsShown"

# ── Viewer server ────────────────────────────────────────────────────
HOST = "127.0.0.1"
PORT = int(os.environ.get("DECK_PORT", "8080"))
PORT_ATTEMPTS = 3

CONTENT_TYPES = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".svg": "image/svg+xml",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"

# ── Export ───────────────────────────────────────────────────────────
OUTPUT_PDF = "presentation.pdf"
EXPORT_STRATEGIES = ["screenshot", "print", "print-per-slide"]

# Letter landscape at 96 DPI (11in x 8.5in)
SCREENSHOT_VIEWPORT = {"width": 1056, "height": 816}
PRINT_VIEWPORT = {"width": 1024, "height": 768}
DEVICE_SCALE_FACTOR = 2
PAGE_WIDTH_IN = 11.0
PAGE_HEIGHT_IN = 8.5
PDF_DPI = 192  # matches the 2x screenshots

NAVIGATION_TIMEOUT_MS = 30000
READY_TIMEOUT_MS = 15000
SETTLE_MS = 2000       # after readiness, for fonts and images
SLIDE_SETTLE_MS = 500  # between per-slide captures
