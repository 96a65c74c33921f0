#!/usr/bin/env python3
"""
Slide deck presenter.

Serve a deck, inspect its slides, or export it to a single PDF.

Usage:
    python present.py serve                              # viewer on :8080
    python present.py serve --deck talks/q3 --port 9000
    python present.py outline                            # list slides from disk
    python present.py outline --url http://host:8080     # list slides from a viewer
    python present.py export                             # screenshot strategy
    python present.py export --strategy print -o out.pdf
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Ensure project root is on path
PROJECT_ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(PROJECT_ROOT))

from deck.config import DECK_ROOT, EXPORT_STRATEGIES, HOST, OUTPUT_PDF, PORT
from deck.controller import NavigationController
from deck.document import DocumentView
from deck.errors import DeckError
from deck.fetcher import FileFetcher, HttpFetcher

log = logging.getLogger("present")

_OUTLINE_PAGE = '<html><body><div id="presentation-container"></div></body></html>'


# ── Commands ──────────────────────────────────────────────────────────


def cmd_serve(args: argparse.Namespace) -> int:
    from webapp.app import create_app

    log.info("Serving %s on http://%s:%d/", args.deck, args.host, args.port)
    create_app(args.deck).run(host=args.host, port=args.port, debug=False)
    return 0


def cmd_outline(args: argparse.Namespace) -> int:
    fetcher = HttpFetcher(args.url) if args.url else FileFetcher(args.deck)
    view = DocumentView(_OUTLINE_PAGE)
    controller = NavigationController(view, fetcher)
    asyncio.run(controller.load_all())

    if not controller.loaded:
        log.error("Could not load presentation")
        return 1

    errors = 0
    print(f"{controller.total_slides} slides")
    for i, (slide_id, el) in enumerate(zip(controller.state.slides, view.slides)):
        failed = "error" in (el.get("class") or [])
        errors += failed
        heading = el.find(["h1", "h2", "h3"])
        title = heading.get_text(strip=True) if heading else ""
        mark = "!!" if failed else "  "
        print(f"  {mark} {i:3d}  {slide_id:16s} {title}")
    if errors:
        log.warning("%d slide(s) failed to load", errors)
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    from webapp.export import export_pdf

    try:
        path = export_pdf(args.deck, args.output, args.strategy, args.port)
    except DeckError:
        log.exception("Error generating PDF")
        return 1
    print(f"✓ PDF generated successfully: {path}")
    return 0


# ── CLI ───────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Slide deck viewer and PDF exporter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python present.py serve                           # Viewer on port 8080
  python present.py outline                         # List slides
  python present.py export --strategy print-per-slide
""",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def add_deck(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--deck", type=Path, default=DECK_ROOT,
            help=f"Deck root directory (default: {DECK_ROOT})",
        )

    serve = sub.add_parser("serve", help="Run the presentation viewer")
    add_deck(serve)
    serve.add_argument("--host", default=HOST)
    serve.add_argument("--port", type=int, default=PORT)
    serve.set_defaults(func=cmd_serve)

    outline = sub.add_parser("outline", help="Load the deck and list its slides")
    add_deck(outline)
    outline.add_argument("--url", help="Load from a running viewer instead of disk")
    outline.set_defaults(func=cmd_outline)

    export = sub.add_parser("export", help="Export the deck to a single PDF")
    add_deck(export)
    export.add_argument(
        "--strategy", choices=EXPORT_STRATEGIES, default="screenshot",
        help="screenshot: raster pages; print: one document print; "
             "print-per-slide: printed pages merged (default: screenshot)",
    )
    export.add_argument("-o", "--output", type=Path, default=Path(OUTPUT_PDF))
    export.add_argument("--port", type=int, default=PORT)
    export.set_defaults(func=cmd_export)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s  %(name)s  %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
