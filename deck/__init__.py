"""
Slide deck viewer engine.

Loads a deck's slide fragments, tracks the current slide and keeps the
view, the URL fragment and the navigation controls consistent.
"""

from deck.config import DECK_ROOT, SLIDES_CONFIG
from deck.controller import NavigationController, format_hash, parse_hash
from deck.deck_schema import DeckConfig, SlideDescriptor
from deck.document import DocumentView, SlideView
from deck.errors import ConfigError, DeckError, ExportError, FetchError
from deck.fetcher import FileFetcher, HttpFetcher
from deck.host import KeyEvent, PageHost, TouchEvent
from deck.observers import InstructionsBanner, PresentationTimer
from deck.state import PresentationState

__all__ = [
    "DECK_ROOT",
    "SLIDES_CONFIG",
    "NavigationController",
    "format_hash",
    "parse_hash",
    "DeckConfig",
    "SlideDescriptor",
    "DocumentView",
    "SlideView",
    "DeckError",
    "ConfigError",
    "FetchError",
    "ExportError",
    "FileFetcher",
    "HttpFetcher",
    "PageHost",
    "KeyEvent",
    "TouchEvent",
    "InstructionsBanner",
    "PresentationTimer",
    "PresentationState",
]
