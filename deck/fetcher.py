"""
Fetchers for slide configuration and fragments.

Both fetchers are blocking; the loader runs them on worker threads so that
all fragments are requested concurrently.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol

import requests

from deck.errors import FetchError

log = logging.getLogger(__name__)


class Fetcher(Protocol):
    def fetch_text(self, location: str) -> str:
        ...


class HttpFetcher:
    """Fetch deck resources from a running viewer (or any static host)."""

    def __init__(self, base_url: str, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None) -> None:
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self.session = session or requests.Session()

    def url_for(self, location: str) -> str:
        return self.base_url + location.lstrip("/")

    def fetch_text(self, location: str) -> str:
        url = self.url_for(location)
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(location, str(e)) from e
        if not resp.ok:
            raise FetchError(location, f"{resp.status_code} {resp.reason}")
        resp.encoding = resp.encoding or "utf-8"
        return resp.text


class FileFetcher:
    """Read deck resources straight from the deck root on disk."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root).resolve()

    def resolve(self, location: str) -> Path:
        path = (self.root / location.lstrip("/")).resolve()
        if not path.is_relative_to(self.root):
            raise FetchError(location, "outside the deck root")
        return path

    def fetch_text(self, location: str) -> str:
        path = self.resolve(location)
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise FetchError(location, e.strerror or str(e)) from e
        except UnicodeDecodeError as e:
            raise FetchError(location, f"not valid UTF-8: {e.reason}") from e
