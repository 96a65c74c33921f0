"""
Asynchronous slide loading.

The configuration is fetched first; every fragment is then fetched
concurrently and the results are joined back in descriptor order, so the
order of network completion never matters. Failures degrade instead of
propagating:

- configuration unavailable → DeckConfig.fallback()
- fragment unavailable      → error placeholder with the same slide id
"""

from __future__ import annotations

import asyncio
import html as html_lib
import logging

from deck.config import SLIDES_CONFIG
from deck.deck_schema import DeckConfig, SlideDescriptor
from deck.errors import DeckError
from deck.fetcher import Fetcher

log = logging.getLogger(__name__)


def error_placeholder(descriptor: SlideDescriptor) -> str:
    """Build the in-place error slide shown for a fragment that failed to load."""
    slide_id = html_lib.escape(descriptor.id, quote=True)
    source = html_lib.escape(descriptor.file)
    return (
        f'<div class="slide error" id="{slide_id}">\n'
        f'    <div class="slide-content center-content">\n'
        f"        <p>Error loading slide: {source}</p>\n"
        f"    </div>\n"
        f"</div>"
    )


async def load_config(fetcher: Fetcher, location: str = SLIDES_CONFIG) -> DeckConfig:
    try:
        text = await asyncio.to_thread(fetcher.fetch_text, location)
        return DeckConfig.from_json(text)
    except DeckError as e:
        log.warning("Error loading slide configuration: %s", e)
        return DeckConfig.fallback()


async def load_fragment(fetcher: Fetcher, descriptor: SlideDescriptor) -> str:
    try:
        return await asyncio.to_thread(fetcher.fetch_text, descriptor.file)
    except DeckError as e:
        log.warning("Error loading slide %s: %s", descriptor.id, e)
        return error_placeholder(descriptor)


async def load_fragments(fetcher: Fetcher, config: DeckConfig) -> list[str]:
    """Fetch all fragments concurrently; result order is descriptor order."""
    return list(await asyncio.gather(
        *(load_fragment(fetcher, d) for d in config.slides)
    ))
