"""Headline retrieval from RSS/Atom feeds."""

from __future__ import annotations

import asyncio
from typing import Sequence

import feedparser
import httpx

from newswall.core.http import open_client
from newswall.core.logging import log

MAX_HEADLINES = 100
FEED_TIMEOUT_S = 15.0


async def _fetch_feed(client: httpx.AsyncClient, url: str) -> list[str]:
    """Titles (or summaries) of one feed; [] if the feed can't be fetched or parsed."""
    try:
        response = await client.get(url, follow_redirects=True, timeout=FEED_TIMEOUT_S)
        response.raise_for_status()
    except httpx.HTTPError as e:
        log.debug(f"rss_error url={url} reason={type(e).__name__}: {e}")
        return []

    parsed = feedparser.parse(response.content)
    if parsed.bozo and not parsed.entries:
        log.debug(f"rss_parse_error url={url} reason={parsed.get('bozo_exception')}")
        return []

    titles = []
    for entry in parsed.entries:
        text = entry.get("title") or entry.get("summary") or ""
        if text:
            titles.append(text)
    return titles


async def fetch_headlines(
    feeds: Sequence[str],
    *,
    client: httpx.AsyncClient | None = None,
    limit: int = MAX_HEADLINES,
) -> list[str]:
    """Fetch all feeds concurrently and merge their headlines.

    Args:
        feeds: Feed URLs
        client: Optional shared HTTP client
        limit: Maximum headlines returned

    Returns:
        Trimmed, de-duplicated headlines in feed order (first occurrence kept)
    """
    async with open_client(client, FEED_TIMEOUT_S) as http:
        per_feed = await asyncio.gather(*(_fetch_feed(http, url) for url in feeds))

    seen: set[str] = set()
    unique: list[str] = []
    for titles in per_feed:
        for title in titles:
            key = title.strip()
            if not key or key in seen:
                continue
            seen.add(key)
            unique.append(key)

    log.info(f"headlines_fetched feeds={len(feeds)} count={len(unique[:limit])}")
    return unique[:limit]
