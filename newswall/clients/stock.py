"""Public stock-image sources used when no generative provider produced an image."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence
from urllib.parse import quote

import httpx

from newswall.core.fallback import first_success
from newswall.core.http import open_client, send
from newswall.core.logging import log

MAX_QUERY_KEYWORDS = 5


@dataclass(frozen=True)
class StockSource:
    """One fallback source: a URL template plus per-request options.

    Template fields: ``{width}``, ``{height}``, ``{query}`` (URL-escaped,
    comma-joined keywords) and ``{seed}`` (cache-busting value).
    """

    name: str
    url_template: str
    options: dict[str, Any] = field(default_factory=dict)

    def url(self, *, query: str, width: int, height: int, seed: int) -> str:
        return self.url_template.format(query=query, width=width, height=height, seed=seed)


DEFAULT_SOURCES: tuple[StockSource, ...] = (
    StockSource("unsplash", "https://source.unsplash.com/{width}x{height}/?{query}", {"follow_redirects": True}),
    StockSource("loremflickr", "https://loremflickr.com/{width}/{height}/{query}", {"follow_redirects": True}),
    StockSource("picsum", "https://picsum.photos/seed/{seed}/{width}/{height}", {"follow_redirects": True}),
)


def build_query(keywords: Sequence[str]) -> str:
    """Comma-join the first MAX_QUERY_KEYWORDS keywords and URL-escape the result."""
    return quote(",".join(keywords[:MAX_QUERY_KEYWORDS]), safe="")


def epoch_millis() -> int:
    return int(time.time() * 1000)


class StockImageChain:
    """Tries each source in order with one GET; the first 2xx body wins."""

    def __init__(
        self,
        sources: Sequence[StockSource] = DEFAULT_SOURCES,
        *,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], int] = epoch_millis,
        timeout_s: float = 60.0,
    ):
        self.sources = tuple(sources)
        self.timeout_s = timeout_s
        self._client = client
        self._clock = clock

    async def fetch(self, keywords: Sequence[str], width: int, height: int) -> bytes:
        """Fetch a stock image matching ``keywords`` at ``width`` x ``height``.

        Returns:
            Raw image bytes from the first source that answered with a success status

        Raises:
            NoSourcesConfigured: No sources in the chain
            AggregatedFailure: Every source failed (one cause per source, in order)
        """
        query = build_query(list(keywords))
        seed = self._clock()

        async with open_client(self._client, self.timeout_s) as client:

            async def attempt(source: StockSource) -> bytes:
                url = source.url(query=query, width=width, height=height, seed=seed)
                log.info(f"fallback_attempt source={source.name} url={url}")
                response = await send(client, "GET", url, endpoint=source.name, **source.options)
                return response.content

            data = await first_success(
                self.sources, attempt, label=lambda s: s.name, what="Stock image fallback"
            )

        log.info(f"fallback_ok bytes={len(data)}")
        return data
