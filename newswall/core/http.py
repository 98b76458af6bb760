"""Shared httpx helpers for provider clients."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx

from newswall.core.exceptions import ProviderHTTPError, ProviderResponseError, ProviderTransportError

USER_AGENT = "newswall/0.3"


@asynccontextmanager
async def open_client(
    client: httpx.AsyncClient | None, timeout_s: float
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a fresh one closed on exit.

    An injected client is never closed here; its owner closes it.
    """
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_s),
        headers={"User-Agent": USER_AGENT},
    ) as fresh:
        yield fresh


async def send(
    client: httpx.AsyncClient, method: str, url: str, *, endpoint: str, **kwargs: Any
) -> httpx.Response:
    """Issue one request; map network errors and non-2xx statuses to ProviderErrors.

    Raises:
        ProviderTransportError: On connection errors, timeouts and other transport failures
        ProviderHTTPError: On a non-success status (status and body preserved)
    """
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.HTTPError as e:
        raise ProviderTransportError(f"{endpoint}: {type(e).__name__}: {e}") from e

    if not response.is_success:
        raise ProviderHTTPError(response.status_code, response.text, endpoint=endpoint)
    return response


def json_body(response: httpx.Response, endpoint: str) -> Any:
    """Decode a JSON response body or raise ProviderResponseError."""
    try:
        return response.json()
    except ValueError as e:
        raise ProviderResponseError(f"{endpoint}: response is not JSON: {e}") from e
