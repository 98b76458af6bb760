"""Ordered fallback with failure aggregation.

Used at two levels: the two endpoints of an image-generation provider, and
the list of stock-image sources. Candidates are tried strictly in order, one
at a time; the first success wins and nothing after it runs.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Sequence, TypeVar

from newswall.core.exceptions import AggregatedFailure, NoSourcesConfigured, ProviderError
from newswall.core.logging import log

C = TypeVar("C")
T = TypeVar("T")


async def first_success(
    candidates: Sequence[C],
    attempt: Callable[[C], Awaitable[T]],
    *,
    label: Callable[[C], str] = str,
    what: str = "fallback",
) -> T:
    """Await ``attempt(candidate)`` for each candidate until one succeeds.

    Args:
        candidates: Candidates in trial order
        attempt: Coroutine function producing the result for one candidate
        label: Names a candidate in logs and in the aggregated error
        what: Name of the sequence, used in messages

    Returns:
        The first successful result

    Raises:
        NoSourcesConfigured: If ``candidates`` is empty
        AggregatedFailure: If every candidate raised a ProviderError (all causes kept)
    """
    if not candidates:
        raise NoSourcesConfigured(f"{what}: no sources configured")

    causes: list[tuple[str, ProviderError]] = []
    for candidate in candidates:
        name = label(candidate)
        try:
            return await attempt(candidate)
        except ProviderError as e:
            log.warning(f"fallback_attempt_failed what={what!r} candidate={name} reason={type(e).__name__}: {e}")
            causes.append((name, e))

    raise AggregatedFailure(f"{what} failed", causes)
