"""Response-shape probing for provider JSON payloads.

Providers put the payload at one of several nested locations; extractors are
tried in order and the first non-empty value wins.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any, Callable, Sequence

from newswall.core.exceptions import ProviderResponseError

Extractor = Callable[[Any], Any]


def dig(obj: Any, *path: str | int) -> Any:
    """Walk nested dicts/lists; None as soon as a step is missing."""
    for step in path:
        if isinstance(step, int):
            if not isinstance(obj, list) or len(obj) <= step:
                return None
            obj = obj[step]
        else:
            if not isinstance(obj, dict):
                return None
            obj = obj.get(step)
        if obj is None:
            return None
    return obj


def first_match(payload: Any, extractors: Sequence[Extractor]) -> Any:
    """Return the first non-empty value produced by ``extractors``, or None."""
    for extract in extractors:
        value = extract(payload)
        if value:
            return value
    return None


def decode_image(data: str, endpoint: str) -> bytes:
    """Decode base64 image data or raise ProviderResponseError."""
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError, TypeError) as e:
        raise ProviderResponseError(f"{endpoint}: image data is not valid base64: {e}") from e
