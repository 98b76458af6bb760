"""Gemini image generation over the Generative Language REST API.

Two endpoint styles are available for a model:

- ``images:generate`` (image synthesis): prompt text + size in, base64 image out.
- ``models/{model}:generateContent`` (multimodal content): one user turn in,
  inline image data in the response parts.

The model identifier alone decides which one is tried first; the other is
tried exactly once if the first fails.
"""

from __future__ import annotations

import re
from urllib.parse import quote

import httpx

from newswall.core.attempt_log import AttemptSink
from newswall.core.exceptions import (
    MissingCredential,
    MissingImageData,
    MissingInlineData,
    MissingModel,
)
from newswall.core.extract import Extractor, decode_image, dig, first_match
from newswall.core.fallback import first_success
from newswall.core.http import json_body, open_client, send
from newswall.core.logging import log
from newswall.core.models import AttemptRecord, ImageRequest

BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

ENDPOINT_IMAGES = "images:generate"
ENDPOINT_CONTENT = "models:generateContent"

# Precedence matters: image-capable beats the conversational family.
IMAGE_CAPABLE_PATTERN = re.compile(r"image|preview", re.IGNORECASE)
CONVERSATIONAL_FAMILY_PATTERN = re.compile(r"^gemini[-:]|gemini", re.IGNORECASE)

CONTENT_INSTRUCTION = "Generate a {width}x{height} PNG wallpaper. Return only the image as inline data."

# images:generate response locations, in priority order
IMAGE_DATA_EXTRACTORS: tuple[Extractor, ...] = (
    lambda j: dig(j, "images", 0, "data", "b64"),
    lambda j: dig(j, "images", 0, "b64"),
    lambda j: dig(j, "candidates", 0, "image", "b64"),
)

# Equivalent field names for inline binary parts
INLINE_DATA_EXTRACTORS: tuple[Extractor, ...] = (
    lambda part: dig(part, "inlineData", "data"),
    lambda part: dig(part, "inline_data", "data"),
)


def endpoint_order(model: str) -> tuple[str, str]:
    """Choose the endpoint trial order from the model identifier.

    1. Names containing "image" or "preview" (imagen-*, *-image-preview) -> images:generate first.
    2. Otherwise Gemini-family names -> generateContent first.
    3. Anything else -> images:generate first.
    """
    if IMAGE_CAPABLE_PATTERN.search(model):
        return (ENDPOINT_IMAGES, ENDPOINT_CONTENT)
    if CONVERSATIONAL_FAMILY_PATTERN.search(model):
        return (ENDPOINT_CONTENT, ENDPOINT_IMAGES)
    return (ENDPOINT_IMAGES, ENDPOINT_CONTENT)


class GeminiImageClient:
    """Gemini image-generation provider with a two-endpoint fallback."""

    name = "gemini"

    def __init__(
        self,
        api_key: str | None,
        model: str | None,
        *,
        client: httpx.AsyncClient | None = None,
        sink: AttemptSink | None = None,
        timeout_s: float = 60.0,
        base_url: str = BASE_URL,
    ):
        self.api_key = api_key or ""
        self.model = model or ""
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._client = client
        self._sink = sink

    def endpoint_url(self, endpoint: str) -> str:
        if endpoint == ENDPOINT_CONTENT:
            return f"{self.base_url}/models/{quote(self.model, safe='')}:generateContent"
        return f"{self.base_url}/{ENDPOINT_IMAGES}"

    async def generate(self, request: ImageRequest, log_tag: str | None = None) -> bytes:
        """Generate one image for ``request``.

        Args:
            request: Prompt and target size
            log_tag: Attempt-log source tag; attempts are only recorded when given

        Returns:
            Raw image bytes

        Raises:
            MissingCredential: Empty API key (no request made)
            MissingModel: Empty model identifier (no request made)
            AggregatedFailure: Both endpoints failed; ``primary``/``fallback`` hold each cause
        """
        if not self.api_key:
            raise MissingCredential("GEMINI_API_KEY is required for Gemini image generation")
        if not self.model:
            raise MissingModel("Gemini model is required (GEMINI_MODEL or geminiModel in image.config.json)")

        order = endpoint_order(self.model)
        log.info(f"gemini_generate_start model={self.model} size={request.size} order={','.join(order)}")

        async with open_client(self._client, self.timeout_s) as client:

            async def attempt(endpoint: str) -> bytes:
                await self._record(endpoint, request, log_tag)
                if endpoint == ENDPOINT_CONTENT:
                    return await self._generate_content(client, request)
                return await self._images_generate(client, request)

            data = await first_success(order, attempt, what="Gemini generation")

        log.info(f"gemini_generate_ok model={self.model} bytes={len(data)}")
        return data

    async def _record(self, endpoint: str, request: ImageRequest, log_tag: str | None) -> None:
        if not log_tag or self._sink is None:
            return
        entry = AttemptRecord(
            endpoint=self.endpoint_url(endpoint),
            model=self.model,
            resolution=request.size,
            prompt=request.prompt,
            source=log_tag,
        )
        try:
            await self._sink.record(entry)
        except Exception as e:
            log.debug(f"attempt_record_failed endpoint={endpoint} reason={type(e).__name__}: {e}")

    async def _images_generate(self, client: httpx.AsyncClient, request: ImageRequest) -> bytes:
        body = {
            "model": self.model,
            "prompt": {"text": request.prompt},
            "size": request.size,
        }
        response = await send(
            client,
            "POST",
            self.endpoint_url(ENDPOINT_IMAGES),
            endpoint=ENDPOINT_IMAGES,
            params={"key": self.api_key},
            json=body,
        )
        b64 = first_match(json_body(response, ENDPOINT_IMAGES), IMAGE_DATA_EXTRACTORS)
        if not b64:
            raise MissingImageData("Gemini Images API: missing image data")
        return decode_image(b64, ENDPOINT_IMAGES)

    async def _generate_content(self, client: httpx.AsyncClient, request: ImageRequest) -> bytes:
        instruction = CONTENT_INSTRUCTION.format(width=request.width, height=request.height)
        body = {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": f"{request.prompt}\n\n{instruction}"}],
                }
            ],
            "generationConfig": {"temperature": 0.8},
        }
        response = await send(
            client,
            "POST",
            self.endpoint_url(ENDPOINT_CONTENT),
            endpoint=ENDPOINT_CONTENT,
            params={"key": self.api_key},
            json=body,
        )
        parts = dig(json_body(response, ENDPOINT_CONTENT), "candidates", 0, "content", "parts")
        if not isinstance(parts, list):
            parts = []
        for part in parts:
            data = first_match(part, INLINE_DATA_EXTRACTORS)
            if data:
                return decode_image(data, ENDPOINT_CONTENT)
        raise MissingInlineData("Gemini models API: missing inline image data")
