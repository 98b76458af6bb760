"""OpenAI image generation (single endpoint, no internal fallback)."""

from __future__ import annotations

import httpx

from newswall.core.attempt_log import AttemptSink
from newswall.core.exceptions import MissingCredential, MissingImageData
from newswall.core.extract import decode_image, dig
from newswall.core.http import json_body, open_client, send
from newswall.core.logging import log
from newswall.core.models import AttemptRecord, ImageRequest

BASE_URL = "https://api.openai.com/v1"
DEFAULT_IMAGE_MODEL = "gpt-image-1"


class OpenAIImageClient:
    """OpenAI ``images/generations`` client returning raw image bytes."""

    name = "openai"

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_IMAGE_MODEL,
        *,
        client: httpx.AsyncClient | None = None,
        sink: AttemptSink | None = None,
        timeout_s: float = 60.0,
        base_url: str = BASE_URL,
    ):
        self.api_key = api_key or ""
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._client = client
        self._sink = sink

    async def generate(self, request: ImageRequest, log_tag: str | None = None) -> bytes:
        """Generate one image.

        Raises:
            MissingCredential: Empty API key (no request made)
            ProviderHTTPError: Non-success status
            MissingImageData: No ``data[0].b64_json`` in the response
        """
        if not self.api_key:
            raise MissingCredential("OPENAI_API_KEY is required for OpenAI image generation")

        url = f"{self.base_url}/images/generations"
        if log_tag and self._sink is not None:
            try:
                await self._sink.record(
                    AttemptRecord(
                        endpoint=url,
                        model=self.model,
                        resolution=request.size,
                        prompt=request.prompt,
                        source=log_tag,
                    )
                )
            except Exception as e:
                log.debug(f"attempt_record_failed endpoint=images/generations reason={type(e).__name__}: {e}")

        async with open_client(self._client, self.timeout_s) as client:
            response = await send(
                client,
                "POST",
                url,
                endpoint="images/generations",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={"model": self.model, "prompt": request.prompt, "size": request.size},
            )
            b64 = dig(json_body(response, "images/generations"), "data", 0, "b64_json")

        if not b64:
            raise MissingImageData("OpenAI response missing image data")
        log.info(f"openai_image_ok model={self.model} bytes={len(b64) * 3 // 4}")
        return decode_image(b64, "images/generations")
