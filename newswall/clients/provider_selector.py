"""Provider selection from settings.

IMAGE_PROVIDER picks the primary generative provider (gemini default, or
openai). Missing keys are not an error here: the orchestrator sees an empty
credential and goes straight to the stock-image fallback.
"""

from __future__ import annotations

import random

import httpx

from newswall.clients.gemini import GeminiImageClient
from newswall.clients.openai_image import OpenAIImageClient
from newswall.clients.openai_text import PromptRefiner
from newswall.clients.stock import StockImageChain
from newswall.core.attempt_log import AttemptSink, JsonlAttemptSink
from newswall.core.config import ImageConfig, Settings, resolve_gemini_model, resolve_text_model
from newswall.core.exceptions import ConfigError
from newswall.core.paths import resolve_path

SUPPORTED_IMAGE_PROVIDERS = ("gemini", "openai")


def attempt_sink(settings: Settings) -> AttemptSink:
    """File sink for the configured attempt log."""
    return JsonlAttemptSink(resolve_path(settings.attempt_log_file))


def image_client(
    settings: Settings,
    cfg: ImageConfig,
    *,
    client: httpx.AsyncClient | None = None,
    sink: AttemptSink | None = None,
) -> GeminiImageClient | OpenAIImageClient:
    """Returns the configured image-generation client.

    Raises:
        ConfigError: If IMAGE_PROVIDER names an unknown provider
    """
    provider = settings.image_provider

    if provider == "gemini":
        return GeminiImageClient(
            api_key=settings.gemini_api_key,
            model=resolve_gemini_model(settings, cfg),
            client=client,
            sink=sink,
            timeout_s=settings.http_timeout_s,
        )

    elif provider == "openai":
        return OpenAIImageClient(
            api_key=settings.openai_api_key,
            client=client,
            sink=sink,
            timeout_s=settings.http_timeout_s,
        )

    else:
        raise ConfigError(
            f"Unknown image provider: {provider}. "
            f"Supported providers: {', '.join(SUPPORTED_IMAGE_PROVIDERS)}."
        )


def prompting_client(
    settings: Settings,
    cfg: ImageConfig,
    *,
    client: httpx.AsyncClient | None = None,
    rng: random.Random | None = None,
) -> PromptRefiner | None:
    """Prompt refiner when OPENAI_API_KEY is set, else None (draft prompt is used as-is)."""
    if not settings.openai_api_key:
        return None
    return PromptRefiner(
        api_key=settings.openai_api_key,
        model=resolve_text_model(settings, cfg),
        client=client,
        rng=rng,
        timeout_s=settings.http_timeout_s,
    )


def fallback_chain(settings: Settings, *, client: httpx.AsyncClient | None = None) -> StockImageChain:
    return StockImageChain(client=client, timeout_s=settings.http_timeout_s)
