from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol, Sequence

import httpx

from newswall.agents import headlines as headline_agent
from newswall.agents import keywords as keyword_agent
from newswall.agents import prompting, wallpaper
from newswall.clients import provider_selector
from newswall.core.attempt_log import AttemptSink
from newswall.core.config import ImageConfig, Settings
from newswall.core.exceptions import PipelineError, ProviderError
from newswall.core.http import open_client
from newswall.core.logging import log
from newswall.core.models import ImageRequest, RunSummary
from newswall.core.paths import resolve_path, timestamp_slug
from newswall.core.storage import save_image

FALLBACK_GENERATOR = "fallback"


class ImageGenerator(Protocol):
    name: str
    model: str
    api_key: str

    async def generate(self, request: ImageRequest, log_tag: str | None = None) -> bytes: ...


class ImageFallback(Protocol):
    async def fetch(self, keywords: Sequence[str], width: int, height: int) -> bytes: ...


@dataclass(frozen=True)
class Acquisition:
    """Image bytes plus where they came from."""

    image: bytes
    generator: str
    generation_error: ProviderError | None = None


async def acquire_image(
    request: ImageRequest,
    generator: ImageGenerator | None,
    fallback: ImageFallback,
    *,
    log_tag: str | None = None,
) -> Acquisition:
    """Generate an image, or fetch a stock one if generation is unavailable or fails.

    At most one generation attempt (the generator may try two endpoints
    internally) and at most one fallback-chain run.

    Args:
        request: Prompt, size and stock search keywords
        generator: Primary image-generation client; skipped when None or without API key
        fallback: Stock-image chain
        log_tag: Attempt-log source tag passed to the generator

    Returns:
        Acquisition with the image bytes

    Raises:
        ProviderError: The fallback chain's error (usually AggregatedFailure); the
            generation failure, if any, is attached as ``generation_error``
    """
    generation_error: ProviderError | None = None

    if generator is not None and generator.api_key:
        log.info(f"acquire_generation_start provider={generator.name} model={generator.model}")
        try:
            data = await generator.generate(request, log_tag=log_tag)
            log.info(f"acquire_generation_ok provider={generator.name} bytes={len(data)}")
            return Acquisition(image=data, generator=f"{generator.model} ({generator.name})")
        except ProviderError as e:
            log.error(f"acquire_generation_fail provider={generator.name} reason={type(e).__name__}: {e}")
            generation_error = e
    else:
        name = generator.name if generator is not None else "none"
        log.warning(f"acquire_generation_skipped provider={name} reason=no_credential")

    try:
        data = await fallback.fetch(list(request.keywords), request.width, request.height)
    except ProviderError as e:
        e.generation_error = generation_error
        log.error(f"acquire_fallback_fail reason={type(e).__name__}: {e}")
        raise

    log.info(f"acquire_fallback_ok bytes={len(data)}")
    return Acquisition(image=data, generator=FALLBACK_GENERATOR, generation_error=generation_error)


async def run_once(
    settings: Settings,
    cfg: ImageConfig,
    *,
    apply: bool = True,
    now: datetime | None = None,
    client: httpx.AsyncClient | None = None,
    sink: AttemptSink | None = None,
    rng: random.Random | None = None,
) -> RunSummary:
    """Runs one wallpaper cycle: headlines → keywords → prompt → image → save → apply.

    Args:
        settings: Environment settings
        cfg: Image config
        apply: Set the desktop background after saving
        now: Local time for time-of-day and filename (default: now)
        client: Shared HTTP client for every remote call
        sink: Attempt-log sink (default: the configured JSON-lines file)
        rng: Random source for artist hint and style selection

    Returns:
        RunSummary of the run

    Raises:
        PipelineError: No headlines or no keywords
        ProviderError: No image could be acquired from any provider
        WallpaperError: Applying the background failed
    """
    now = now or datetime.now()
    rng = rng or random.Random()
    out_dir = resolve_path(settings.output_dir)
    summary = RunSummary(
        started=datetime.now(timezone.utc).isoformat(),
        desktop_env=settings.desktop_env,
        output_dir=str(out_dir),
    )
    log.info(f"run_start desktop_env={settings.desktop_env} feeds={len(cfg.feeds)}")

    async with open_client(client, settings.http_timeout_s) as http:
        # 1) Headlines
        headlines = await headline_agent.fetch_headlines(cfg.feeds, client=http)
        if not headlines:
            raise PipelineError("No headlines fetched")
        summary.headlines_count = len(headlines)
        summary.top_headlines_sample = headlines[:5]

        # 2) Keywords
        keywords = keyword_agent.extract_keywords(
            headlines, min_length=cfg.keywords.min_length, max_keywords=cfg.keywords.max
        )
        if not keywords:
            raise PipelineError("No keywords extracted")
        summary.keywords = keywords
        log.info(f"keywords_extracted keywords={','.join(keywords)}")

        # 3) Draft prompt, refined when a text provider is configured
        base_prompt = prompting.build_prompt(keywords, cfg, date=now, rng=rng)
        summary.base_prompt = base_prompt
        log.info(f"base_prompt={base_prompt}")

        refined_prompt = base_prompt
        refiner = provider_selector.prompting_client(settings, cfg, client=http, rng=rng)
        if refiner is not None:
            try:
                refined = await refiner.refine(prompting.prompt_context(keywords, headlines, cfg, date=now))
                refined_prompt = refined.prompt
                summary.selected_style = refined.selected_style
            except ProviderError as e:
                log.error(f"prompt_refine_fail reason={type(e).__name__}: {e}")
        else:
            log.warning("prompt_refine_skipped reason=no_openai_key")
        summary.refined_prompt = refined_prompt
        log.info(f"refined_prompt={refined_prompt}")

        # 4) Image
        request = ImageRequest(
            prompt=refined_prompt,
            width=cfg.resolution.width,
            height=cfg.resolution.height,
            keywords=keywords,
        )
        generator = provider_selector.image_client(
            settings, cfg, client=http, sink=sink or provider_selector.attempt_sink(settings)
        )
        fallback = provider_selector.fallback_chain(settings, client=http)
        acquisition = await acquire_image(request, generator, fallback, log_tag="auto")

    summary.generator = acquisition.generator
    if acquisition.generation_error is not None:
        summary.generation_error = str(acquisition.generation_error)
    summary.image_bytes = len(acquisition.image)

    # 5) Save
    image_path = await asyncio.to_thread(
        save_image, acquisition.image, out_dir, f"background-{timestamp_slug(now)}"
    )
    summary.image_path = str(image_path)

    # 6) Apply
    if apply:
        await wallpaper.set_wallpaper(image_path, settings.desktop_env)
        summary.applied = True

    summary.ended = datetime.now(timezone.utc).isoformat()
    log.info(f"run_complete generator={summary.generator} path={image_path}")
    return summary
