"""Draft prompt construction from keywords, time of day and style config."""

from __future__ import annotations

import random
from datetime import datetime

from newswall.core.config import ImageConfig
from newswall.core.models import PromptContext


def time_of_day_descriptor(date: datetime | None = None) -> str:
    """Lighting/atmosphere phrase for the local hour."""
    h = (date or datetime.now()).hour
    if h < 6:
        return "pre-dawn night"
    if h < 11:
        return "morning golden light"
    if h < 14:
        return "midday bright daylight"
    if h < 18:
        return "afternoon warm light"
    if h < 21:
        return "sunset dusk glow"
    return "night cool tones"


def build_prompt(
    keywords: list[str],
    cfg: ImageConfig,
    date: datetime | None = None,
    rng: random.Random | None = None,
) -> str:
    """Assemble the draft (unrefined) image prompt.

    Args:
        keywords: Ranked keywords
        cfg: Image config (style, vibe, negative, artist hints)
        date: Local time used for the time-of-day phrase
        rng: Random source for the artist hint

    Returns:
        Positive prompt followed by an "Avoid: ..." clause when a negative is configured
    """
    rng = rng or random.Random()
    artist_hint = rng.choice(cfg.artist_hints) if cfg.artist_hints else ""

    positive = " ".join(
        part
        for part in (
            f"A visually striking wallpaper evoking: {', '.join(keywords)}.",
            f"Atmosphere/time: {time_of_day_descriptor(date)}.",
            f"Style: {cfg.style}." if cfg.style else "",
            f"Vibe: {cfg.vibe}." if cfg.vibe else "",
            f"{artist_hint}." if artist_hint else "",
        )
        if part
    )
    negative = f"Avoid: {cfg.negative}." if cfg.negative else ""
    return f"{positive} {negative}".strip()


def prompt_context(
    keywords: list[str], headlines: list[str], cfg: ImageConfig, date: datetime | None = None
) -> PromptContext:
    """Structured input for the prompt refiner."""
    return PromptContext(
        keywords=keywords,
        time_of_day=time_of_day_descriptor(date),
        style=cfg.style,
        vibe=cfg.vibe,
        negative=cfg.negative,
        headlines=headlines,
        style_pool=cfg.style_pool,
    )
