"""Pydantic models for the acquisition pipeline.

All entities live for a single run; only AttemptRecords outlive it, as lines
in the append-only attempt log.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ImageRequest(BaseModel):
    """What to generate: prompt, target size, and search terms for stock fallbacks."""

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., min_length=1, description="Image prompt")
    width: int = Field(default=2560, description="Image width in pixels")
    height: int = Field(default=1440, description="Image height in pixels")
    keywords: tuple[str, ...] = Field(default=(), description="Stock-image search terms, in rank order")

    @field_validator("width", "height")
    @classmethod
    def validate_dimensions(cls, v: int) -> int:
        """Ensure dimensions are positive."""
        if v <= 0:
            raise ValueError(f"Dimension must be positive, got {v}")
        return v

    @property
    def size(self) -> str:
        return f"{self.width}x{self.height}"


class AttemptRecord(BaseModel):
    """One outbound image-generation request, logged before it is sent."""

    endpoint: str
    model: str
    resolution: str
    prompt: str
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    source: str


class PromptContext(BaseModel):
    """Structured input for prompt refinement."""

    keywords: list[str] = Field(default_factory=list)
    time_of_day: str = ""
    style: str = ""
    vibe: str = ""
    negative: str = ""
    headlines: list[str] = Field(default_factory=list)
    style_pool: list[str] = Field(default_factory=list)


class RefinedPrompt(BaseModel):
    """Final imagery prompt returned by the text provider."""

    prompt: str
    selected_style: str = ""


class RunSummary(BaseModel):
    """What a single wallpaper run did (written with --summary)."""

    started: str
    ended: str = ""
    desktop_env: str
    output_dir: str
    headlines_count: int = 0
    top_headlines_sample: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    base_prompt: str = ""
    refined_prompt: str = ""
    selected_style: str = ""
    generator: str = ""
    generation_error: str | None = None
    image_path: str = ""
    image_bytes: int = 0
    applied: bool = False
