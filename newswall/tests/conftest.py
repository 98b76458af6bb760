"""Shared fixtures: mock HTTP transports, capturing attempt sinks, sample images."""

from __future__ import annotations

import io
import logging
from typing import Callable

import httpx
import pytest
from PIL import Image

from newswall.core.logging import log
from newswall.core.models import AttemptRecord, ImageRequest


class CapturingSink:
    """Attempt sink that keeps records in memory."""

    def __init__(self):
        self.records: list[AttemptRecord] = []

    async def record(self, entry: AttemptRecord) -> None:
        self.records.append(entry)


class FailingSink:
    """Attempt sink whose writes always fail (e.g. disk full)."""

    def __init__(self):
        self.calls = 0

    async def record(self, entry: AttemptRecord) -> None:
        self.calls += 1
        raise OSError(28, "No space left on device")


@pytest.fixture
def capturing_sink() -> CapturingSink:
    return CapturingSink()


@pytest.fixture
def failing_sink() -> FailingSink:
    return FailingSink()


@pytest.fixture
def mock_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Factory: AsyncClient whose requests are answered by ``handler``."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory


def _image_bytes(fmt: str) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), (200, 40, 40)).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return _image_bytes("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return _image_bytes("JPEG")


@pytest.fixture
def image_request() -> ImageRequest:
    return ImageRequest(
        prompt="A visually striking wallpaper evoking: harbor, storm, election.",
        width=1920,
        height=1080,
        keywords=["harbor", "storm", "election", "market", "rocket", "festival"],
    )


@pytest.fixture
def reset_logger():
    """Detach handlers installed by setup_logging() once the test is done."""
    yield log
    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()
    log.setLevel(logging.NOTSET)
