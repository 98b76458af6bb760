"""Attempt-log sinks.

An attempt sink records one AttemptRecord per outbound image-generation
request. Sinks are best-effort: record() never raises, and a sink failure
never changes what the pipeline returns.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol

from newswall.core.logging import log
from newswall.core.models import AttemptRecord
from newswall.core.storage import append_json_line


class AttemptSink(Protocol):
    """Capability to record an attempt. Implementations must not raise."""

    async def record(self, entry: AttemptRecord) -> None: ...


class JsonlAttemptSink:
    """Appends attempts as JSON lines to a fixed file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    async def record(self, entry: AttemptRecord) -> None:
        try:
            await asyncio.to_thread(append_json_line, self.path, entry.model_dump())
        except Exception as e:
            log.debug(f"attempt_log_write_failed path={self.path} reason={type(e).__name__}: {e}")
