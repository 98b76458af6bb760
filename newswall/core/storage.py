from __future__ import annotations

import io
import json
import os
import threading
from pathlib import Path
from typing import Any

from PIL import Image, UnidentifiedImageError

from newswall.core.logging import log

LOCK = threading.Lock()

# Pillow format name -> file extension
_EXTENSIONS = {"JPEG": "jpg", "PNG": "png", "WEBP": "webp", "GIF": "gif", "BMP": "bmp"}


def atomic_write(path: str | Path, content: bytes) -> None:
    """Atomically writes bytes to file using temp + rename.

    Args:
        path: Path to file (parent directory is created)
        content: Bytes to write
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_name(f".tmp-{p.name}")
    with open(tmp, "wb") as f:
        f.write(content)
    os.replace(tmp, p)


def append_json_line(path: str | Path, item: dict[str, Any]) -> None:
    """Thread-safe append of one JSON object as a single line.

    The line is written with one write() on a file opened in append mode, so
    concurrent appenders never interleave or rewrite each other's lines.

    Args:
        path: Path to JSON-lines file (parent directory is created)
        item: Dictionary to append
    """
    p = Path(path)
    line = json.dumps(item, ensure_ascii=False) + "\n"
    with LOCK:
        p.parent.mkdir(parents=True, exist_ok=True)
        with open(p, "a", encoding="utf-8") as f:
            f.write(line)


def image_extension(data: bytes, default: str = "png") -> str:
    """Sniff the image format from its bytes.

    Returns:
        File extension without dot; ``default`` when Pillow can't identify the data
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format or ""
    except (UnidentifiedImageError, OSError):
        log.warning(f"image_format_unknown bytes={len(data)} using={default}")
        return default
    return _EXTENSIONS.get(fmt.upper(), default)


def save_image(data: bytes, out_dir: str | Path, filename_base: str = "background") -> Path:
    """Write image bytes to ``<out_dir>/<filename_base>.<ext>`` atomically.

    Args:
        data: Raw image bytes (not modified)
        out_dir: Output directory (created if missing)
        filename_base: Filename without extension

    Returns:
        Path to the saved file
    """
    ext = image_extension(data)
    path = Path(out_dir) / f"{filename_base}.{ext}"
    atomic_write(path, data)
    log.info(f"image_saved path={path} bytes={len(data)}")
    return path
