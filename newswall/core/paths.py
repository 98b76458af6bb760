from __future__ import annotations

from datetime import datetime
from pathlib import Path

# Project root is 2 levels up from this file (newswall/core/paths.py -> root)
PROJECT_ROOT = Path(__file__).parent.parent.parent


def resolve_path(path: str | Path, base: Path | None = None) -> Path:
    """Resolve a configured path against a base directory.

    Args:
        path: Absolute path, or path relative to ``base``
        base: Directory for relative paths (defaults to the current working directory)

    Returns:
        Absolute Path
    """
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return ((base or Path.cwd()) / p).resolve()


def timestamp_slug(d: datetime | None = None) -> str:
    """Minute-resolution slug used in output filenames, e.g. ``20261019-0745``."""
    d = d or datetime.now()
    return d.strftime("%Y%m%d-%H%M")


def to_file_uri(path: str | Path) -> str:
    """Build a ``file://`` URI for an absolute path (spaces escaped)."""
    p = Path(path).resolve()
    return "file://" + str(p).replace(" ", "%20")
