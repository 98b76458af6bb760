"""Apply an image as the desktop background via gsettings."""

from __future__ import annotations

import asyncio
from pathlib import Path

from newswall.core.exceptions import WallpaperError
from newswall.core.logging import log
from newswall.core.paths import to_file_uri

GSETTINGS = "gsettings"

SCHEMAS = {
    "gnome": "org.gnome.desktop.background",
    "cinnamon": "org.cinnamon.desktop.background",
}


async def gsettings_set(schema: str, key: str, value: str) -> None:
    """Run ``gsettings set <schema> <key> <value>``.

    Raises:
        WallpaperError: If gsettings is missing or exits non-zero
    """
    log.debug(f"gsettings_set schema={schema} key={key} value={value}")
    try:
        proc = await asyncio.create_subprocess_exec(
            GSETTINGS,
            "set",
            schema,
            key,
            value,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise WallpaperError(f"{GSETTINGS} not found; is this a GNOME/Cinnamon desktop?") from e

    _, stderr = await proc.communicate()
    if proc.returncode != 0:
        raise WallpaperError(
            f"gsettings set {schema} {key} failed ({proc.returncode}): "
            f"{stderr.decode(errors='replace').strip()}"
        )


async def _set_optional(schema: str, key: str, value: str) -> None:
    try:
        await gsettings_set(schema, key, value)
    except WallpaperError as e:
        log.warning(f"wallpaper_optional_key_failed key={key} reason={e}")


async def set_wallpaper(path: str | Path, desktop_env: str = "cinnamon") -> None:
    """Point the desktop background at ``path``.

    GNOME: picture-uri (required), picture-uri-dark and picture-options=zoom (best-effort).
    Anything else is treated as Cinnamon: picture-uri (required), picture-options=zoom (best-effort).

    Raises:
        WallpaperError: If the required picture-uri key could not be set
    """
    uri = to_file_uri(path)
    env = desktop_env.lower()

    if env == "gnome":
        schema = SCHEMAS["gnome"]
        await gsettings_set(schema, "picture-uri", uri)
        await _set_optional(schema, "picture-uri-dark", uri)
        await _set_optional(schema, "picture-options", "zoom")
    else:
        schema = SCHEMAS["cinnamon"]
        await gsettings_set(schema, "picture-uri", uri)
        await _set_optional(schema, "picture-options", "zoom")

    log.info(f"wallpaper_applied desktop_env={env} uri={uri}")
