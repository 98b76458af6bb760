"""Command-line entry point: generate one wallpaper and apply it."""

from __future__ import annotations

import argparse
import asyncio
import sys

from newswall.coordinator.orchestrator import run_once
from newswall.core.config import load_image_config, load_settings
from newswall.core.exceptions import ConfigError, NewswallError
from newswall.core.logging import log, setup_logging
from newswall.core.paths import resolve_path
from newswall.core.storage import atomic_write


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="newswall",
        description="Generate a desktop wallpaper from today's headlines and apply it.",
    )
    parser.add_argument("--config", help="Path to image.config.json (default: IMAGE_CONFIG_FILE)")
    parser.add_argument("--no-apply", action="store_true", help="Save the image but don't set the wallpaper")
    parser.add_argument("--summary", metavar="PATH", help="Write a JSON run summary to PATH")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run one wallpaper cycle.

    Returns:
        Process exit code: 0 on success, 1 on any newswall error
    """
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(resolve_path(settings.log_file), debug=settings.debug)

    try:
        cfg = load_image_config(resolve_path(args.config or settings.image_config_file))
        summary = asyncio.run(run_once(settings, cfg, apply=not args.no_apply))
    except NewswallError as e:
        log.error(f"run_fail reason={type(e).__name__}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.summary:
        atomic_write(resolve_path(args.summary), summary.model_dump_json(indent=2).encode("utf-8"))
        log.info(f"summary_written path={args.summary}")

    print(f"Saved wallpaper: {summary.image_path}")
    if summary.applied:
        print("Wallpaper applied.")
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
