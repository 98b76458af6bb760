from __future__ import annotations

import logging
import sys
from pathlib import Path

# Log rotation settings
MAX_LOG_LINES = 10000
TRUNCATE_THRESHOLD = 15000  # Truncate when exceeding this many lines

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

log = logging.getLogger("newswall")


def truncate_log_file(log_path: Path) -> None:
    """Truncate log file to last MAX_LOG_LINES if it exceeds TRUNCATE_THRESHOLD.

    This prevents unbounded log file growth. Called once per run before the
    file handler is attached.
    """
    if not log_path.exists():
        return

    try:
        with open(log_path, "r", encoding="utf-8") as f:
            lines = f.readlines()

        if len(lines) > TRUNCATE_THRESHOLD:
            # Keep only the last MAX_LOG_LINES
            truncated_lines = lines[-MAX_LOG_LINES:]

            # Write back atomically
            temp_path = log_path.with_suffix(log_path.suffix + ".tmp")
            with open(temp_path, "w", encoding="utf-8") as f:
                f.writelines(truncated_lines)

            temp_path.replace(log_path)

            print(
                f"LOG_ROTATION: Truncated {len(lines)} lines to {len(truncated_lines)} lines",
                file=sys.stderr,
            )
    except OSError as e:
        print(f"LOG_ROTATION_ERROR: Failed to truncate log file: {e}", file=sys.stderr)


def setup_logging(log_file: str | Path | None = None, debug: bool = False) -> logging.Logger:
    """Configure the ``newswall`` logger with a console handler and an optional file handler.

    Args:
        log_file: Run log path (parent directories are created); None for console only
        debug: Log at DEBUG instead of INFO

    Returns:
        The configured package logger
    """
    level = logging.DEBUG if debug else logging.INFO
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    log.addHandler(console)

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        truncate_log_file(path)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        log.addHandler(file_handler)

    log.setLevel(level)
    return log
