"""Loguru logging configuration.

Human-readable lines by default; ``LOG_JSON=true`` switches every sink to
Loguru's serialized JSON records for log shippers.
"""

import sys
from pathlib import Path
from typing import Any

from loguru import logger

_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} | {message}"
_LOG_FILENAME = "buyer-api.log"


def setup_logging(log_level: str = "INFO", log_dir: str | None = None, *, json_output: bool = False) -> None:
    """Replace Loguru's sinks with the service's stderr and optional file sinks.

    Args:
        log_level: Minimum log level to emit (case-insensitive).
        log_dir: When set, also write to ``buyer-api.log`` in this directory,
            rotated every 24 hours and kept for 7 days.
        json_output: Emit serialized JSON records instead of formatted lines.
    """
    level = log_level.upper()
    sink_options: dict[str, Any] = {"level": level, "serialize": json_output}
    if not json_output:
        sink_options["format"] = _LOG_FORMAT

    logger.remove()
    logger.add(sys.stderr, **sink_options)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        logger.add(log_path / _LOG_FILENAME, rotation="24h", retention="7 days", **sink_options)
