"""Loguru helpers for consistent logging in CLI commands.

stdout carries protocol lines only, so every sink here writes to stderr or a file.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

STDERR_FORMAT = "<dim>{time:HH:mm:ss.SSS}</dim> | <level>{level: <8}</level> | <level>{message}</level>"

_SINK_IDS: dict[str, int] = {}


def log_dir() -> Path:
    return Path.home() / ".debugrelay" / "logs"


def configure_stderr_logging(level: str = "INFO", *, enabled: bool = True) -> None:
    """Replace the default sink with a stderr sink at the given level."""
    logger.remove()
    _SINK_IDS.clear()
    logger.add(sys.stderr, level=level.upper(), format=STDERR_FORMAT)
    if enabled:
        logger.enable("debugrelay")
    else:
        logger.disable("debugrelay")


def ensure_rotating_log_file(name: str, level: str = "INFO") -> Path:
    """Ensure a rotating log sink for the given command name."""
    log_path = log_dir() / f"{name}.log"
    if name in _SINK_IDS:
        return log_path
    log_path.parent.mkdir(parents=True, exist_ok=True)
    sink_id = logger.add(
        str(log_path),
        level=level.upper(),
        rotation="10 MB",
        retention="14 days",
        enqueue=True,
        encoding="utf-8",
        backtrace=False,
        diagnose=False,
    )
    _SINK_IDS[name] = sink_id
    return log_path
