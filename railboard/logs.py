"""Logging setup; the terminal belongs to the live board, so logs go to a file."""

from __future__ import annotations

import logging
from pathlib import Path

from railboard.config import LoggingConfig
from railboard.errors import ConfigError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILENAME = "railboard.log"


def configure_logging(config: LoggingConfig) -> Path:
    """Route the root logger to ``<log_dir>/railboard.log``; returns the file path."""
    level = logging.getLevelName(str(config.level).upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown logging level: {config.level}")

    log_dir = Path(config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILENAME

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        filename=str(log_path),
        encoding="utf-8",
        force=True,
    )
    return log_path


__all__ = ["configure_logging"]
