"""Logging configuration for the RentDesk API server.

Records go to stdout and to a size-rotated file. The level comes from the
LOG_LEVEL setting (default INFO); DEBUG also enables the per-request timing
lines written by src.api.deps.log_debug and lets chatty libraries through.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers held at WARNING unless the server runs at DEBUG
QUIET_LOGGERS = ("stripe", "multipart", "sqlalchemy.engine", "uvicorn.access")


def get_log_level(level_name: str | None = None) -> int:
    """Resolve a level name, falling back to LOG_LEVEL and then INFO."""
    level_str = (level_name or os.getenv("LOG_LEVEL", "INFO")).upper()
    return LOG_LEVEL_MAP.get(level_str, logging.INFO)


def _attach(root: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)


def setup_server_logging(
    log_file: str = "logs/server.log",
    level_name: str | None = None,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> None:
    """
    Configure the root logger for the API server.

    Args:
        log_file: Path to the log file; its directory is created if missing
        level_name: Level name overriding LOG_LEVEL (optional)
        max_bytes: Size at which the file is rotated
        backup_count: Rotated files kept next to the active one

    Calling it again replaces the handlers instead of adding more.
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    log_level = get_log_level(level_name)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    _attach(root_logger, logging.StreamHandler(sys.stdout), log_level)
    _attach(
        root_logger,
        RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"),
        log_level,
    )

    library_level = logging.NOTSET if log_level <= logging.DEBUG else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    logging.getLogger(__name__).info(
        f"Logging to stdout and {log_path} at {logging.getLevelName(log_level)}"
    )


__all__ = ["LOG_LEVEL_MAP", "QUIET_LOGGERS", "get_log_level", "setup_server_logging"]
