"""
Logging configuration for sampleWFC.

Usage:
    from sampleWFC.logging_config import setup_logging, get_logger
    setup_logging(console_level=logging.INFO)  # once, at startup
    logger = get_logger(__name__)

All sampleWFC.* loggers propagate to the package logger. A log file is only
written when a log directory is given.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path


ROOT_LOGGER_NAME = "sampleWFC"
LOG_FILE_NAME = "sampleWFC.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 3


def setup_logging(
    log_dir: Path | str | None = None,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Path | None:
    """
    Configure the sampleWFC logger.

    Args:
        log_dir: directory for the rotating log file, None disables the file
        log_level: level for file logging (default: DEBUG)
        console_level: level for console output (default: WARNING)

    Returns:
        Path to the log file, or None when only the console is used
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(fmt="%(levelname)-8s | %(name)-32s | %(message)s"))
    root_logger.addHandler(console_handler)

    if log_dir is None:
        return None

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    log_path = log_path / LOG_FILE_NAME
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-32s | %(funcName)-20s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root_logger.addHandler(file_handler)
    root_logger.info(f"log file: {log_path.absolute()}")
    return log_path


def get_logger(name: str) -> logging.Logger:
    """Get a logger living under the sampleWFC namespace."""
    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def log_step(logger: logging.Logger, step: int, restart: int, x: int, y: int, details: str | None = None) -> None:
    """Log one solver step."""
    details_str = f" | {details}" if details else ""
    logger.debug(f"STEP {step:06d} | RESTART {restart:03d} | cell=({x},{y}){details_str}")


def log_restart(logger: logging.Logger, step: int, restart: int, details: str | None = None) -> None:
    """Log a contradiction followed by a full-grid restart."""
    details_str = f" | {details}" if details else ""
    logger.info(f"STEP {step:06d} | RESTART {restart:03d} | contradiction, grid reset{details_str}")
