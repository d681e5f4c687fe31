"""
Logging setup for SchemaLens.

``logger`` is configured for the console at import time. The API calls
``setup_logger`` again once settings are loaded, which applies the configured
level and attaches the log file if one is set.
"""
import logging
import os
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _has_file_handler(logger: logging.Logger, path: Path) -> bool:
    target = os.path.abspath(path)
    return any(
        isinstance(h, logging.FileHandler) and h.baseFilename == target
        for h in logger.handlers
    )


def setup_logger(
    name: str = "schemalens",
    level: str = "INFO",
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the SchemaLens logger.

    Safe to call repeatedly: the console handler is added once, and each
    distinct ``log_file`` gets exactly one file handler.

    Args:
        name: Logger name (default: "schemalens")
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file; parent directories are created

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        if not _has_file_handler(logger, log_path):
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger


# Default logger instance
logger = setup_logger()
