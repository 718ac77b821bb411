"""Logging configuration for node-tainter.

The daemon's only output channel is its log, so the console handler follows
the configured level instead of showing warnings only.
"""

import logging
import sys
from pathlib import Path

from node_tainter.exceptions import ConfigurationError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_level(level: str) -> int:
    """Convert a level name such as ``info`` to its logging constant.

    Raises:
        ConfigurationError: If the name is not a known level
    """
    name = level.strip().upper()
    if name not in LOG_LEVELS:
        raise ConfigurationError(
            f"Invalid log level: '{level}'", f"Use one of: {', '.join(LOG_LEVELS)}"
        )
    return getattr(logging, name)


def setup_logging(level: str = "INFO", log_file: Path | None = None, verbose: bool = False) -> None:
    """Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file, always written at DEBUG
        verbose: If True, set level to DEBUG

    Raises:
        ConfigurationError: If the level is unknown
    """
    console_level = logging.DEBUG if verbose else parse_level(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    root_level = console_level
    if log_file:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
        except OSError as e:
            logging.warning(f"Failed to create log file handler: {e}")
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            root_level = logging.DEBUG
    root_logger.setLevel(root_level)

    # Script runs and API calls make these chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("kubernetes").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
