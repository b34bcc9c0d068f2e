"""Unified logging for compose-parse with console and file output.

Stdout carries the response line only, so console logging goes to stderr.
"""
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)

ROOT_LOGGER_NAME = "composeparse"

# Track if file logging has been set up
_file_logging_configured = False


def _root_logger() -> logging.Logger:
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)

    # Only add console handler if not already present
    if not any(isinstance(h, RichHandler) for h in root_logger.handlers):
        handler = RichHandler(console=console, show_path=False, show_time=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler.setLevel(logging.WARNING)
        root_logger.addHandler(handler)
        root_logger.setLevel(logging.DEBUG)
        root_logger.propagate = False

    return root_logger


def set_verbose(verbose: bool = True):
    """Switch console logging between WARNING (default) and DEBUG."""
    for handler in _root_logger().handlers:
        if isinstance(handler, RichHandler):
            handler.setLevel(logging.DEBUG if verbose else logging.WARNING)


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False):
    """Set up file logging for engine runs.

    Args:
        log_file: Path to log file; nothing is set up when omitted
        verbose: Enable debug-level logging

    Note:
        Creates the log directory if it doesn't exist.
    """
    global _file_logging_configured

    if _file_logging_configured or not log_file:
        return

    target_log_file = Path(log_file)
    target_log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = _root_logger()
    file_handler = logging.FileHandler(target_log_file)
    file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Detailed format for file logs
    file_formatter = logging.Formatter(
        "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)

    _file_logging_configured = True

    root_logger.info(f"compose-parse logging initialized: {target_log_file}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger that reports through the shared stderr console.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger whose records reach the Rich console handler

    Note:
        File logging must be enabled separately via setup_file_logging()
    """
    _root_logger()
    return logging.getLogger(name)
