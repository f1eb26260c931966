"""Logging for siteremap.

All module loggers are children of the ``siteremap`` package logger, which
carries the single console handler. File logging is opt-in per command
(``--log-file``/``--verbose``) and writes next to the sites file unless a
path is given.
"""
import logging
import tempfile
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "siteremap"
LOG_FILE_NAME = "siteremap.log"

console = Console(stderr=True)

_file_handler: Optional[logging.FileHandler] = None


def default_log_file() -> Path:
    """Return the log file used when none is given: beside the sites file."""
    from siteremap.core.config import get_config
    return get_config().sites_file.parent / LOG_FILE_NAME


def _package_logger() -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, show_path=False, level=logging.INFO)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> Path:
    """Send siteremap logs to a file, replacing any earlier log file.

    Args:
        log_file: Path to log file (defaults to siteremap.log beside the sites file)
        verbose: Log debug messages to the file

    Returns:
        Path of the file actually written, which is in the temp directory if
        the requested directory cannot be created
    """
    global _file_handler

    target = Path(log_file) if log_file else default_log_file()
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        target = Path(tempfile.gettempdir()) / LOG_FILE_NAME

    logger = _package_logger()
    if _file_handler is not None:
        logger.removeHandler(_file_handler)
        _file_handler.close()

    level = logging.DEBUG if verbose else logging.INFO
    _file_handler = logging.FileHandler(target)
    _file_handler.setLevel(level)
    _file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    logger.addHandler(_file_handler)
    # Console handler stays at INFO; only the file sees debug output
    logger.setLevel(level)

    logger.info(f"Logging to {target}")
    return target


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the siteremap package logger.

    Args:
        name: Logger name (typically __name__)
    """
    _package_logger()
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
