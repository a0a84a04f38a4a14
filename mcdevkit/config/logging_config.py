"""
Logging configuration for mcdevkit.

Console logging goes to stderr because a running server owns stdout. When
colour is on and stderr is a terminal the rich handler is used, otherwise a
plain one. Everything at DEBUG and above is also kept in a rotating log file.
"""

import logging
import logging.handlers
import re
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .settings import config

# Console used for log output
console = Console(stderr=True)

PLAIN_FORMAT = "[%(levelname)s] %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"

# Chatty transport libraries, kept at WARNING
NOISY_LOGGERS = ("httpx", "httpcore", "urllib3")

_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([KMG]?B)?\s*$", re.IGNORECASE)
_SIZE_UNITS = {"B": 1, "KB": 1024, "MB": 1024 ** 2, "GB": 1024 ** 3}
DEFAULT_LOG_SIZE = 10 * 1024 ** 2


def _console_handler(level: int, rich_output: bool) -> logging.Handler:
    if rich_output and sys.stderr.isatty():
        handler: logging.Handler = RichHandler(
            console=console,
            show_time=False,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

    handler.setLevel(level)
    return handler


def _file_handler() -> logging.Handler:
    log_file = Path(config.get("logging.log_file"))
    log_file.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=_parse_size(config.get("logging.max_log_size", "10MB")),
        backupCount=config.get("logging.backup_count", 5),
        encoding='utf-8'
    )
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler.setLevel(logging.DEBUG)
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    enable_file_logging: Optional[bool] = None,
    enable_rich_logging: Optional[bool] = None,
) -> None:
    """
    Configure the root logger, replacing any handlers set up before.

    Args:
        log_level: Console level name, defaults to ``logging.level``
        enable_file_logging: Defaults to ``logging.file_logging``
        enable_rich_logging: Defaults to ``ui.colored_output``
    """
    if log_level is None:
        log_level = config.get("logging.level", "INFO")
    if enable_file_logging is None:
        enable_file_logging = config.get("logging.file_logging", True)
    if enable_rich_logging is None:
        enable_rich_logging = config.get("ui.colored_output", True)

    level = getattr(logging, str(log_level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    root_logger.addHandler(_console_handler(level, enable_rich_logging))

    if enable_file_logging:
        try:
            root_logger.addHandler(_file_handler())
        except OSError as e:
            logging.getLogger(__name__).warning(f"Failed to setup file logging: {e}")
        else:
            # Console handler keeps its own level; the file gets DEBUG too
            root_logger.setLevel(logging.DEBUG)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging setup complete. Level: {log_level}, File: {enable_file_logging}"
    )


def _parse_size(size_str) -> int:
    """Parse a size such as '10MB' or '512KB' to bytes; bare numbers are bytes."""
    match = _SIZE_RE.match(str(size_str))
    if not match:
        return DEFAULT_LOG_SIZE
    number, unit = match.groups()
    return int(float(number) * _SIZE_UNITS[(unit or "B").upper()])
