"""
Logging setup for the interchange entry points.
The API, the Streamlit frontend and the command-line preview each call
setup_logging once at start-up with their own log file under LOG_DIR.
"""

import logging
import sys
from typing import Optional
from config import config

# Libraries that log chatty DEBUG/INFO records during uploads and report rendering:
# python-multipart parses form uploads, reportlab pulls in PIL for the chart
# images and fontTools for font subsetting, uvicorn logs every access line.
QUIET_LOGGERS = {
    "multipart": logging.WARNING,
    "PIL": logging.WARNING,
    "fontTools": logging.WARNING,
    "uvicorn.access": logging.WARNING,
}


def _resolve_level(log_level: Optional[str]) -> int:
    name = (log_level or config.LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level!r}")
    return level


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=config.LOG_FORMAT, datefmt=config.LOG_DATE_FORMAT))
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    console_output: bool = True
) -> logging.Logger:
    """
    Route every module's logger through the root logger.

    Args:
        log_level: Level name such as "DEBUG" or "WARNING" (default: LOG_LEVEL)
        log_file: File name for this entry point, created under LOG_DIR
        console_output: Also write to stdout

    Returns:
        Configured root logger

    Raises:
        ValueError: If log_level is not a logging level name
    """
    level = _resolve_level(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if console_output:
        root_logger.addHandler(_handler(logging.StreamHandler(sys.stdout), level))

    if log_file:
        # get_log_path creates LOG_DIR on first use
        log_path = config.get_log_path(log_file)
        root_logger.addHandler(_handler(logging.FileHandler(log_path, mode="a", encoding="utf-8"), level))

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(level, quiet_level))

    return root_logger
