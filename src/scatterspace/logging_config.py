"""
Logging Configuration
=====================
Opt-in output for the 'scatterspace' logger.

Importing the library installs only a NullHandler. An application or a
notebook that wants to see table edits, domain updates and rebuilds calls
setup_logging() once; calling it again swaps the handlers it added earlier
and leaves everything else on the logger alone.
"""
import logging
import sys
from typing import Optional, TextIO, Union

LOGGER_NAME = "scatterspace"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"

# Marks handlers owned by setup_logging()
_OWNED = "_scatterspace_handler"


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level: {level!r}")
        return resolved
    return level


def _own(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    setattr(handler, _OWNED, True)
    return handler


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Route 'scatterspace' records to a stream and optionally a file.

    Args:
        level: Level name or number (e.g. "DEBUG", logging.INFO).
        log_file: Optional path; the file is overwritten.
        stream: Console stream, stderr by default.

    Returns:
        The configured 'scatterspace' logger.
    """
    numeric_level = _resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    for handler in list(logger.handlers):
        if getattr(handler, _OWNED, False):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    logger.addHandler(_own(logging.StreamHandler(stream or sys.stderr), numeric_level, formatter))

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        logger.addHandler(_own(file_handler, numeric_level, formatter))

    logger.debug(f"Logging initialized at {logging.getLevelName(numeric_level)}.")
    return logger
