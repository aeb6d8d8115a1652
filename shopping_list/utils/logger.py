"""Logging for the shopping list assistant.

Everything logs under the "shopping_list" logger. Cart mutations go to DEBUG,
rejected cart operations to INFO, LLM retries to WARNING. The app calls
`configure_logging()` once at startup; library code only calls `get_logger()`.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from shopping_list.utils import config

APP_LOGGER = "shopping_list"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def level_from_name(name: str, default: int = logging.INFO) -> int:
    """Map 'DEBUG'/'info'/... to a logging level; unknown names give `default`."""
    level = logging.getLevelName((name or "").strip().upper())
    return level if isinstance(level, int) else default


def setup_logger(
    name: str = APP_LOGGER,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure and return a logger. Calling it again for a configured logger is a no-op.

    Args:
        name: Logger name.
        level: Logging level, as an int or a name like "DEBUG".
        log_file: Optional path to log file. If None, logs to stderr only.
    """
    log = logging.getLogger(name)
    if log.handlers:
        return log

    log.setLevel(level_from_name(level) if isinstance(level, str) else level)
    fmt = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    h = logging.StreamHandler(sys.stderr)
    h.setFormatter(fmt)
    log.addHandler(h)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(fmt)
        log.addHandler(fh)

    return log


def configure_logging() -> logging.Logger:
    """Set up the app logger from LOG_LEVEL / LOG_FILE in the environment (.env)."""
    return setup_logger(APP_LOGGER, level=config.log_level(), log_file=config.log_file())


def get_logger(name: str = APP_LOGGER) -> logging.Logger:
    """Return the application logger. Use after setup_logger has been called."""
    return logging.getLogger(name)
