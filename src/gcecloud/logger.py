import logging
import os

from rich.logging import RichHandler

LOG_LEVEL_ENV = "GCECLOUD_LOG_LEVEL"


def setup_logger(name: str = "gcecloud", level: int | str | None = None) -> logging.Logger:
    """
    Returns the package logger with a single RichHandler attached.
    Level comes from the argument, then $GCECLOUD_LOG_LEVEL, then WARNING.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Calling again only changes the level
    if not logger.handlers:
        handler = RichHandler(rich_tracebacks=True, markup=False, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    return logger


# Phase transitions log at INFO, orphaned resources at WARNING.
logger = setup_logger()
