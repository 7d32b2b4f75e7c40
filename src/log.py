"""Log utilities."""

import logging
from typing import Optional

from rich.logging import RichHandler

_level = logging.INFO


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Retrieve logger with the provided name, writing through a rich console handler."""
    logger = logging.getLogger(name)
    logger.setLevel(level if level is not None else _level)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        logger.handlers = [RichHandler(show_path=False)]
    logger.propagate = False
    return logger


def set_verbosity(verbose: bool) -> None:
    """Switch the service loggers between INFO and DEBUG level."""
    global _level  # pylint: disable=global-statement
    _level = logging.DEBUG if verbose else logging.INFO
    logging.getLogger().setLevel(_level)
    for logger in logging.Logger.manager.loggerDict.values():
        if isinstance(logger, logging.Logger) and any(
            isinstance(handler, RichHandler) for handler in logger.handlers
        ):
            logger.setLevel(_level)
