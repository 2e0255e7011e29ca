"""
Logging Configuration.

Every module obtains its logger through ``get_logger(__name__)`` so that the
whole core shares one format. The core itself never writes to files; the host
application decides where records go by attaching its own handlers.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s | %(name)s | %(levelname)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

_default_level = logging.WARNING
_CORE_PACKAGES = {"common", "geospatial", "ephemeris", "validation"}


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Get a logger configured for the navigation core.

    Parameters
    ----------
    name : str
        Logger name (typically __name__).
    level : int, optional
        Logging level. When omitted the level set by
        ``configure_logging`` (default WARNING) applies.

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level if level is not None else _default_level)
    return logger


def configure_logging(level: int) -> None:
    """Set the level of every logger created through ``get_logger``.

    Parameters
    ----------
    level : int
        New logging level, e.g. ``logging.DEBUG``.
    """
    global _default_level
    _default_level = level

    for name, logger in logging.Logger.manager.loggerDict.items():
        if isinstance(logger, logging.Logger) and name.split(".")[0] in _CORE_PACKAGES:
            logger.setLevel(level)

