"""Logging setup for the command line."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Configure the servicedesk logger with a single stderr handler.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR)

    Returns:
        The package logger
    """
    log_level = getattr(logging, level.upper(), None)
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: '{level}'")

    logger = logging.getLogger("servicedesk")
    logger.setLevel(log_level)

    # Re-running a command in the same process must not stack handlers
    logger.handlers = []

    handler = logging.StreamHandler()
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)

    return logger


def teardown_logging() -> None:
    """Detach handlers installed by setup_logging."""
    logger = logging.getLogger("servicedesk")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
