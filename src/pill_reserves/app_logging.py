"""Logging configuration helpers."""

import logging
import os

LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"
HANDLER_NAME = "pill_reserves"

_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def configure_logging(level: str | None = None) -> None:
    """Send application and server logs to one stderr handler.

    The level comes from ``level``, then ``PILLRESERVES_LOG_LEVEL``, then INFO.
    Calling this again only updates the level.
    """
    resolved = (level or os.getenv("PILLRESERVES_LOG_LEVEL") or "INFO").upper()
    logger = logging.getLogger("pill_reserves")
    logger.setLevel(resolved)
    if any(handler.name == HANDLER_NAME for handler in logger.handlers):
        return
    handler = logging.StreamHandler()
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    for name in _SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = [handler]
        server_logger.propagate = False
