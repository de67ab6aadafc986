"""Central logging setup for the service."""
from __future__ import annotations
import logging
import os
import sys

NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: int | str | None = None) -> None:
    """
    Configure root logger for the proxy.

    Args:
        level: Logging level as an int or a name such as "DEBUG". Falls back to
            the LOG_LEVEL environment variable, then INFO.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    fmt = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # Request lines from httpx would duplicate our own outbound logging.
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
