"""Logging setup."""

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Configure a single stdout handler on the root logger.

    If handlers are already installed (e.g. by uvicorn) only the level is aligned.
    """
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level.upper())
        return

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    root.addHandler(handler)
    root.setLevel(level.upper())
