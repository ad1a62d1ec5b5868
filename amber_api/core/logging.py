"""Logging setup for the command line entry point.

Library modules only create loggers; configuring handlers is left to the
application, which is the monitor here.
"""
import logging
import os

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str | None = None) -> None:
    level = (level or os.getenv("AMBER_LOG_LEVEL", "WARNING")).upper()
    logging.basicConfig(
        format=LOG_FORMAT,
        level=getattr(logging, level, logging.WARNING),
    )
    # httpx logs every request at INFO; keep it quiet unless debugging
    if level != "DEBUG":
        logging.getLogger("httpx").setLevel(logging.WARNING)
