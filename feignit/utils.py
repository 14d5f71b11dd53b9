"""Logging setup shared by the command line entry points."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "WARNING") -> None:
    """Configure the feignit logger to write to stderr at the given level."""
    logger = logging.getLogger("feignit")
    logger.setLevel(level.upper())

    if not any(getattr(handler, "_feignit_handler", False) for handler in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._feignit_handler = True
        logger.addHandler(handler)
