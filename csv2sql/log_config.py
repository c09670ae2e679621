import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "[%(levelname)s] %(message)s"


def setup_logger(name: str = "csv2sql", level: int = logging.INFO,
                 stream: Optional[TextIO] = None) -> logging.Logger:
    """Send the package's log records to stderr; stdout is reserved for query results."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
