# src/foosrank/logging_config.py

"""Root logging setup for the FoosRank service."""

import logging
import sys

from foosrank import config

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | None = None) -> None:
    """Send all records to stderr at LOG_LEVEL.

    Safe to call more than once; later calls only change the level.
    """
    level = (level or config.LOG_LEVEL).upper()
    root_logger = logging.getLogger()

    if not getattr(root_logger, "_foosrank_configured", False):
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(handler)
        root_logger._foosrank_configured = True  # type: ignore[attr-defined]

    root_logger.setLevel(level)
    # SQL echo is controlled by DB_ECHO, keep the engine logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.captureWarnings(True)
