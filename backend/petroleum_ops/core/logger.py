"""
Application logger.

Modules use ``logging.getLogger(__name__)``; everything under the
``petroleum_ops`` namespace inherits the handler configured here.
"""

import logging
import sys

LOGGER_NAME = "petroleum_ops"
HANDLER_NAME = "petroleum_ops.stdout"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger(LOGGER_NAME)


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stream handler to the application logger (idempotent)."""
    logger.setLevel(level)
    if not any(h.get_name() == HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
