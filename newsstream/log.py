import logging
import sys

LOGGER_NAME = "newsstream"
LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(threadName)s] - %(name)s - %(message)s"


def setup_logger(level="INFO"):
    """Attach a single stream handler to the package logger and return it."""
    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level)

    if not any(getattr(h, "_newsstream", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._newsstream = True
        logger.addHandler(handler)
    return logger
