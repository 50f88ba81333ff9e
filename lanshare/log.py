import logging
import sys

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("lanshare")


def setup_logging(debug=False):
    """Send lanshare messages to stderr as '[timestamp] [LEVEL] message'"""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))

    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    return logger


def log(msg, level="INFO"):
    """Log a message at the given level name (DEBUG, INFO, WARN, ERROR)"""
    if level == "WARN":
        level = "WARNING"
    logger.log(logging.getLevelName(level), msg)
