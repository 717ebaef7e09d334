"""
Installer Logging
Console logging setup for the installer when the host does not configure logging itself
"""

import logging
import sys

LOGGER_NAMES = (
    "install_orchestrator",
    "manifest_store",
    "package_fetcher",
    "directory_swapper",
    "host_bridge",
    "qt_host",
)
LOG_FORMAT = "VRCFury Installer > %(message)s"


def setup_logging(level="INFO"):
    """Attach a stderr handler to every installer logger.

    Previous handlers are removed first, so calling this on every host load
    does not duplicate output.

    Args:
        level: str - Logging level name (DEBUG, INFO, WARNING, ...)

    Returns:
        logging.Handler - The handler that was installed
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        for old in logger.handlers[:]:
            logger.removeHandler(old)
            old.close()
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        logger.addHandler(handler)
        logger.propagate = False

    return handler


def reset_logging():
    """Remove installer handlers and hand records back to the root logger."""
    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        for old in logger.handlers[:]:
            logger.removeHandler(old)
            old.close()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True
