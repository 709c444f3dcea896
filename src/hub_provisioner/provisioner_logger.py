"""
Logger used throughout hub_provisioner.
"""

import logging
import sys

LOGGER_NAME = "hub_provisioner"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"


class ProvisionerLogger:
    """
    Thin wrapper over the standard library logger so that every component
    reports progress through the same ``log(message, level)`` call.
    """

    def __init__(self, name: str = LOGGER_NAME) -> None:
        self.logger = logging.getLogger(name)

    def log(self, message: str, level: int) -> None:
        """
        Log a message at the given level.

        Args:
            message: Human readable text
            level: One of the ``logging`` level constants
        """
        self.logger.log(level, message)


def setup_logging(level: int = logging.INFO) -> None:
    """
    Send hub_provisioner log records to stderr.

    Safe to call more than once: the handler is only attached the first time.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if not any(getattr(h, "_hub_provisioner", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, "%Y-%m-%d %H:%M:%S"))
        handler._hub_provisioner = True
        logger.addHandler(handler)
