"""
Centralized logging configuration.
"""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: int | str = logging.INFO,
    log_dir: str | None = None,
    environment: str | None = None,
) -> None:
    """
    Configure application-wide logging.

    Always logs to stdout. When ``log_dir`` is given, warnings and errors are
    also appended to ``{environment}_error.log`` and the aiohttp access log
    goes to ``{environment}_access.log``.
    """
    logging.basicConfig(
        format=LOG_FORMAT,
        level=level,
        stream=sys.stdout,
    )

    if not log_dir:
        return

    os.makedirs(log_dir, exist_ok=True)
    prefix = environment or "development"
    formatter = logging.Formatter(LOG_FORMAT)

    error_handler = logging.FileHandler(os.path.join(log_dir, f"{prefix}_error.log"))
    error_handler.setLevel(logging.WARNING)
    error_handler.setFormatter(formatter)
    logging.getLogger().addHandler(error_handler)

    access_handler = logging.FileHandler(os.path.join(log_dir, f"{prefix}_access.log"))
    access_handler.setFormatter(logging.Formatter("%(message)s"))
    access_logger = logging.getLogger("aiohttp.access")
    access_logger.addHandler(access_handler)
    access_logger.setLevel(logging.INFO)
    access_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)
