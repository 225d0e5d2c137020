"""
Shared logger utility for the inventory restocking optimizer.
Provides a consistent logger configuration for all modules.
"""

import logging
import os

LOG_LEVEL_ENV_VAR = "INVENTORY_RL_LOG_LEVEL"


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Returns a logger with the specified name, configured with a standard format.
    The level is read from INVENTORY_RL_LOG_LEVEL and defaults to INFO.
    If no name is provided, returns the root logger.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    level_name = os.getenv(LOG_LEVEL_ENV_VAR, "INFO").upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    return logger
