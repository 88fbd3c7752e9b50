"""
Configuration for the futbolai routing layer.
Re-exports tunables from settings/constants and provides the logger factory.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from .constants import (
    DEV_SERVER_HOST,
    DEV_SERVER_PORT,
    FACT_CACHE_TTL,
    IMAGE_CACHE_TTL,
    MATCHES_CACHE_TTL,
    PROXY_CACHE_TTL,
    SEARCH_CACHE_TTL,
    SQUAD_CACHE_TTL,
)
from .settings import PROVIDER_TIMEOUT_S, TRANSIENT_RETRY_BACKOFF_S


API_TIMEOUT = PROVIDER_TIMEOUT_S
"""Hard timeout (seconds) for a single outbound provider call."""

RETRY_BACKOFF = TRANSIENT_RETRY_BACKOFF_S
"""Fixed pause (seconds) before the single retry of a transient failure."""


def setup_logger(name: str) -> logging.Logger:
    """Create or retrieve a configured logger for the application."""

    logger = logging.getLogger(name)

    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)
    logger.setLevel(log_level)

    if logging.getLogger().handlers:
        logger.propagate = True
        return logger

    if not logger.handlers:
        log_file = os.path.join(os.path.dirname(os.path.dirname(__file__)), "futbolai.log")
        handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=3)
        formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s')
        handler.setFormatter(formatter)
        handler.setLevel(log_level)
        logger.addHandler(handler)
        logger.propagate = False

    return logger


__all__ = [
    "API_TIMEOUT",
    "RETRY_BACKOFF",
    "DEV_SERVER_HOST",
    "DEV_SERVER_PORT",
    "FACT_CACHE_TTL",
    "IMAGE_CACHE_TTL",
    "MATCHES_CACHE_TTL",
    "PROXY_CACHE_TTL",
    "SEARCH_CACHE_TTL",
    "SQUAD_CACHE_TTL",
    "setup_logger",
]
