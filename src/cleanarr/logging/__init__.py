"""Logging setup for Cleanarr."""

from cleanarr.logging.config import configure_logging
from cleanarr.logging.handlers import JSONFormatter

__all__ = ["JSONFormatter", "configure_logging"]
