"""Shared exceptions and logging helpers"""

from .exceptions import APIResponseError, NextEventError
from .logging import install_logging_bridge, wrap_logger

__all__ = [
    "APIResponseError",
    "NextEventError",
    "install_logging_bridge",
    "wrap_logger",
]
