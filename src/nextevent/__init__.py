"""NextEvent SDK

Python client for the NextEvent event ticketing API. Logging is disabled
until the application calls logger.enable("nextevent").
"""

from loguru import logger

from .client import Client
from .core import Config, Env
from .shared.exceptions import (
    APIResponseError,
    NextEventError,
    NotAuthenticatedError,
)
from .store import FileStore, MemoryStore, Store
from .util import Filter, Query, Widget

logger.disable("nextevent")

__version__ = "1.0.0"

__all__ = [
    "APIResponseError",
    "Client",
    "Config",
    "Env",
    "FileStore",
    "Filter",
    "MemoryStore",
    "NextEventError",
    "NotAuthenticatedError",
    "Query",
    "Store",
    "Widget",
]
