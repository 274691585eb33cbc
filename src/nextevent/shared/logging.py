"""Logging helpers built on loguru

The SDK logs through loguru and stays silent until the application calls
``logger.enable("nextevent")``.
"""

import logging
from typing import Any

from loguru import logger as _default_logger

from .exceptions import InvalidArgumentError


class _LoguruHandler(logging.Handler):
    """Bridge stdlib logging into loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = _default_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _default_logger.opt(depth=6, exception=record.exc_info).log(
            level, record.getMessage()
        )


_logging_bridge_installed = False


def install_logging_bridge() -> None:
    """Bridge stdlib logging used by httpx and requests into loguru once."""
    global _logging_bridge_installed
    if _logging_bridge_installed:
        return

    handler = _LoguruHandler()
    for name in ("httpx", "urllib3"):
        std_logger = logging.getLogger(name)
        std_logger.addHandler(handler)
        std_logger.propagate = False

    _logging_bridge_installed = True


def wrap_logger(logger: Any = None, **context: Any) -> Any:
    """Return a loguru logger bound with default context

    Args:
        logger: Optional loguru logger supplied by the application
        **context: Default context attached to every record

    Returns:
        Bound loguru logger
    """
    base = logger if logger is not None else _default_logger
    if not hasattr(base, "bind"):
        raise InvalidArgumentError("The logger object must be a loguru logger")
    return base.bind(**context)
