"""
Logging configuration for versocorpus.

The package logs through loguru and is disabled on import, so that library
users see nothing unless they opt in::

    from versocorpus.logging_config import enable_logging

    enable_logging("DEBUG")
"""

import sys
from typing import Any, Optional

from loguru import logger

PACKAGE_NAME = "versocorpus"
DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level} | " "{name}:{function}:{line} | {message}"
)

_handler_id: Optional[int] = None


def enable_logging(
    level: str = DEFAULT_LEVEL, sink: Any = None, format_string: str = None
) -> int:
    """
    Enable versocorpus log output.

    Calling this again replaces the previously added handler.

    :param level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    :param sink: Any loguru sink; defaults to ``sys.stderr``
    :param format_string: Custom log format string
    :return: The loguru handler id
    """
    global _handler_id

    if _handler_id is not None:
        logger.remove(_handler_id)

    _handler_id = logger.add(
        sink if sink is not None else sys.stderr,
        level=level,
        format=format_string or DEFAULT_FORMAT,
        filter=PACKAGE_NAME,
    )
    logger.enable(PACKAGE_NAME)
    return _handler_id


def disable_logging() -> None:
    """Silence versocorpus log output and drop the handler added here."""
    global _handler_id

    logger.disable(PACKAGE_NAME)
    if _handler_id is not None:
        logger.remove(_handler_id)
        _handler_id = None
