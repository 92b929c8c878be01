"""
Logging for the crowdfund toolkit.

All toolkit loggers live under the ``crowdfund_toolkit`` namespace. Only the
package logger carries a handler; module loggers propagate to it, so the
level set through CROWDFUND_LOG_LEVEL or ``set_log_level`` applies to the
whole toolkit at once.
"""

import logging
import os
from typing import Optional, Union

PACKAGE_LOGGER = "crowdfund_toolkit"

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _resolve_level(level: Union[str, int, None]) -> int:
    if isinstance(level, int):
        return level
    name = (level or os.getenv("CROWDFUND_LOG_LEVEL") or "INFO").upper()
    return getattr(logging, name, logging.INFO)


def _package_logger() -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(_resolve_level(None))
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a toolkit logger.

    Names outside the package namespace are nested under it, e.g.
    ``get_logger("cli")`` yields ``crowdfund_toolkit.cli``.
    """
    _package_logger()
    if not name or name == PACKAGE_LOGGER:
        return logging.getLogger(PACKAGE_LOGGER)
    if not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def set_log_level(level: Union[str, int, None]) -> None:
    """Set the level for every toolkit logger; None re-reads the env."""
    _package_logger().setLevel(_resolve_level(level))
