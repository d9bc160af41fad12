"""
Package logger.

Library code logs through ``logger``; applications decide where records go.
"""

from __future__ import annotations

import logging

from .config import config

logger = logging.getLogger("hierograph")
logger.addHandler(logging.NullHandler())


def set_debug(enabled: bool) -> None:
    """Toggle ``config.debug`` and the matching logger level."""
    config.debug = enabled
    logger.setLevel(logging.DEBUG if enabled else logging.NOTSET)


if config.debug:
    logger.setLevel(logging.DEBUG)
