"""
Miscellaneous utilities shared across hierograph.
"""

from .logging import logger, set_debug
from .config import config

__all__ = ["logger", "set_debug", "config"]
