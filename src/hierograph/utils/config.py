"""
Global configuration flags.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes"}


@dataclass
class HGConfig:
    debug: bool = False
    # One indentation unit per depth level in rendered subtrees.
    indent: str = "\t"


config = HGConfig(debug=_env_flag("HIEROGRAPH_DEBUG"))
