"""
Validex Core
============

Configuration.
"""

from validex.core.config import Config, ConfigSource, get_config

__all__ = [
    "Config",
    "ConfigSource",
    "get_config",
]
