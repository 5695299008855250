"""
config/
-------
Runtime settings and logging.

    from config import settings, get_logger
"""

from config.settings import Settings, settings, load_settings, get_logger

__all__ = [
    "Settings",
    "settings",
    "load_settings",
    "get_logger",
]
