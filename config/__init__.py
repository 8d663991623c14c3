"""
Configuration Layer

Environment-driven settings for the application, Redis and logging.
"""

from .app_config import AppConfig
from .logging_config import setup_logging
from .redis_config import RedisConfig

__all__ = [
    "AppConfig",
    "RedisConfig",
    "setup_logging",
]
