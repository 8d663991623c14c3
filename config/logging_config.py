"""
Logging Configuration

Configures the root logger once for the whole process.
"""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging.

    Args:
        level: Level name such as "INFO" or "DEBUG", INFO if None or unknown
    """
    resolved = logging.getLevelName((level or "INFO").upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger().setLevel(resolved)

    # keep HTTP client chatter out of INFO logs
    logging.getLogger("httpx").setLevel(max(resolved, logging.WARNING))
