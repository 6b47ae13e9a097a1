"""
Logging configuration for the hiring core.

Library modules only ever call logging.getLogger(__name__); the host
application decides whether to call setup_logging().
"""

import logging
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[Union[int, str]] = None) -> None:
    """
    Configure a console handler for the hiring_core logger tree.

    Args:
        level: Logging level name or number. Defaults to the configured
            HIRING_CORE_LOG_LEVEL setting.
    """
    if level is None:
        from .config import get_settings
        level = get_settings().log_level

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    package_logger = logging.getLogger("hiring_core")
    package_logger.setLevel(level)

    if not any(getattr(h, "_hiring_core", False) for h in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._hiring_core = True  # type: ignore[attr-defined]
        package_logger.addHandler(handler)

    package_logger.debug("Hiring core logging initialized at level %s", logging.getLevelName(level))
