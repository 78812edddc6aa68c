"""
Logging setup for applications embedding the engine.

The engine modules only create module loggers; handlers are installed by
the caller through configure_logging().
"""

import sys
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Union

from soillab.utils.constants import LOG_FORMAT, LOG_MAX_SIZE, LOG_BACKUP_COUNT

logger = logging.getLogger(__name__)


def configure_logging(level: Union[int, str] = logging.INFO,
                      log_file: Optional[Union[str, Path]] = None) -> List[logging.Handler]:
    """
    Configure root logging.

    Args:
        level: Logging level name or number
        log_file: Optional path of a rotating log file

    Returns:
        The handlers that were installed
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(RotatingFileHandler(
            str(log_file),
            maxBytes=LOG_MAX_SIZE,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8'
        ))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    logger.debug(f"Logging configured at level {logging.getLevelName(level)}")
    return handlers
