"""Logging setup for the wizardflow command line."""

import logging
import os
import sys
from typing import Optional

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_log_level(log_level: Optional[str] = None) -> str:
    """Pick the log level from the argument, then the environment.

    ``WIZARDFLOW_VERBOSE`` forces DEBUG; ``WIZARDFLOW_LOG_LEVEL`` sets the
    level explicitly. Falls back to WARNING so log lines don't interleave
    with prompts.
    """
    if log_level:
        return log_level.upper()
    if os.environ.get('WIZARDFLOW_VERBOSE'):
        return "DEBUG"
    return os.environ.get('WIZARDFLOW_LOG_LEVEL', "WARNING").upper()


def configure_logging(log_level: Optional[str] = None) -> None:
    """Configure logging for wizardflow.

    Installs a single stderr handler on the root logger. Repeated calls only
    adjust the level.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    level_name = resolve_log_level(log_level)
    numeric_level = getattr(logging, level_name, logging.WARNING)

    if getattr(configure_logging, "has_run", False):
        logging.getLogger().setLevel(numeric_level)
        return

    # stdout belongs to the prompts
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logging.basicConfig(level=numeric_level, force=True, handlers=[handler])

    configure_logging.has_run = True
    logger.debug("Logging configured at level: %s", level_name)
