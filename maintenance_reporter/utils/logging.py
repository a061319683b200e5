"""Centralized logging configuration using Loguru.

Usage:
    from maintenance_reporter.utils.logging import logger
    logger.info("Message")
    logger.debug("Debug message")  # Only shows if MREPORT_LOG_LEVEL=DEBUG

Environment Variables:
    MREPORT_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: WARNING)
    MREPORT_LOG_JSON: 0|1 (default: 0, human-readable)
    MREPORT_LOG_FILE: path to log file (optional)
"""

import os
import sys

from loguru import logger

from .constants import ENV_LOG_FILE, ENV_LOG_JSON, ENV_LOG_LEVEL

# Remove default handler
logger.remove()

# Reports go to stdout through rich; logs stay on stderr and default to quiet
_log_level = os.environ.get(ENV_LOG_LEVEL, "WARNING").upper()
_json_mode = os.environ.get(ENV_LOG_JSON, "0") == "1"
_log_file = os.environ.get(ENV_LOG_FILE)

# Human-readable format (no emojis - Windows CP1252 compatibility)
_human_format = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}:{function}:{line}</cyan> - "
    "<level>{message}</level>"
)

logger.level("DEBUG", color="<blue>")
logger.level("INFO", color="<white>")
logger.level("WARNING", color="<yellow>")
logger.level("ERROR", color="<red>")

if _json_mode:
    logger.add(sys.stderr, level=_log_level, serialize=True)
else:
    logger.add(
        sys.stderr,
        level=_log_level,
        format=_human_format,
        colorize=None,  # Auto-detect: colors if TTY, plain if piped
    )

if _log_file:
    # File always captures everything, one JSON record per line
    logger.add(_log_file, level="DEBUG", serialize=True)


__all__ = ["logger"]
