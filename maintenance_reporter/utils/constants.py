"""Centralized constants for Maintenance Reporter.

Single source of truth for the state directory, file names and environment
variable names used across modules.
"""

from pathlib import Path

# ============================================================================
# STATE DIRECTORY
# ============================================================================

# Per-project directory holding the optional config file and the error log
STATE_DIR_NAME = ".mreport"
STATE_DIR = Path(".") / STATE_DIR_NAME

CONFIG_FILE_NAME = "config.json"
ERROR_LOG_FILE = STATE_DIR / "error.log"

# ============================================================================
# REPORT VALUES
# ============================================================================

# to_version shown when a fixed package no longer exists at the end commit
REMOVED_SENTINEL = "-"

# Lock diff markers for packages that only exist on one side
NEW_MARKER = "NEW"
REMOVED_MARKER = "REMOVED"

NO_CHANGES_MESSAGE = "No code changes have been found."

# ============================================================================
# ENVIRONMENT VARIABLES
# ============================================================================

ENV_PREFIX = "MREPORT"
ENV_LOG_LEVEL = "MREPORT_LOG_LEVEL"
ENV_LOG_JSON = "MREPORT_LOG_JSON"
ENV_LOG_FILE = "MREPORT_LOG_FILE"
