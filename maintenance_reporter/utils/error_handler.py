"""Centralized error handler for Maintenance Reporter commands."""

import traceback
from collections.abc import Callable
from datetime import datetime
from functools import wraps
from typing import Any

import click

from maintenance_reporter.utils.logging import logger

from .constants import ERROR_LOG_FILE, STATE_DIR


def handle_exceptions(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator that logs command failures and turns them into click errors."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except Exception as e:
            error_type = type(e).__name__
            error_msg = str(e)
            tb = traceback.format_exc()

            logger.error("Command '{cmd}' failed: {err}", cmd=func.__name__, err=error_msg)
            logger.debug(tb)

            user_message = f"{error_type}: {error_msg}"
            try:
                STATE_DIR.mkdir(parents=True, exist_ok=True)
                with open(ERROR_LOG_FILE, "a", encoding="utf-8") as f:
                    f.write("\n" + "=" * 80 + "\n")
                    f.write(f"[{datetime.now().isoformat()}] Error in command: {func.__name__}\n")
                    f.write("=" * 80 + "\n")
                    f.write(f"{error_type}: {error_msg}\n\n")
                    f.write(tb)
                    f.write("=" * 80 + "\n\n")
                user_message += f"\n\nFull traceback logged to: {ERROR_LOG_FILE}"
            except OSError as log_error:
                logger.warning("Could not write error log {path}: {err}", path=ERROR_LOG_FILE, err=log_error)

            raise click.ClickException(user_message) from e

    return wrapper
