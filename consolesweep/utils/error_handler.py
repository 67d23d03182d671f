"""Centralized error handler for consolesweep commands."""

import traceback
from collections.abc import Callable
from datetime import datetime
from functools import wraps
from typing import Any

import click

from consolesweep.utils.logging import logger

from .constants import ERROR_LOG_FILE

# Commands flip this off for --no-error-log / logging.error_log=false
_error_log_enabled = True


def set_error_log_enabled(enabled: bool) -> None:
    """Enable or disable appending tracebacks to the error log file."""
    global _error_log_enabled
    _error_log_enabled = enabled


def write_error_log(command: str, exc: BaseException) -> str | None:
    """Append a formatted traceback for ``exc`` to the error log.

    Returns the log path, or None when logging to file is disabled or the
    file cannot be written.
    """
    if not _error_log_enabled:
        return None

    try:
        ERROR_LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        with open(ERROR_LOG_FILE, "a", encoding="utf-8") as f:
            f.write("\n" + "=" * 80 + "\n")
            f.write(f"[{datetime.now().isoformat()}] Error in command: {command}\n")
            f.write("=" * 80 + "\n")
            f.write(f"{type(exc).__name__}: {exc}\n\n")
            f.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
            f.write("=" * 80 + "\n\n")
    except OSError as e:
        logger.warning("Could not write error log {path}: {err}", path=ERROR_LOG_FILE, err=e)
        return None

    return str(ERROR_LOG_FILE)


def handle_exceptions(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator that provides robust error handling with detailed logging."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        """Inner wrapper that implements the try-except logic."""
        try:
            return func(*args, **kwargs)
        except (click.ClickException, click.exceptions.Exit, click.Abort):
            raise
        except Exception as e:
            error_type = type(e).__name__
            error_msg = str(e)

            logger.opt(exception=True).error(
                "Command '{cmd}' failed: {err}",
                cmd=func.__name__,
                err=error_msg,
            )

            log_path = write_error_log(func.__name__, e)

            user_message = f"{error_type}: {error_msg}"
            if log_path:
                user_message += f"\n\nFull traceback logged to: {log_path}"

            raise click.ClickException(user_message) from e

    return wrapper
