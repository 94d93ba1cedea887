"""
Centralized application-specific logging using Loguru.

This module provides a function-based logging mechanism (`LOG`) that dynamically
respects the `beQuiet` and `debug_mode` flags from application settings.

Features:
- A custom `LOG` function for application-specific debug logging.
- Dynamic checking of the settings so a running shell can be made chatty
  without restarting.
- Consistent and customizable logging format.

Usage:
- Use `LOG` for application-specific debug logging.
- Interactive sessions are quiet by default; set `RPL_BEQUIET=false` or
  `RPL_DEBUG_MODE=true` to see the log on stderr.

Example:
    from replkit.lib.log import LOG
    LOG("This is a debug message.")
"""

from loguru import logger
from typing import Any
import sys

# Create a distinct logger instance for the app
app_logger = logger.bind(app="REPLKIT")

logger_format = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<yellow>{name: >28}</yellow>::"
    "<cyan>{function: <30}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

app_logger.remove()  # Remove any default handlers
app_logger.add(sys.stderr, format=logger_format)


def LOG(*args: Any, **kwargs: Any) -> None:
    """
    Application-specific logging function.

    Logs the message only when `appsettings.debug_mode` is on or
    `appsettings.beQuiet` is off.

    :param args: Positional arguments for the log message.
    :param kwargs: Keyword arguments for additional log metadata.
    """
    try:
        from replkit.config.settings import appsettings  # Ensure up-to-date settings

        if appsettings.debug_mode or not appsettings.beQuiet:
            app_logger.opt(depth=1).debug(*args, **kwargs)
    except Exception as e:
        print(f"Logging error: {e}")  # Fallback to standard output on failure
