"""
Central logging configuration for recurcal.

Sets levels for the package loggers and quiets third-party libraries that are
chatty at DEBUG, with environment overrides for troubleshooting.
"""

import logging
import os
from typing import Optional

DEBUG_ENV = "RECURCAL_DEBUG"
LOG_LEVEL_ENV = "RECURCAL_LOG_LEVEL"

PACKAGE_LOGGERS = (
    "recurcal",
    "recurcal.__main__",
    "recurcal.calendar_view",
    "recurcal.config_loader",
    "recurcal.datetime_utils",
    "recurcal.ics_exporter",
    "recurcal.ics_importer",
    "recurcal.models",
    "recurcal.recurrence_engine",
    "recurcal.rrule_codec",
    "recurcal.rule_formatter",
    "recurcal.timezone_utils",
)

# Third-party libraries whose DEBUG output drowns out ours
QUIET_LOGGERS = {
    "icalendar": logging.INFO,
}


def configure_logging(
    debug_mode: bool = False,
    force_debug: Optional[bool] = None,
    default_level: int = logging.INFO,
) -> None:
    """
    Configure logging levels for recurcal.

    Args:
        debug_mode: Whether to enable debug logging for recurcal modules
        force_debug: Override debug mode setting (None to use env var detection)
        default_level: Level for the root and package loggers when not debugging

    Environment Variables:
        RECURCAL_DEBUG: Set to '1', 'true', 'yes', 'on' to force debug logging
        RECURCAL_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv(DEBUG_ENV, "").lower() in ("1", "true", "yes", "on")
    env_log_level = os.getenv(LOG_LEVEL_ENV, "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else default_level
    if env_log_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        root_level = getattr(logging, env_log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    # Only add a handler if none exist (keep the colored one from _init_logging)
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("[%(asctime)s] %(levelname)s - %(name)s - %(message)s")
        )
        root_logger.addHandler(handler)

    logger_config: dict[str, int] = dict(QUIET_LOGGERS)
    package_level = logging.DEBUG if final_debug else root_level
    for module in PACKAGE_LOGGERS:
        logger_config[module] = package_level

    for logger_name, level in logger_config.items():
        logging.getLogger(logger_name).setLevel(level)

    if final_debug:
        root_logger.debug("Debug logging enabled for recurcal modules")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}
    for logger_name in ("recurcal", *QUIET_LOGGERS):
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)
    return status
