"""
This module provides the package-wide logger.

The first call to `get_logger` configures logging for the mode named by the
settings and caches the package logger. Controllers ask for a child named after
their collection, e.g. `mongo_controller.users`.
"""

import logging

from mongo_controller.core.config import get_app_settings
from mongo_controller.core.logger.config import LogMode, configure_logging

__root_logger: None | logging.Logger = None


def _log_mode() -> LogMode:
    app_settings = get_app_settings()
    if app_settings.TESTING:
        return LogMode.testing
    if app_settings.PRODUCTION:
        return LogMode.production
    return LogMode.development


def get_logger(module: str | None = None) -> logging.Logger:
    """
    Returns the package logger, or its child `module`.

    Args:
        module (str | None, optional): Child logger name, usually a collection
            name. Defaults to None (the package logger itself).
    """
    global __root_logger

    if __root_logger is None:
        app_settings = get_app_settings()
        __root_logger = configure_logging(
            _log_mode(),
            config_override=app_settings.LOG_CONFIG_OVERRIDE,
            substitutions={"LOG_LEVEL": app_settings.LOG_LEVEL.upper()},
        )

    if module is None:
        return __root_logger

    return __root_logger.getChild(module)
