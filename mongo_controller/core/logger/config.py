"""
Logging configuration for mongo_controller.

Each run mode ships a `logging.config.dictConfig` JSON file next to this module
(`logconf.prod.json`, `logconf.dev.json`, `logconf.test.json`). `${NAME}`
placeholders in a file are filled from the substitutions before the JSON is
parsed, which is how the configured `LOG_LEVEL` reaches the handlers.
"""

import json
import logging
import pathlib
import string
from enum import Enum
from logging import config as logging_config
from typing import Any

PACKAGE_LOGGER = "mongo_controller"

_CONFIG_DIR = pathlib.Path(__file__).parent


class LogMode(str, Enum):
    production = "production"
    development = "development"
    testing = "testing"

    @property
    def config_path(self) -> pathlib.Path:
        """The JSON configuration shipped for this mode."""
        return _CONFIG_DIR / _CONFIG_FILES[self]


_CONFIG_FILES = {
    LogMode.production: "logconf.prod.json",
    LogMode.development: "logconf.dev.json",
    LogMode.testing: "logconf.test.json",
}


def load_log_config(path: pathlib.Path, substitutions: dict[str, str] | None = None) -> dict[str, Any]:
    """
    Reads a dictConfig JSON file.

    Args:
        path (pathlib.Path): The configuration file.
        substitutions (dict[str, str] | None, optional): Values for `${NAME}`
            placeholders. Unknown placeholders are left in place.

    Returns:
        dict[str, Any]: The parsed configuration.
    """
    contents = pathlib.Path(path).read_text()
    if substitutions:
        contents = string.Template(contents).safe_substitute(substitutions)
    return json.loads(contents)


def configure_logging(
    mode: LogMode | str,
    *,
    config_override: pathlib.Path | None = None,
    substitutions: dict[str, str] | None = None,
) -> logging.Logger:
    """
    Applies the logging configuration for `mode` and returns the package logger.

    Args:
        mode (LogMode | str): `production`, `development` or `testing`.
        config_override (pathlib.Path | None, optional): A configuration file
            used instead of the one shipped for `mode`.
        substitutions (dict[str, str] | None, optional): Placeholder values.

    Raises:
        ValueError: If `mode` is not a known mode, even when `config_override`
                    is given.
    """
    try:
        log_mode = LogMode(mode)
    except ValueError:
        raise ValueError(f"Invalid log mode {mode!r}, expected one of {[m.value for m in LogMode]}") from None

    conf = load_log_config(config_override or log_mode.config_path, substitutions)
    logging_config.dictConfig(conf)
    return logging.getLogger(PACKAGE_LOGGER)
