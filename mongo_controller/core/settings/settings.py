"""
This module defines the application settings for mongo_controller.

It includes the Pydantic settings model (`AppSettings`) holding logging,
database and controller defaults, and the `app_settings_constructor` factory
that wires the database provider into it.

Settings are loaded from environment variables and .env files.
"""

import logging
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .db_providers import AbstractDBProvider, db_provider_factory


class AppSettings(BaseSettings):
    """
    Main application settings.

    This class defines all configuration parameters for mongo_controller,
    loaded from environment variables and .env files. It uses Pydantic for
    data validation and management.
    """

    PRODUCTION: bool = False
    """Flag indicating if the application is running in production mode."""

    TESTING: bool = False
    """Flag indicating if the application is running under the test suite."""

    LOG_CONFIG_OVERRIDE: Path | None = None
    """ path to custom logging configuration file"""

    LOG_LEVEL: str = "info"
    """ corresponds to standard Python Log levels """

    _logger: logging.Logger | None = None

    # ===============================================
    # Database Configuration

    DB_ENGINE: str = "mongo"

    DB_PROVIDER: AbstractDBProvider | None = None

    # ===============================================
    # Controller Defaults

    AUTO_REGEXP_SEARCH: bool = True
    """Turn plain-string search terms into case-insensitive regular expressions."""

    SKIP_INDEX: bool = False
    """Skip index creation when a controller is constructed."""

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        if value.upper() not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return value

    @property
    def logger(self) -> logging.Logger:
        """
        Provides a logger instance for the application.

        Initializes the root logger if it hasn't been already.

        Returns:
            logging.Logger: The application logger.
        """
        if self._logger is None:
            from mongo_controller.core.root_logger import get_logger

            self._logger = get_logger()

        return self._logger

    @property
    def DB_URL(self) -> str | None:
        return self.DB_PROVIDER.db_url if self.DB_PROVIDER else None

    @property
    def DB_URL_PUBLIC(self) -> str | None:
        return self.DB_PROVIDER.db_url_public if self.DB_PROVIDER else None

    @property
    def DB_NAME(self) -> str | None:
        return self.DB_PROVIDER.db_name if self.DB_PROVIDER else None

    model_config = SettingsConfigDict(arbitrary_types_allowed=True, extra="allow")


def app_settings_constructor(
    production: bool,
    env_file: Path,
    env_encoding="utf-8",
) -> AppSettings:
    """
    app_settings_constructor is a factory function that returns an AppSettings object.
    It is used to inject the dependencies into the AppSettings object and its
    nested child objects. AppSettings should not be instantiated directly, but
    rather through this factory function.
    """

    app_settings = AppSettings(
        _env_file=env_file,  # type: ignore
        _env_file_encoding=env_encoding,  # type: ignore
        **{"PRODUCTION": production},
    )

    app_settings.DB_PROVIDER = db_provider_factory(
        app_settings.DB_ENGINE or "mongo",
        env_file=env_file,
        env_encoding=env_encoding,
    )
    return app_settings
