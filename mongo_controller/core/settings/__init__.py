from .db_providers import AbstractDBProvider, MongoProvider, db_provider_factory
from .settings import AppSettings, app_settings_constructor

__all__ = [
    "AbstractDBProvider",
    "AppSettings",
    "MongoProvider",
    "app_settings_constructor",
    "db_provider_factory",
]
