import os
from functools import lru_cache
from pathlib import Path

import dotenv
from pymongo import MongoClient
from pymongo.database import Database

from mongo_controller.core.settings import AppSettings, app_settings_constructor

CWD = Path(__file__).parent
BASE_DIR = Path(os.getenv("BASE_DIR", CWD.parent.parent))
ENV = BASE_DIR.joinpath(".env")

dotenv.load_dotenv(ENV)
PRODUCTION = os.getenv("PRODUCTION", "False").capitalize() == "True"


@lru_cache
def get_app_settings() -> AppSettings:
    """Get the application settings."""
    return app_settings_constructor(
        env_file=ENV,
        production=PRODUCTION,
    )


@lru_cache
def get_client() -> MongoClient:
    """Get a MongoDB client for the configured database URL."""
    settings = get_app_settings()
    return MongoClient(settings.DB_URL, tz_aware=True)


def get_database(name: str | None = None) -> Database:
    """Get a database handle, defaulting to the configured database name."""
    settings = get_app_settings()
    return get_client()[name or settings.DB_NAME]
