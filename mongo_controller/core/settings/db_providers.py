from abc import ABC, abstractmethod
from pathlib import Path
from urllib import parse as urlparse

from pydantic_settings import BaseSettings, SettingsConfigDict


class AbstractDBProvider(ABC):
    @property
    @abstractmethod
    def db_url(self) -> str: ...

    @property
    @abstractmethod
    def db_url_public(self) -> str: ...

    @property
    @abstractmethod
    def db_name(self) -> str: ...


class MongoProvider(AbstractDBProvider, BaseSettings):
    MONGO_USER: str = ""
    MONGO_PASSWORD: str = ""
    MONGO_HOST: str = "localhost"
    MONGO_PORT: str = "27017"
    MONGO_DB: str = "mongo_controller"
    MONGO_URL_OVERRIDE: str | None = None

    model_config = SettingsConfigDict(arbitrary_types_allowed=True, extra="allow")

    @property
    def db_name(self) -> str:
        return self.MONGO_DB

    @property
    def db_url(self) -> str:
        if self.MONGO_URL_OVERRIDE:
            url = self.MONGO_URL_OVERRIDE

            schema, remainder = url.split("://", 1)
            if schema not in ("mongodb", "mongodb+srv"):
                raise ValueError("MONGO_URL_OVERRIDE schema must be mongodb or mongodb+srv")

            if "@" not in remainder:
                return url

            credentials = remainder[: remainder.rfind("@")]
            if ":" not in credentials:
                return url

            password = credentials.split(":", 1)[1]
            return url.replace(password, urlparse.quote(password, safe=""), 1)

        if self.MONGO_USER:
            credentials = f"{urlparse.quote(self.MONGO_USER, safe='')}:{urlparse.quote(self.MONGO_PASSWORD, safe='')}@"
        else:
            credentials = ""
        return f"mongodb://{credentials}{self.MONGO_HOST}:{self.MONGO_PORT}/{self.MONGO_DB}"

    @property
    def db_url_public(self) -> str:
        url = self.db_url
        if self.MONGO_USER:
            url = url.replace(urlparse.quote(self.MONGO_USER, safe=""), "*********", 1)
        if self.MONGO_PASSWORD:
            url = url.replace(urlparse.quote(self.MONGO_PASSWORD, safe=""), "***********", 1)
        return url


def db_provider_factory(provider_name: str, env_file: Path, env_encoding="utf-8") -> AbstractDBProvider:
    if provider_name != "mongo":
        raise ValueError(f"Unsupported database provider: {provider_name}")
    return MongoProvider(_env_file=env_file, _env_file_encoding=env_encoding)
