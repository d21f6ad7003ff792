# api/settings.py
from functools import lru_cache
from urllib.parse import quote

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "userapi"

    # Database target
    DB_HOST: str = "localhost"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "postgres"

    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


def create_dsn(settings: Settings) -> str:
    # Credentials and database name may contain URL-reserved characters
    user = quote(settings.DB_USER, safe="")
    password = quote(settings.DB_PASSWORD, safe="")
    name = quote(settings.DB_NAME, safe="")
    return f"postgresql://{user}:{password}@{settings.DB_HOST}/{name}"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
