"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Growth Map Backend"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "postgresql+psycopg2://growth@localhost:5432/growth_map"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4.1"
    openai_temperature: float = 0.3
    openai_timeout_seconds: float = 30.0
    auth_url: str = "http://localhost:54321"
    auth_api_key: str | None = None
    auth_timeout_seconds: float = 10.0
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "growth-map"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
