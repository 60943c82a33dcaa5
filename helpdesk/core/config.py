from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", alias="LOG_LEVEL")


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    env: str = Field(default="development", alias="APP_ENV")
    host: str = Field(default="0.0.0.0", alias="APP_HOST")
    port: int = Field(default=8000, alias="APP_PORT")
    timezone: str = Field(default="Asia/Jakarta", alias="PRIMARY_TIMEZONE")

    storage_backend: Literal["sql", "json"] = Field(default="sql", alias="STORAGE_BACKEND")
    database_url: str = Field(default="sqlite:///./data/helpdesk.db", alias="DATABASE_URL")
    kv_store_path: Path = Field(default=Path("./data/helpdesk.json"), alias="KV_STORE_PATH")

    gemini_model: str = Field(default="gemini-2.5-flash", alias="GEMINI_MODEL")
    gemini_api_key_env: str = Field(default="GEMINI_API_KEY", alias="GEMINI_API_KEY_ENV")
    ai_search_grounding: bool = Field(default=True, alias="AI_SEARCH_GROUNDING")

    jwt_secret_key: str = Field(default="helpdesk-dev-secret-change-in-production", alias="JWT_SECRET_KEY")
    jwt_expiry_hours: int = Field(default=12, alias="JWT_EXPIRY_HOURS")

    seed_default_users: bool = Field(default=True, alias="SEED_DEFAULT_USERS")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)


@lru_cache
def get_settings() -> AppConfig:
    return AppConfig()
