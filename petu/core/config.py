from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    APP_NAME: str = "petu"
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: str = "*"

    # "sql" uses DATABASE_URL, "hosted" talks to SUPABASE_URL over HTTP
    STORAGE_BACKEND: Literal["sql", "hosted"] = "sql"
    DATABASE_URL: str = "sqlite:///./petu.db"
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""

    REDIS_URL: str = "redis://localhost:6379/0"
    # broker falls back to REDIS_URL, result backend to the broker
    CELERY_BROKER_URL: str = ""
    CELERY_RESULT_BACKEND: str = ""
    NOTIFICATIONS_QUEUE: str = "petu.notifications"
    JOIN_LOCK_TIMEOUT: int = 10
    JOIN_LOCK_BLOCKING_TIMEOUT: int = 5

    JWT_SECRET: str = "dev-secret"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    DEFAULT_HOST_NAME: str = "Usuario Petu"

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
