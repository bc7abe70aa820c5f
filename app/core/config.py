from functools import lru_cache
from typing import Literal

from fastapi import Depends
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Annotated

DEV_JWT_SECRET = "dev-secret-change-me"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    environment: Literal["development", "production", "test"] = "development"
    api_prefix: str = "/api"
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"

    database_url: str = "sqlite+aiosqlite:///./taskmanager.db"
    db_pool_size: int = 10
    db_connect_timeout: int = 5  # seconds
    auto_create_tables: bool = False

    jwt_secret: str = DEV_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 30

    allowed_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    frontend_url: str | None = None
    rate_limit: str = "1000 per 15 minutes"

    @model_validator(mode="after")
    def check_production_secret(self):
        if self.environment == "production" and self.jwt_secret == DEV_JWT_SECRET:
            raise ValueError("JWT_SECRET must be set in production")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cors_origins(self) -> list[str]:
        """Origins allowed by CORS; development accepts any origin."""
        if self.environment == "development":
            return ["*"]
        origins = list(self.allowed_origins)
        if self.frontend_url:
            origins.append(self.frontend_url)
        return origins


@lru_cache
def get_settings() -> Settings:
    return Settings()


SettingsDep = Annotated[Settings, Depends(get_settings)]
