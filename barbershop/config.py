# barbershop/config.py

from datetime import time
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Shop settings, overridable through BARBERSHOP_* environment variables."""

    database_url: str = "sqlite:///./barber.db"
    secret_key: str = "change-me-later"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    timezone: str = "America/Sao_Paulo"
    open_time: time = time(8, 0)
    close_time: time = time(21, 0)

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="BARBERSHOP_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def open_minutes(self) -> int:
        return self.open_time.hour * 60 + self.open_time.minute

    @property
    def close_minutes(self) -> int:
        return self.close_time.hour * 60 + self.close_time.minute


@lru_cache
def get_settings() -> Settings:
    return Settings()
