from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DB_CONN_STRING: str
    DB_ECHO: bool = False

    # Redis (Celery broker and result backend)
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Price feed
    PRICE_TICK_SECONDS: int = 30
    PRICE_MAX_CHANGE: Decimal = Decimal("0.02")
    PRICE_FLOOR: Decimal = Decimal("0.01")

    # Seed accounts
    SUPERADMIN_USERNAME: str = "superadmin"
    SUPERADMIN_PASSWORD: Optional[str] = None
    SEED_SAMPLE_DATA: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        extra = "ignore"
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings():
    return Settings()


settings = get_settings()
