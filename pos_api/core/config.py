# pos_api/core/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal

class Settings(BaseSettings):
    # App
    ENV: str = "development"
    DEBUG: bool = False

    # Security
    SECRET_KEY: str
    ALGORITHM: Literal["HS256", "HS512"] = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Database
    DATABASE_URL: str = "sqlite:///./pos.db"
    DB_LOCK_TIMEOUT_SECONDS: float = 15
    AUTO_CREATE_TABLES: bool = True

    # Demo data
    SEED_DEMO_DATA: bool = False
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"

    # Frontend
    FRONTEND_URL: str = "http://localhost:5173"

    RATE_LIMIT_ENABLED: bool = True

    # Sales
    SALE_MAX_ATTEMPTS: int = 3



    model_config = SettingsConfigDict(
        env_file=".env",
        extra="forbid",
    )


settings = Settings()
