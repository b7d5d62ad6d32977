"""
Application Configuration Module

Every knob the service reads, loaded from the environment (and ``.env``)
through pydantic-settings. Import the ``settings`` singleton; don't
instantiate Settings elsewhere.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    # --- Service ---
    PROJECT_NAME: str = "Jingjai Master Control"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    CORS_ORIGINS: List[str] = ["*"]

    # --- Storage ---
    # DATABASE_URL wins when set; otherwise USE_SSH tunnels to DB_HOST's MySQL,
    # and with neither a local SQLite file is used.
    DATABASE_URL: Optional[str] = None
    DB_HOST: Optional[str] = None
    DB_USER: Optional[str] = None
    DB_NAME: Optional[str] = None
    DB_PASSWORD: Optional[str] = None

    USE_SSH: bool = False
    SSH_HOST: Optional[str] = None
    SSH_USER: Optional[str] = None
    SSH_PASSWORD: Optional[str] = None

    # --- Auth ---
    SECRET_KEY: str = "change-me-in-production"  # signs JWTs
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # --- Business rules ---
    CLIENT_ID_PREFIX: str = "CL"
    CLIENT_COUNTER_BASE: int = 100000  # first client gets base + 1
    TRANSACTION_MAX_ATTEMPTS: int = 5
    INVENTORY_ALLOW_NEGATIVE: bool = True
    DEFAULT_TIMEZONE: str = "Asia/Bangkok"  # for booking times sent without an offset

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
