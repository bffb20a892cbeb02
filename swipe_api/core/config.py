# swipe_api/core/config.py
from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./swipe.db"
    STORAGE_BACKEND: Literal["sql", "memory"] = "sql"
    SQL_ECHO: bool = False

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3001",
    ]

    SEED_TEST_ROOM: bool = True
    TEST_ROOM_CODE: str = "TEST01"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


settings = Settings()
