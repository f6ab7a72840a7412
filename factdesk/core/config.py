from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./factdesk.db"
    SECRET_KEY: str = "your-super-secret-jwt-signing-key-here"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    AUTO_CREATE_TABLES: bool = True

    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    LEADERBOARD_SCORE: str = "verdict_count"
    LEADERBOARD_TIMEFRAME: str = "30 days"

    CORS_ORIGINS: List[str] = ["http://localhost:8001"]

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()
