# attendance_api/core/config.py
from typing import List, Optional, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Tokens are issued by the identity service; we only verify them
    SECRET_KEY: str = "your-super-secret-jwt-key-change-in-prod"
    ALGORITHM: str = "HS256"
    JWT_AUDIENCE: Optional[str] = None

    # When set, tokens are verified remotely instead of with SECRET_KEY
    IDENTITY_URL: Optional[str] = None
    IDENTITY_API_KEY: Optional[str] = None
    IDENTITY_TIMEOUT: float = 10.0

    DATABASE_URL: str = "sqlite:///./attendance.db"

    CORS_ORIGINS: List[str] = [
        "http://localhost",
        "http://127.0.0.1",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # None keeps report ranges unbounded
    REPORT_MAX_DAYS: Optional[int] = None

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, v):
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("REPORT_MAX_DAYS")
    @classmethod
    def _positive_cap(cls, v):
        if v is not None and v <= 0:
            raise ValueError("REPORT_MAX_DAYS must be positive")
        return v
