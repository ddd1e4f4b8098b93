"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./attendance.db")

    # Session store / cache
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    SESSION_COOKIE_NAME: str = "attendance_session"
    SESSION_TTL_SECONDS: int = 60 * 60 * 24 * 7

    # Discord (identity provider + guild roles)
    DISCORD_API_URL: str = "https://discord.com/api/v10"
    DISCORD_CLIENT_ID: str = os.getenv("DISCORD_CLIENT_ID", "")
    DISCORD_CLIENT_SECRET: str = os.getenv("DISCORD_CLIENT_SECRET", "")
    DISCORD_CALLBACK_URL: str = os.getenv("DISCORD_CALLBACK_URL", "http://localhost:8000/auth/discord/callback")
    DISCORD_BOT_TOKEN: str = os.getenv("DISCORD_BOT_TOKEN", "")
    GUILD_ID: str = os.getenv("GUILD_ID", "")
    MENTOR_ROLE_ID: str = os.getenv("MENTOR_ROLE_ID", "")
    ADMIN_ROLE_ID: str = os.getenv("ADMIN_ROLE_ID", "")
    DISCORD_MEMBER_CACHE_SECONDS: int = 60 * 10
    DISCORD_TIMEOUT_SECONDS: float = 10.0

    # Application
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # Event check-in tokens
    EVENT_TOKEN_INTERVAL_SECONDS: int = 30
    EVENT_TOKEN_VALID_WINDOW: int = 1
    EVENT_CHECKIN_MARGIN_MINUTES: int = 30
    CHECKIN_STATUS: str = "ATTENDED"

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Rate limiting
    RATE_LIMIT_PER_MINUTE: int = 30

    model_config = SettingsConfigDict(env_file=".env")

settings = Settings()
