"""
Configuration settings for the application
"""

import os
from typing import List, Tuple
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./wedding_rsvp.db")

    # Security
    ADMIN_TOKEN: str = os.getenv("ADMIN_TOKEN", "admin_token_123")
    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "admin@example.com")

    # Application
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
        "http://localhost:8080",
    ]

    # Rate limiting (guest-facing routes)
    RATE_LIMIT_PER_MINUTE: int = 30
    # Only honor X-Forwarded-For / X-Real-IP behind a trusted reverse proxy
    TRUST_PROXY_HEADERS: bool = os.getenv("TRUST_PROXY_HEADERS", "false").lower() == "true"

    # Domain enumerations, read once at startup
    LOCATIONS: Tuple[str, ...] = ("sardinia", "tunisia", "nice")
    AGE_CATEGORIES: Tuple[str, ...] = ("adult", "child_under_3", "child_under_10")
    LANGUAGES: Tuple[str, ...] = ("en", "fr", "it")

    class Config:
        env_file = ".env"

settings = Settings()
