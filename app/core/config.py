"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./wedding_seating.db")

    # Security
    ADMIN_TOKEN: str = os.getenv("ADMIN_TOKEN", "admin_token_123")

    # Application
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://localhost:8000",
    ]

    # File limits
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB

    # Rate limiting
    RATE_LIMIT_PER_MINUTE: int = 30

    # Auto-arrange writes many rows for large events
    AUTO_ARRANGE_TIMEOUT_SECONDS: int = 30

    # Seating canvas used for default table placement
    CANVAS_WIDTH: int = 1200
    CANVAS_HEIGHT: int = 800
    CANVAS_PADDING: int = 50
    TABLE_MIN_SPACING: int = 40

    # Table defaults
    DEFAULT_TABLE_SIZE: int = 10
    DEFAULT_TABLE_WIDTH: int = 120
    DEFAULT_TABLE_HEIGHT: int = 120
    MAX_TABLE_CAPACITY: int = 100

    # "he" or "en" labels for generated table names
    TABLE_LABEL_LOCALE: str = os.getenv("TABLE_LABEL_LOCALE", "he")

    class Config:
        env_file = ".env"

settings = Settings()
