"""
Configuration settings for the application
"""

import os
from typing import List, Optional
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./wedding_guests.db")
    USE_FIREBASE: bool = os.getenv("USE_FIREBASE", "false").lower() in ("1", "true", "yes")
    FIREBASE_CREDENTIALS_JSON: str | None = os.getenv("FIREBASE_CREDENTIALS_JSON")
    FIREBASE_CREDENTIALS_FILE: str | None = os.getenv("FIREBASE_CREDENTIALS_FILE")
    FIREBASE_CREDENTIALS_B64: str | None = os.getenv("FIREBASE_CREDENTIALS_B64")
    FIREBASE_BUCKET_PREFIX: str = os.getenv("FIREBASE_BUCKET_PREFIX", "")

    # Security
    ADMIN_SECRET: str = os.getenv("ADMIN_SECRET", "admin_secret_123")

    # Application
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")

    # Object storage
    MEDIA_ROOT: str = os.getenv("MEDIA_ROOT", "uploads")
    STORAGE_PUBLIC_BASE: Optional[str] = os.getenv("STORAGE_PUBLIC_BASE")

    # Offline cache generation served to the service worker
    MEDIA_CACHE_NAME: str = os.getenv("MEDIA_CACHE_NAME", "media-v2")

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # File limits
    MAX_UPLOAD_SIZE: int = 50 * 1024 * 1024  # 50MB

    class Config:
        env_file = ".env"

    @property
    def storage_public_base(self) -> str:
        """Base URL that public object URLs are built from"""
        base = self.STORAGE_PUBLIC_BASE or f"{self.BASE_URL}/media"
        return base.rstrip("/")

settings = Settings()
