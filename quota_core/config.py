"""
Unified configuration for the quota-gate service.

This module provides a single Settings class that consolidates all
environment variables used by the quota API, the storage adapters and
the operator scripts.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine project root for .env file loading (allows running from any CWD)
PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """
    Unified settings for quota-gate.

    Environment variables are loaded from .env file and can be overridden
    by actual environment variables.
    """

    # Service identification
    SERVICE_NAME: str = "quota-gate"
    LOG_LEVEL: str = "INFO"

    # PostgreSQL (profile / tier store)
    POSTGRES_DSN: str = "host=localhost port=5432 dbname=postgres user=postgres password=postgres"
    PROFILE_TABLE: str = "user_profiles"

    # MinIO Configuration
    MINIO_ENDPOINT: str = "localhost:9000"
    MINIO_ACCESS_KEY: str = "minioadmin"
    MINIO_SECRET_KEY: str = "minioadmin"
    MINIO_BUCKET_OBJECTS: str = "user-objects"
    MINIO_SECURE: bool = False

    # Local filesystem blob store (development)
    USE_LOCAL_STORAGE: bool = False
    LOCAL_STORAGE_PATH: str = "/tmp/quota-gate-storage"

    # Identity credentials presented by the browser session
    IDENTITY_JWT_SECRET: str = ""
    IDENTITY_JWT_ALGORITHM: str = "HS256"
    IDENTITY_JWT_AUDIENCE: str | None = None

    # Upload artifacts minted by this service
    UPLOAD_TOKEN_SECRET: str = ""
    UPLOAD_TOKEN_TTL: int = 3600  # 1 hour
    UPLOAD_TOKEN_ISSUER: str = "quota-gate"

    # Rate limiting
    UPLOAD_TOKEN_RATE_LIMIT: str = "30/minute"
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # CORS
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]

    # App host/port
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8081

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        extra="ignore"
    )


# Global settings instance
settings = Settings()  # type: ignore
