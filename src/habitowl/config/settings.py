"""Configuration settings for HabitOwl."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.core import Platform


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Runtime
    app_platform: Platform = Platform.ANDROID
    dev_mode: bool = False  # Serve vendor test ad units
    log_level: str = "INFO"

    # Ads
    ads_sdk: str = "simulated"  # simulated, none, or module:factory
    ads_debug: bool = False

    # Preference store
    storage_type: str = "sqlite"  # memory, sqlite, redis
    database_url: str = "sqlite:///./habitowl.db"
    redis_url: Optional[str] = None

    # Firebase backend
    firebase_api_key: Optional[str] = None
    firebase_auth_domain: str = "habitowl-3405d.firebaseapp.com"
    firebase_project_id: str = "habitowl-3405d"
    firebase_storage_bucket: str = "habitowl-3405d.firebasestorage.app"
    firebase_messaging_sender_id: Optional[str] = None
    firebase_app_id: Optional[str] = None
    firebase_measurement_id: Optional[str] = None
    firebase_credentials_path: Optional[str] = None  # Service account JSON


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
