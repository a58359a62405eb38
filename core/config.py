"""
Application configuration using Pydantic Settings.

Supports loading from environment variables and .env files.
"""

from functools import lru_cache
from typing import Optional, List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ============ Application ============
    app_name: str = "Prompt Gallery"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"  # development, testing, production

    # ============ Server ============
    host: str = "0.0.0.0"
    port: int = 8000

    # ============ Security ============
    # When set, mutating and generating routes require "Authorization: Bearer <key>"
    api_bearer_key: Optional[str] = None

    # ============ CORS ============
    cors_origins: List[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = ["*"]
    cors_allow_headers: List[str] = ["*"]

    # ============ Database ============
    database_enabled: bool = True
    database_url: str = "sqlite+aiosqlite:///./data/prompts.db"
    database_auto_create: bool = True
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_echo: bool = False

    # ============ Google Gemini API ============
    gemini_api_key: Optional[str] = None
    flash_image_model: str = "gemini-2.5-flash-image"
    pro_image_model: str = "gemini-3-pro-image-preview"
    imagen_model: str = "imagen-4.0-ultra-generate-001"
    analysis_model: str = "gemini-2.0-flash"
    enhance_model: str = "gemini-2.5-pro"
    translate_model: str = "gemini-2.5-flash"
    vision_model: str = "gemini-2.0-flash-exp"
    embedding_model: str = "text-embedding-004"

    # ============ Storage ============
    upload_dir: str = "public/uploads"
    upload_search_dirs: List[str] = ["uploads", "public"]
    upload_url_prefix: str = "/uploads"

    # ============ Gallery ============
    daily_limit: int = 70
    semantic_threshold: float = 0.3
    auto_tag_delay_seconds: float = 7.0
    placeholder_image_url: str = "https://picsum.photos/seed/{seed}/{width}/{height}"

    # ============ Logging ============
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_database_configured(self) -> bool:
        """Check if a database URL is available."""
        return bool(self.database_enabled and self.database_url)

    @property
    def is_gemini_configured(self) -> bool:
        """Check if a Gemini API key is available."""
        return bool(self.gemini_api_key)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
