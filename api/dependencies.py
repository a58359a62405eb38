"""
FastAPI dependency injection for database sessions, repositories and services.
"""

import logging
from collections.abc import AsyncGenerator

import httpx
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings, get_settings
from core.exceptions import DatabaseUnavailableError
from database import get_session, is_database_available
from database.repositories import (
    CollectionRepository,
    PromptRepository,
    TagRepository,
    TemplateRepository,
)
from services.gemini_image import GeminiImageService
from services.gemini_text import GeminiTextService
from services.image_storage import ImageStorage

logger = logging.getLogger(__name__)


# ============ Database ============


async def get_db_session() -> AsyncGenerator[AsyncSession | None, None]:
    """
    Get database session dependency.

    Returns None if database is not configured/available.
    """
    if not is_database_available():
        yield None
        return

    async for session in get_session():
        yield session


async def require_db_session(
    session: AsyncSession | None = Depends(get_db_session),
) -> AsyncSession:
    """Database session, or 503 when the database is not initialized."""
    if session is None:
        raise DatabaseUnavailableError()
    return session


async def get_prompt_repository(
    session: AsyncSession = Depends(require_db_session),
) -> PromptRepository:
    """Get PromptRepository dependency."""
    return PromptRepository(session)


async def get_tag_repository(
    session: AsyncSession = Depends(require_db_session),
) -> TagRepository:
    """Get TagRepository dependency."""
    return TagRepository(session)


async def get_collection_repository(
    session: AsyncSession = Depends(require_db_session),
) -> CollectionRepository:
    """Get CollectionRepository dependency."""
    return CollectionRepository(session)


async def get_template_repository(
    session: AsyncSession | None = Depends(get_db_session),
) -> TemplateRepository | None:
    """Get TemplateRepository dependency; None falls back to built-in templates."""
    if session is None:
        return None
    return TemplateRepository(session)


# ============ Services ============


def get_request_api_key(
    x_api_key: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> str | None:
    """Gemini key from the X-API-Key header, else the configured one."""
    return x_api_key or settings.gemini_api_key


def get_image_service(
    api_key: str | None = Depends(get_request_api_key),
    settings: Settings = Depends(get_settings),
) -> GeminiImageService:
    """Image generation client for this request. Raises if no key is available."""
    return GeminiImageService(api_key=api_key, settings=settings)


def get_text_service(
    api_key: str | None = Depends(get_request_api_key),
    settings: Settings = Depends(get_settings),
) -> GeminiTextService:
    """Text/vision client for this request. Raises if no key is available."""
    return GeminiTextService(api_key=api_key, settings=settings)


def get_optional_text_service(
    api_key: str | None = Depends(get_request_api_key),
    settings: Settings = Depends(get_settings),
) -> GeminiTextService | None:
    """Text client when a key is available, else None."""
    if not api_key:
        return None
    return GeminiTextService(api_key=api_key, settings=settings)


def get_image_storage(settings: Settings = Depends(get_settings)) -> ImageStorage:
    """Local upload storage."""
    return ImageStorage(settings=settings)


def get_optional_image_service(
    api_key: str | None = Depends(get_request_api_key),
    settings: Settings = Depends(get_settings),
) -> GeminiImageService | None:
    """Image client when a key is available, else None."""
    if not api_key:
        return None
    return GeminiImageService(api_key=api_key, settings=settings)


# ============ HTTP ============


async def get_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """Outbound HTTP client for fetching remote images."""
    async with httpx.AsyncClient(timeout=30.0, follow_redirects=True) as client:
        yield client
