"""
Pytest configuration and fixtures.
"""

import asyncio
import base64
import os
import tempfile
from collections.abc import AsyncGenerator
from io import BytesIO
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

# Set test environment before importing app
os.environ["ENVIRONMENT"] = "testing"
os.environ["DEBUG"] = "true"
os.environ["DATABASE_ENABLED"] = "false"
os.environ["GEMINI_API_KEY"] = ""
os.environ["API_BEARER_KEY"] = ""
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="gallery-uploads-")
os.environ["UPLOAD_SEARCH_DIRS"] = "[]"
os.environ["AUTO_TAG_DELAY_SECONDS"] = "0"

from api.dependencies import (  # noqa: E402
    get_db_session,
    get_http_client,
    get_image_service,
    get_image_storage,
    get_optional_image_service,
    get_optional_text_service,
    get_text_service,
)
from core.config import get_settings  # noqa: E402
from database import create_tables  # noqa: E402
from services.gemini_image import ImageGenerationResult  # noqa: E402
from services.gemini_text import (  # noqa: E402
    EnhancedPrompt,
    ImageDescription,
    PromptAnalysis,
    Translation,
)
from services.image_storage import ImageStorage  # noqa: E402


def make_png(width: int = 8, height: int = 8, color=(200, 30, 30)) -> bytes:
    """Encode a small solid-colour PNG."""
    buffer = BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


# ============ Images ============


@pytest.fixture
def png_factory():
    return make_png


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def png_data_url(png_bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


# ============ Settings / Storage ============


@pytest.fixture
def test_settings():
    return get_settings()


@pytest.fixture
def storage(tmp_path, test_settings) -> ImageStorage:
    return ImageStorage(settings=test_settings, base_dir=tmp_path / "uploads")


# ============ Database ============


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """In-memory session for repository tests, living on the test's event loop."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    await create_tables(engine)
    factory = async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)

    async with factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def db_engine(tmp_path):
    """
    File-backed engine for router tests.

    NullPool opens a fresh connection per session, so the engine can be
    shared between this thread and the TestClient's event loop.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    asyncio.run(create_tables(engine))
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
def run_in_session(session_factory):
    """
    Run `callback(session)` in its own committed session and return its result.

    Used by router tests to seed or inspect rows directly.
    """

    def _run(callback):
        async def runner():
            async with session_factory() as session:
                result = await callback(session)
                await session.commit()
                return result

        return asyncio.run(runner())

    return _run


# ============ Mock Services ============


@pytest.fixture
def mock_image_service(png_bytes):
    """Mock GeminiImageService returning one PNG."""
    service = MagicMock()
    service.generate = AsyncMock(
        return_value=ImageGenerationResult(
            success=True,
            images=[png_bytes],
            model="imagen-4.0-ultra-generate-001",
            duration=1.25,
        )
    )
    return service


@pytest.fixture
def mock_text_service():
    """Mock GeminiTextService with canned replies."""
    service = MagicMock()
    service.analyze_prompt = AsyncMock(
        side_effect=lambda prompt: PromptAnalysis(
            en_prompt=prompt,
            zh_prompt="夕陽下的山脈",
            tags=["風景", "日落"],
            analyzed=True,
        )
    )
    service.enhance_prompt = AsyncMock(
        return_value=EnhancedPrompt(
            original="a cat",
            enhanced="A fluffy ginger cat curled on a sunlit windowsill, soft morning light",
            enhanced_zh="一隻蓬鬆的橘貓蜷縮在陽光照耀的窗台上",
            additions={"lighting": "soft morning light"},
            prompt_score={"before": 3, "after": 8},
            tags=["cat", "cozy"],
        )
    )
    service.translate = AsyncMock(
        return_value=Translation(
            original="一隻貓",
            translated="a cat",
            enhanced="a cute cat, soft lighting",
            keywords=["cat"],
        )
    )
    service.suggest_tags = AsyncMock(return_value=["貓", "可愛"])
    service.describe_image = AsyncMock(
        return_value=ImageDescription(
            prompt_en="a red square on a white background, minimalist",
            prompt_zh="白底紅方塊",
            tags=["red", "square"],
            style="minimalist",
            mood="calm",
            category="abstract",
        )
    )
    service.embed = AsyncMock(return_value=[1.0, 0.0, 0.0])
    return service


# ============ App Fixtures ============


@pytest.fixture
def app(session_factory, storage, mock_image_service, mock_text_service):
    """Application with the database, storage and Gemini clients overridden."""
    from api.main import app as fastapi_app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides.update(
        {
            get_db_session: override_get_db_session,
            get_image_storage: lambda: storage,
            get_image_service: lambda: mock_image_service,
            get_optional_image_service: lambda: mock_image_service,
            get_text_service: lambda: mock_text_service,
            get_optional_text_service: lambda: mock_text_service,
        }
    )
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    """Synchronous test client."""
    return TestClient(app)


@pytest.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Asynchronous test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def no_db_client() -> TestClient:
    """Client for an application running without a database."""
    from api.main import app as fastapi_app

    async def no_session():
        yield None

    fastapi_app.dependency_overrides[get_db_session] = no_session
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def override_http_client(app):
    """Install an httpx client backed by the given transport for remote downloads."""

    def _install(transport):
        async def _client():
            async with AsyncClient(transport=transport) as http_client:
                yield http_client

        app.dependency_overrides[get_http_client] = _client

    return _install


# ============ Sample Data ============


@pytest.fixture
def create_entry(client):
    """Create a gallery entry through the API (mock provider, no analysis)."""

    def _create(prompt: str = "a mountain at sunset", **fields) -> dict:
        payload = {"prompt": prompt, "analyze": False, **fields}
        response = client.post("/api/prompts", json=payload)
        assert response.status_code == 200, response.text
        return response.json()

    return _create


@pytest.fixture
def upload_entry(client, png_data_url):
    """Create a gallery entry backed by a stored PNG."""

    def _upload(filename: str = "photo.png", tags: str | None = None) -> dict:
        response = client.post(
            "/api/prompts/upload",
            json={"image": png_data_url, "filename": filename, "tags": tags},
        )
        assert response.status_code == 200, response.text
        return response.json()

    return _upload
