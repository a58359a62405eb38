"""
Gallery entry schemas.
"""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from api.schemas.common import Pagination
from services.gemini_image import EngineType


class PromptProvider(StrEnum):
    """Where the image for a new entry comes from."""

    MOCK = "mock"  # placeholder image URL
    GEMINI = "gemini"


class PromptInfo(BaseModel):
    """A gallery entry. The embedding vector is never returned."""

    id: UUID
    prompt: str
    original_prompt: str | None = None
    prompt_zh: str | None = None
    negative_prompt: str | None = None
    image_url: str | None = None
    width: int = 1024
    height: int = 1024
    sampler: str | None = None
    seed: int | None = None
    cfg_scale: float | None = None
    steps: int | None = None
    tags: str | None = None
    is_favorite: bool = False
    has_embedding: bool = False
    score: float | None = Field(None, description="Cosine similarity, semantic search only")
    created_at: datetime


class PromptListResponse(BaseModel):
    prompts: list[PromptInfo]
    pagination: Pagination
    semantic: bool = Field(False, description="Whether semantic ranking was used")


class CreatePromptRequest(BaseModel):
    """Generate an image for a prompt and save it to the gallery."""

    prompt: str = Field(..., min_length=1, max_length=4000)
    negative_prompt: str | None = None
    width: int = Field(default=1024, ge=64, le=4096)
    height: int = Field(default=1024, ge=64, le=4096)
    sampler: str = "Euler a"
    seed: int | None = Field(default=None, description="Random when absent or -1")
    cfg_scale: float = 7.0
    steps: int = Field(default=25, ge=1, le=150)
    provider: PromptProvider = PromptProvider.MOCK
    image_engine: EngineType = EngineType.IMAGEN
    image_count: int = Field(default=1, ge=1, le=4)
    preview_mode: bool = Field(
        default=False,
        description="Return images without saving; implied when image_count > 1",
    )
    reference_images: list[str] = Field(default_factory=list, description="base64 (pro only)")
    analyze: bool = Field(default=True, description="Translate and tag with Gemini when a key is set")
    use_master_filter: bool = False


class PreviewResponse(BaseModel):
    """Images generated in preview mode; pick one and PUT it to save."""

    preview_mode: bool = True
    images: list[str]
    prompt: str
    original_prompt: str
    prompt_zh: str = ""
    tags: str = ""
    width: int
    height: int
    seed: int
    cfg_scale: float
    steps: int
    negative_prompt: str | None = None
    image_engine: EngineType | None = None


class SaveSelectedRequest(BaseModel):
    """Save an image chosen from a preview."""

    image_url: str
    prompt: str = Field(..., min_length=1)
    original_prompt: str | None = None
    prompt_zh: str | None = None
    negative_prompt: str | None = None
    width: int = 1024
    height: int = 1024
    seed: int | None = None
    cfg_scale: float | None = None
    steps: int | None = None
    tags: str | None = None
    image_engine: str | None = None


class UpdatePromptRequest(BaseModel):
    """Partial update; omitted fields are unchanged."""

    prompt: str | None = Field(default=None, min_length=1)
    prompt_zh: str | None = None
    negative_prompt: str | None = None
    tags: str | None = None
    is_favorite: bool | None = None


class UpdateTagsRequest(BaseModel):
    tags: str = Field(..., description="Comma-joined tags")


class BatchDeleteRequest(BaseModel):
    ids: list[UUID] = Field(..., min_length=1)


class BatchDeleteResponse(BaseModel):
    success: bool = True
    deleted: int


class UploadPromptRequest(BaseModel):
    """Store an existing image (base64 or data URL) as a new entry."""

    image: str = Field(..., min_length=1)
    filename: str | None = None
    tags: str | None = None


class EmbeddingResponse(BaseModel):
    id: UUID
    dimensions: int
