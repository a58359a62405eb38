"""
Image generation and prompt composition schemas.
"""

from pydantic import BaseModel, Field, field_validator

from services.gemini_image import EngineType
from services.prompt_filter import EngineMode, SceneCategory


class ComposeRequest(BaseModel):
    """Preview the master filter for a prompt."""

    prompt: str = Field(..., min_length=1, max_length=4000, description="Raw user prompt")
    engine: EngineType | None = Field(
        default=None,
        description="Hosted model variant; picks the composer mode when engine_mode is not set",
    )
    engine_mode: EngineMode | None = Field(default=None, description="fast or full")


class SceneProfileInfo(BaseModel):
    lens: str
    lighting: str
    style: str


class ComposeResponse(BaseModel):
    """Intermediate values of the master filter."""

    original: str
    scene: SceneCategory
    engine_mode: EngineMode
    cleaned: str = Field(..., description="Prompt with conflicting camera jargon removed")
    profile: SceneProfileInfo
    composed: str = Field(..., description="Final prompt sent to the model")


class GenerateRequest(BaseModel):
    """Request to generate images directly from the hosted models."""

    prompt: str = Field(..., min_length=1, max_length=4000, description="Text prompt")
    engine: EngineType = Field(..., description="flash, pro or imagen")
    images: list[str] = Field(
        default_factory=list,
        max_length=14,
        description="Reference images as base64 or data URLs (pro only)",
    )
    aspect_ratio: str | None = Field(default=None, description="e.g. 1:1, 16:9, 9:16")
    thinking_level: str | None = Field(default=None, description="low or high (pro only)")
    sample_count: int = Field(default=1, ge=1, le=4, description="Number of images (imagen only)")
    use_master_filter: bool = Field(
        default=False,
        description="Rewrite the prompt with the scene-aware master filter first",
    )
    save: bool = Field(default=False, description="Also store the images under /uploads")

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Prompt is required")
        return v


class GenerateResponse(BaseModel):
    """Generated images."""

    success: bool = True
    image_base64: str | None = Field(None, description="First image, plain base64")
    images_base64: list[str] = Field(default_factory=list)
    image_urls: list[str] = Field(default_factory=list, description="Stored copies, when saved")
    mime_type: str = "image/png"
    model: str | None = None
    prompt: str = Field(..., description="Prompt actually sent to the model")
    text_response: str | None = None
    duration: float = 0.0
