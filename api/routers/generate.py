"""
Image generation router.

Endpoints:
- POST /api/compose - Preview the master prompt filter
- POST /api/generate - Generate images with flash, pro or imagen
"""

import binascii
import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_image_service, get_image_storage
from api.schemas.generate import (
    ComposeRequest,
    ComposeResponse,
    GenerateRequest,
    GenerateResponse,
    SceneProfileInfo,
)
from core.exceptions import ContentBlockedError, GenerationError, ValidationError
from core.security import require_bearer_key
from services.gemini_image import GeminiImageService, ImageGenerationResult, InlineImage
from services.image_storage import ImageStorage
from services.prompt_filter import EngineMode, analyze, compose, engine_mode_for

logger = logging.getLogger(__name__)

router = APIRouter(tags=["generate"])


# ============ Helpers ============


def raise_for_result(result: ImageGenerationResult) -> None:
    """Translate a failed generation result into an API error."""
    if result.success:
        return
    if result.safety_blocked:
        raise ContentBlockedError(details={"model": result.model})
    raise GenerationError(
        message=result.error or "Image generation failed",
        details={"model": result.model, "retryable": result.retryable},
    )


def decode_reference_images(images: list[str]) -> list[InlineImage]:
    try:
        return [InlineImage.from_base64(img) for img in images]
    except (binascii.Error, ValueError) as e:
        raise ValidationError(message="Invalid reference image data") from e


# ============ Endpoints ============


@router.post("/compose", response_model=ComposeResponse)
async def compose_prompt(request: ComposeRequest) -> ComposeResponse:
    """
    Show what the master filter does to a prompt.

    The composer mode comes from engine_mode, else from the engine
    (flash is fast, pro and imagen are full), else full.
    """
    if request.engine_mode is not None:
        mode = request.engine_mode
    elif request.engine is not None:
        mode = engine_mode_for(request.engine)
    else:
        mode = EngineMode.FULL

    result = analyze(request.prompt, mode)

    return ComposeResponse(
        original=result.original,
        scene=result.scene,
        engine_mode=result.engine_mode,
        cleaned=result.cleaned,
        profile=SceneProfileInfo(
            lens=result.profile.lens,
            lighting=result.profile.lighting,
            style=result.profile.style,
        ),
        composed=result.composed,
    )


@router.post(
    "/generate",
    response_model=GenerateResponse,
    dependencies=[Depends(require_bearer_key)],
)
async def generate_image(
    request: GenerateRequest,
    service: GeminiImageService = Depends(get_image_service),
    storage: ImageStorage = Depends(get_image_storage),
) -> GenerateResponse:
    """Generate images and return them as base64, optionally storing copies."""
    prompt = request.prompt
    if request.use_master_filter:
        prompt = compose(prompt, engine_mode_for(request.engine))

    result = await service.generate(
        prompt=prompt,
        engine=request.engine,
        images=decode_reference_images(request.images),
        aspect_ratio=request.aspect_ratio,
        thinking_level=request.thinking_level,
        sample_count=request.sample_count,
    )
    raise_for_result(result)

    image_urls = []
    if request.save:
        for data in result.images:
            stored = await storage.save_bytes(data, prefix=str(request.engine))
            image_urls.append(stored.url)

    return GenerateResponse(
        image_base64=result.image_base64,
        images_base64=result.images_base64,
        image_urls=image_urls,
        mime_type=result.mime_type,
        model=result.model,
        prompt=prompt,
        text_response=result.text_response,
        duration=round(result.duration, 2),
    )
