"""
AI prompt tools router.

Endpoints:
- POST /api/enhance - Rewrite a short concept into a detailed prompt
- POST /api/translate - Translate between English and Traditional Chinese
- POST /api/describe - Reconstruct a prompt from an image
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_text_service
from api.schemas.tools import (
    DescribeRequest,
    DescribeResponse,
    EnhanceRequest,
    EnhanceResponse,
    TranslateRequest,
    TranslateResponse,
)
from core.exceptions import ExternalServiceError
from core.security import require_bearer_key
from services.gemini_text import GeminiTextService
from services.image_storage import decode_base64_image, inspect_image

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tools"], dependencies=[Depends(require_bearer_key)])


@router.post("/enhance", response_model=EnhanceResponse)
async def enhance_prompt(
    request: EnhanceRequest,
    service: GeminiTextService = Depends(get_text_service),
) -> EnhanceResponse:
    """Art-director rewrite of a prompt."""
    result = await service.enhance_prompt(request.prompt)
    if not result.enhanced:
        raise ExternalServiceError(message="Model returned an empty prompt")

    return EnhanceResponse(
        original=result.original,
        enhanced=result.enhanced,
        enhanced_zh=result.enhanced_zh,
        additions=result.additions,
        prompt_score=result.prompt_score,
        tags=result.tags,
    )


@router.post("/translate", response_model=TranslateResponse)
async def translate_prompt(
    request: TranslateRequest,
    service: GeminiTextService = Depends(get_text_service),
) -> TranslateResponse:
    """Translate a prompt, keeping photography and rendering terms in English."""
    result = await service.translate(request.text, target_lang=request.target_lang)
    if not result.translated:
        raise ExternalServiceError(message="Model returned an empty translation")

    return TranslateResponse(
        original=result.original,
        translated=result.translated,
        enhanced=result.enhanced,
        keywords=result.keywords,
        summary=result.summary,
    )


@router.post("/describe", response_model=DescribeResponse)
async def describe_image(
    request: DescribeRequest,
    service: GeminiTextService = Depends(get_text_service),
) -> DescribeResponse:
    """Image to prompt."""
    data, mime_type = decode_base64_image(request.image)
    _, _, fmt = inspect_image(data)

    result = await service.describe_image(data, mime_type=mime_type or f"image/{fmt.lower()}")
    return DescribeResponse(
        prompt=result.prompt_en,
        prompt_zh=result.prompt_zh,
        tags=result.tags,
        style=result.style,
        mood=result.mood,
        category=result.category,
    )
