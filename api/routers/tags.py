"""
Tags router.

Endpoints:
- GET /api/tags - Most used tags
- POST /api/tags/auto-tag - Tag entries with the vision model
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, Query

from api.dependencies import (
    get_image_storage,
    get_prompt_repository,
    get_tag_repository,
    get_text_service,
)
from api.schemas.tags import (
    AutoTagRequest,
    AutoTagResponse,
    AutoTagResult,
    TagInfo,
    TagListResponse,
)
from core.config import Settings, get_settings
from core.exceptions import AppException
from core.security import require_bearer_key
from database.repositories import PromptRepository, TagRepository
from services.gemini_text import GeminiTextService, split_tags
from services.image_storage import ImageStorage, decode_base64_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tags", tags=["tags"])


def merge_tags(current: str | None, suggested: list[str]) -> tuple[str, list[str]]:
    """
    Append suggested tags that are not already present.

    Returns:
        (merged comma-joined tags, newly added tags)
    """
    existing = split_tags(current)
    added = [t for t in dict.fromkeys(suggested) if t not in existing]
    return ",".join(existing + added), added


async def load_entry_image(image_url: str, storage: ImageStorage) -> tuple[bytes, str] | None:
    """Image bytes and mime type for a stored URL or inline data URL."""
    if image_url.startswith("data:"):
        data, mime_type = decode_base64_image(image_url)
        return data, mime_type or "image/png"
    return await storage.load(image_url)


@router.get("", response_model=TagListResponse)
async def list_tags(
    limit: int = Query(default=100, ge=1, le=500),
    repo: TagRepository = Depends(get_tag_repository),
) -> TagListResponse:
    """List tags by usage count."""
    tags = await repo.list_top(limit=limit)
    return TagListResponse(
        tags=[TagInfo(name=t.name, count=t.count, last_used_at=t.last_used_at) for t in tags]
    )


@router.post(
    "/auto-tag",
    response_model=AutoTagResponse,
    dependencies=[Depends(require_bearer_key)],
)
async def auto_tag(
    request: AutoTagRequest,
    prompt_repo: PromptRepository = Depends(get_prompt_repository),
    tag_repo: TagRepository = Depends(get_tag_repository),
    text_service: GeminiTextService = Depends(get_text_service),
    storage: ImageStorage = Depends(get_image_storage),
    settings: Settings = Depends(get_settings),
) -> AutoTagResponse:
    """
    Ask the vision model for tags of each entry's image.

    Entries are processed one at a time with a pause between calls to stay
    under the free-tier rate limit. A failure on one entry is reported in
    its result and does not stop the batch.
    """
    results: list[AutoTagResult] = []

    for index, prompt_id in enumerate(request.prompt_ids):
        if index > 0 and settings.auto_tag_delay_seconds > 0:
            await asyncio.sleep(settings.auto_tag_delay_seconds)

        entry = await prompt_repo.get_by_id(prompt_id)
        if entry is None or not entry.image_url:
            results.append(
                AutoTagResult(id=prompt_id, success=False, error="Image not found or no URL")
            )
            continue

        try:
            image = await load_entry_image(entry.image_url, storage)
            if image is None:
                results.append(
                    AutoTagResult(id=prompt_id, success=False, error="Image file not found")
                )
                continue
            suggested = await text_service.suggest_tags(image[0], mime_type=image[1])
        except AppException as e:
            logger.warning(f"Auto-tag failed for {prompt_id}: {e.message}")
            results.append(AutoTagResult(id=prompt_id, success=False, error=e.message))
            continue

        merged, added = merge_tags(entry.tags, suggested)
        await prompt_repo.set_tags(entry, merged)
        await tag_repo.increment(added)

        results.append(AutoTagResult(id=prompt_id, success=True, added_tags=added))

    success_count = sum(1 for r in results if r.success)
    logger.info(f"Auto-tagged {success_count}/{len(results)} prompt(s)")

    return AutoTagResponse(
        processed=len(request.prompt_ids),
        success_count=success_count,
        results=results,
    )
