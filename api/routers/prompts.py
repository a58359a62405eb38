"""
Prompts router for the image gallery.

Endpoints:
- GET /api/prompts - List entries (keyword or semantic search, paged)
- POST /api/prompts - Generate an image for a prompt and save it
- PUT /api/prompts - Save an image picked from a preview
- DELETE /api/prompts/batch - Delete several entries
- POST /api/prompts/upload - Store an uploaded image as an entry
- GET /api/prompts/{prompt_id} - Get an entry
- PATCH /api/prompts/{prompt_id} - Update an entry
- DELETE /api/prompts/{prompt_id} - Delete an entry
- PATCH /api/prompts/{prompt_id}/tags - Replace tags
- POST /api/prompts/{prompt_id}/favorite - Toggle favorite
- POST /api/prompts/{prompt_id}/embedding - Compute the search embedding
"""

import logging
import random
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from api.dependencies import (
    get_image_storage,
    get_optional_image_service,
    get_optional_text_service,
    get_prompt_repository,
    get_text_service,
)
from api.routers.generate import decode_reference_images, raise_for_result
from api.schemas.common import MessageResponse, Pagination
from api.schemas.prompts import (
    BatchDeleteRequest,
    BatchDeleteResponse,
    CreatePromptRequest,
    EmbeddingResponse,
    PreviewResponse,
    PromptInfo,
    PromptListResponse,
    PromptProvider,
    SaveSelectedRequest,
    UpdatePromptRequest,
    UpdateTagsRequest,
    UploadPromptRequest,
)
from core.config import Settings, get_settings
from core.exceptions import ConfigurationError, PromptNotFoundError
from core.security import require_bearer_key
from database.models import PromptEntry
from database.repositories import PromptRepository
from services.gemini_image import GeminiImageService
from services.gemini_text import GeminiTextService
from services.image_storage import ImageStorage
from services.prompt_filter import compose, engine_mode_for
from services.semantic_search import rank_by_similarity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/prompts", tags=["prompts"])

DEFAULT_SAMPLER = "Euler a"
MAX_SEED = 1_000_000


# ============ Helpers ============


def prompt_to_info(entry: PromptEntry, score: float | None = None) -> PromptInfo:
    """Convert database entry to response model."""
    return PromptInfo(
        id=entry.id,
        prompt=entry.prompt,
        original_prompt=entry.original_prompt,
        prompt_zh=entry.prompt_zh,
        negative_prompt=entry.negative_prompt,
        image_url=entry.image_url,
        width=entry.width,
        height=entry.height,
        sampler=entry.sampler,
        seed=entry.seed,
        cfg_scale=entry.cfg_scale,
        steps=entry.steps,
        tags=entry.tags,
        is_favorite=entry.is_favorite,
        has_embedding=entry.embedding is not None,
        score=round(score, 4) if score is not None else None,
        created_at=entry.created_at,
    )


def aspect_ratio_for(width: int, height: int) -> str:
    """Closest supported aspect ratio for the requested size."""
    if width == height:
        return "1:1"
    return "16:9" if width > height else "9:16"


def engine_tags(engine: str | None, tags: str | None) -> str:
    """Prefix tags with the "Engine:<name>" marker shown by the gallery."""
    if not engine:
        return tags or ""
    return f"Engine:{engine}, {tags}" if tags else f"Engine:{engine}"


def resolve_seed(seed: int | None) -> int:
    if seed is None or seed == -1:
        return random.randrange(MAX_SEED)
    return seed


async def get_entry_or_404(repo: PromptRepository, prompt_id: UUID) -> PromptEntry:
    entry = await repo.get_by_id(prompt_id)
    if entry is None:
        raise PromptNotFoundError(details={"id": str(prompt_id)})
    return entry


def paginate(page: int, limit: int, total: int, returned: int) -> Pagination:
    skip = (page - 1) * limit
    return Pagination(page=page, limit=limit, total=total, has_more=skip + returned < total)


# ============ Listing ============


@router.get("", response_model=PromptListResponse)
async def list_prompts(
    search: str | None = Query(default=None, max_length=500),
    semantic: bool = Query(default=False),
    favorites_only: bool = Query(default=False),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    repo: PromptRepository = Depends(get_prompt_repository),
    text_service: GeminiTextService | None = Depends(get_optional_text_service),
    settings: Settings = Depends(get_settings),
) -> PromptListResponse:
    """
    List gallery entries, newest first.

    With `semantic=true`, a search query and a Gemini key, entries are
    ranked by cosine similarity of their stored embeddings instead; only
    scores above the configured threshold are returned.
    """
    skip = (page - 1) * limit
    search = search.strip() if search else None

    if semantic and search and text_service is not None:
        logger.info(f"Semantic search: {search!r}")
        query_vector = await text_service.embed(search)
        candidates = await repo.list_with_embeddings(favorites_only=favorites_only)
        ranked = rank_by_similarity(
            query_vector,
            candidates,
            [c.embedding for c in candidates],
            threshold=settings.semantic_threshold,
        )
        page_items = ranked[skip : skip + limit]
        return PromptListResponse(
            prompts=[prompt_to_info(s.item, s.score) for s in page_items],
            pagination=paginate(page, limit, len(ranked), len(page_items)),
            semantic=True,
        )

    entries = await repo.list_entries(
        search=search, favorites_only=favorites_only, limit=limit, offset=skip
    )
    total = await repo.count(search=search, favorites_only=favorites_only)

    return PromptListResponse(
        prompts=[prompt_to_info(e) for e in entries],
        pagination=paginate(page, limit, total, len(entries)),
    )


# ============ Creation ============


@router.post(
    "",
    response_model=PromptInfo | PreviewResponse,
    dependencies=[Depends(require_bearer_key)],
)
async def create_prompt(
    request: CreatePromptRequest,
    repo: PromptRepository = Depends(get_prompt_repository),
    storage: ImageStorage = Depends(get_image_storage),
    text_service: GeminiTextService | None = Depends(get_optional_text_service),
    image_service: GeminiImageService | None = Depends(get_optional_image_service),
    settings: Settings = Depends(get_settings),
):
    """
    Generate an image for a prompt and save the entry.

    When a Gemini key is available the prompt is first translated and
    tagged. Several images, or preview mode, return the stored images
    without creating an entry; the client then saves one with PUT.
    """
    original_prompt = request.prompt
    final_prompt = original_prompt
    prompt_zh = ""
    tags = ""

    if request.analyze and text_service is not None:
        analysis = await text_service.analyze_prompt(original_prompt)
        final_prompt = analysis.en_prompt
        prompt_zh = analysis.zh_prompt
        tags = ", ".join(analysis.tags)

    if request.use_master_filter:
        final_prompt = compose(final_prompt, engine_mode_for(request.image_engine))

    seed = resolve_seed(request.seed)

    if request.provider == PromptProvider.GEMINI:
        if image_service is None:
            raise ConfigurationError(message="GEMINI_API_KEY is not configured")

        engine = request.image_engine
        result = await image_service.generate(
            prompt=final_prompt,
            engine=engine,
            images=decode_reference_images(request.reference_images),
            aspect_ratio=aspect_ratio_for(request.width, request.height),
            sample_count=request.image_count,
        )
        raise_for_result(result)

        image_urls = []
        for data in result.images:
            stored = await storage.save_bytes(data, prefix=str(engine))
            image_urls.append(stored.url)
        engine_label = str(engine)
    else:
        image_urls = [
            settings.placeholder_image_url.format(
                seed=seed, width=request.width, height=request.height
            )
        ]
        engine = None
        engine_label = str(request.provider)

    if request.preview_mode or request.image_count > 1:
        return PreviewResponse(
            images=image_urls,
            prompt=final_prompt,
            original_prompt=original_prompt,
            prompt_zh=prompt_zh,
            tags=tags,
            width=request.width,
            height=request.height,
            seed=seed,
            cfg_scale=request.cfg_scale,
            steps=request.steps,
            negative_prompt=request.negative_prompt,
            image_engine=engine,
        )

    entry = await repo.create(
        prompt=final_prompt,
        original_prompt=original_prompt,
        prompt_zh=prompt_zh,
        negative_prompt=request.negative_prompt,
        image_url=image_urls[0],
        width=request.width,
        height=request.height,
        sampler=request.sampler,
        seed=seed,
        cfg_scale=request.cfg_scale,
        steps=request.steps,
        tags=engine_tags(engine_label, tags),
    )
    logger.info(f"Saved prompt {entry.id} ({engine_label})")

    return prompt_to_info(entry)


@router.put("", response_model=PromptInfo, dependencies=[Depends(require_bearer_key)])
async def save_selected_image(
    request: SaveSelectedRequest,
    repo: PromptRepository = Depends(get_prompt_repository),
) -> PromptInfo:
    """Save the image picked from a preview as a new entry."""
    entry = await repo.create(
        prompt=request.prompt,
        original_prompt=request.original_prompt,
        prompt_zh=request.prompt_zh,
        negative_prompt=request.negative_prompt or "",
        image_url=request.image_url,
        width=request.width,
        height=request.height,
        sampler=DEFAULT_SAMPLER,
        seed=request.seed or 0,
        cfg_scale=request.cfg_scale or 7.0,
        steps=request.steps or 25,
        tags=engine_tags(request.image_engine, request.tags),
    )
    return prompt_to_info(entry)


@router.delete(
    "/batch",
    response_model=BatchDeleteResponse,
    dependencies=[Depends(require_bearer_key)],
)
async def batch_delete_prompts(
    request: BatchDeleteRequest,
    repo: PromptRepository = Depends(get_prompt_repository),
) -> BatchDeleteResponse:
    """Delete several entries at once."""
    deleted = await repo.delete_many(request.ids)
    logger.info(f"Batch deleted {deleted} prompt(s)")
    return BatchDeleteResponse(deleted=deleted)


@router.post("/upload", response_model=PromptInfo, dependencies=[Depends(require_bearer_key)])
async def upload_image(
    request: UploadPromptRequest,
    repo: PromptRepository = Depends(get_prompt_repository),
    storage: ImageStorage = Depends(get_image_storage),
) -> PromptInfo:
    """Store an uploaded image and create an entry for it."""
    stored = await storage.save_base64(request.image, prefix="upload")

    entry = await repo.create(
        prompt=f"[Uploaded image] {request.filename or 'Untitled'}",
        image_url=stored.url,
        width=stored.width or 1024,
        height=stored.height or 1024,
        tags=request.tags or "upload",
    )
    return prompt_to_info(entry)


# ============ Single entry ============


@router.get("/{prompt_id}", response_model=PromptInfo)
async def get_prompt(
    prompt_id: UUID,
    repo: PromptRepository = Depends(get_prompt_repository),
) -> PromptInfo:
    """Get a single entry."""
    return prompt_to_info(await get_entry_or_404(repo, prompt_id))


@router.patch("/{prompt_id}", response_model=PromptInfo, dependencies=[Depends(require_bearer_key)])
async def update_prompt(
    prompt_id: UUID,
    request: UpdatePromptRequest,
    repo: PromptRepository = Depends(get_prompt_repository),
) -> PromptInfo:
    """Update prompt text, translation, negative prompt, tags or favorite flag."""
    entry = await get_entry_or_404(repo, prompt_id)
    entry = await repo.update(entry, **request.model_dump(exclude_unset=True))
    return prompt_to_info(entry)


@router.delete(
    "/{prompt_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_bearer_key)],
)
async def delete_prompt(
    prompt_id: UUID,
    repo: PromptRepository = Depends(get_prompt_repository),
) -> MessageResponse:
    """Delete an entry. The image file is left in place."""
    if not await repo.delete(prompt_id):
        raise PromptNotFoundError(details={"id": str(prompt_id)})
    return MessageResponse(message="Prompt deleted")


@router.patch(
    "/{prompt_id}/tags",
    response_model=PromptInfo,
    dependencies=[Depends(require_bearer_key)],
)
async def update_tags(
    prompt_id: UUID,
    request: UpdateTagsRequest,
    repo: PromptRepository = Depends(get_prompt_repository),
) -> PromptInfo:
    """Replace the comma-joined tag string."""
    entry = await get_entry_or_404(repo, prompt_id)
    entry = await repo.set_tags(entry, request.tags)
    return prompt_to_info(entry)


@router.post(
    "/{prompt_id}/favorite",
    response_model=PromptInfo,
    dependencies=[Depends(require_bearer_key)],
)
async def toggle_favorite(
    prompt_id: UUID,
    repo: PromptRepository = Depends(get_prompt_repository),
) -> PromptInfo:
    """Toggle the favorite flag."""
    entry = await get_entry_or_404(repo, prompt_id)
    entry = await repo.toggle_favorite(entry)
    return prompt_to_info(entry)


@router.post(
    "/{prompt_id}/embedding",
    response_model=EmbeddingResponse,
    dependencies=[Depends(require_bearer_key)],
)
async def generate_embedding(
    prompt_id: UUID,
    repo: PromptRepository = Depends(get_prompt_repository),
    text_service: GeminiTextService = Depends(get_text_service),
) -> EmbeddingResponse:
    """Embed the prompt and its translation for semantic search."""
    entry = await get_entry_or_404(repo, prompt_id)

    text = entry.prompt + (f" {entry.prompt_zh}" if entry.prompt_zh else "")
    vector = await text_service.embed(text)
    await repo.set_embedding(entry, vector)

    return EmbeddingResponse(id=entry.id, dimensions=len(vector))
