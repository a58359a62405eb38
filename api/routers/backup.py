"""
Backup router.

Endpoints:
- GET /api/backup - Download every entry as a JSON file
- POST /api/import - Restore entries from a backup
- POST /api/batch-import - Catalogue new image files with a vision model
"""

import logging
import time
from datetime import UTC, datetime

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import (
    get_http_client,
    get_image_storage,
    get_prompt_repository,
    get_text_service,
)
from api.schemas.backup import (
    BackupExport,
    BackupItem,
    BatchImportRequest,
    BatchImportResponse,
    BatchImportResult,
    BatchImportSummary,
    ImageAnalysis,
    ImportRequest,
    ImportResponse,
)
from core.exceptions import AppException
from core.security import require_bearer_key
from database.models import PromptEntry
from database.repositories import PromptRepository
from services.gemini_text import GeminiTextService
from services.image_storage import ImageStorage, StoredImage, decode_base64_image

logger = logging.getLogger(__name__)

router = APIRouter(tags=["backup"])


def entry_to_backup_item(entry: PromptEntry) -> BackupItem:
    return BackupItem(
        id=str(entry.id),
        prompt=entry.prompt,
        original_prompt=entry.original_prompt,
        prompt_zh=entry.prompt_zh,
        negative_prompt=entry.negative_prompt,
        image_url=entry.image_url,
        width=entry.width,
        height=entry.height,
        tags=entry.tags,
        is_favorite=entry.is_favorite,
        seed=entry.seed,
        cfg_scale=entry.cfg_scale,
        steps=entry.steps,
        sampler=entry.sampler,
        created_at=entry.created_at,
    )


async def restore_image(
    image_url: str | None,
    storage: ImageStorage,
    client: httpx.AsyncClient,
) -> str | None:
    """
    Bring an exported image back into local storage.

    Data URLs are decoded and stored, local paths are kept if the file still
    exists, remote URLs are downloaded. Anything else yields None.
    """
    if not image_url:
        return None

    if image_url.startswith("data:"):
        stored = await storage.save_base64(image_url, prefix="imported")
        return stored.url

    if storage.is_local_url(image_url):
        return image_url if storage.exists(image_url) else None

    if image_url.startswith(("http://", "https://")):
        try:
            response = await client.get(image_url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Failed to download {image_url}: {e}")
            return None
        stored = await storage.save_bytes(response.content, prefix="imported")
        return stored.url

    return None


@router.get("/backup", response_class=JSONResponse)
async def export_backup(
    repo: PromptRepository = Depends(get_prompt_repository),
) -> JSONResponse:
    """Export all entries, newest first, as a downloadable JSON file."""
    entries = await repo.list_all()
    export = BackupExport(
        export_date=datetime.now(UTC),
        total_items=len(entries),
        items=[entry_to_backup_item(e) for e in entries],
    )

    filename = f"prompt-database-backup-{int(time.time() * 1000)}.json"
    return JSONResponse(
        content=export.model_dump(mode="json"),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import", response_model=ImportResponse, dependencies=[Depends(require_bearer_key)])
async def import_backup(
    request: ImportRequest,
    repo: PromptRepository = Depends(get_prompt_repository),
    storage: ImageStorage = Depends(get_image_storage),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> ImportResponse:
    """
    Restore entries from a backup.

    Items without a prompt are skipped. An image that cannot be restored
    does not skip its item; the entry is created without an image.
    """
    imported = 0
    skipped = 0

    for item in request.items:
        if not item.prompt:
            skipped += 1
            continue

        try:
            image_url = await restore_image(item.image_url, storage, client)
        except AppException as e:
            logger.warning(f"Could not restore image for imported item: {e.message}")
            image_url = None

        await repo.create(
            prompt=item.prompt,
            original_prompt=item.original_prompt,
            prompt_zh=item.prompt_zh,
            negative_prompt=item.negative_prompt,
            image_url=image_url,
            width=item.width or 1024,
            height=item.height or 1024,
            sampler=item.sampler,
            seed=item.seed,
            cfg_scale=item.cfg_scale,
            steps=item.steps,
            tags=item.tags,
            is_favorite=item.is_favorite,
            created_at=item.created_at,
        )
        imported += 1

    logger.info(f"Imported {imported} item(s), skipped {skipped}")

    return ImportResponse(imported=imported, skipped=skipped, total=len(request.items))


@router.post(
    "/batch-import",
    response_model=BatchImportResponse,
    dependencies=[Depends(require_bearer_key)],
)
async def batch_import(
    request: BatchImportRequest,
    repo: PromptRepository = Depends(get_prompt_repository),
    storage: ImageStorage = Depends(get_image_storage),
    text_service: GeminiTextService = Depends(get_text_service),
) -> BatchImportResponse:
    """
    Store image files and create an entry for each from a vision analysis.

    Files are processed one at a time. A file that fails is reported in the
    results and its stored copy removed; the rest of the batch continues.
    """
    results: list[BatchImportResult] = []

    for file in request.files:
        stored: StoredImage | None = None
        try:
            data, _ = decode_base64_image(file.image)
            stored = await storage.save_bytes(data, prefix="import")
            description = await text_service.describe_image(data, mime_type=stored.content_type)

            entry = await repo.create(
                prompt=description.prompt_en,
                original_prompt=f"Batch Import: {file.filename}",
                prompt_zh=description.prompt_zh,
                image_url=stored.url,
                width=stored.width or 1024,
                height=stored.height or 1024,
                sampler="Imported",
                seed=0,
                cfg_scale=7.0,
                steps=20,
                tags=",".join(description.tags or ["Imported"]),
            )
        except AppException as e:
            logger.warning(f"Batch import of {file.filename} failed: {e.message}")
            if stored is not None:
                await storage.delete(stored.url)
            results.append(
                BatchImportResult(status="error", filename=file.filename, error=e.message)
            )
            continue

        results.append(
            BatchImportResult(
                status="success",
                filename=file.filename,
                id=entry.id,
                analysis=ImageAnalysis(
                    style=description.style,
                    mood=description.mood,
                    category=description.category,
                ),
            )
        )

    succeeded = sum(1 for r in results if r.status == "success")
    logger.info(f"Batch import: {succeeded}/{len(results)} file(s) catalogued")

    return BatchImportResponse(
        results=results,
        summary=BatchImportSummary(
            total=len(results),
            success=succeeded,
            failed=len(results) - succeeded,
        ),
    )
