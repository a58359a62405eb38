"""
Uploaded image serving router.

Serves files written by ImageStorage, checking the upload directory first
and then the fallback directories.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from api.dependencies import get_image_storage
from core.exceptions import NotFoundError
from services.image_storage import ImageStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["uploads"])

CACHE_CONTROL = "public, max-age=31536000, immutable"


@router.get("/{path:path}")
async def serve_upload(
    path: str,
    storage: ImageStorage = Depends(get_image_storage),
) -> Response:
    """
    Serve a stored image.

    Args:
        path: File path relative to the upload directory

    Returns:
        Image bytes with a long-lived cache header
    """
    loaded = await storage.load(path)
    if loaded is None:
        raise NotFoundError(message="File not found", details={"path": path})

    data, content_type = loaded
    return Response(
        content=data,
        media_type=content_type,
        headers={"Cache-Control": CACHE_CONTROL},
    )
