"""
Collections router for grouping gallery entries.

Endpoints:
- GET /api/collections - List collections
- POST /api/collections - Create collection
- GET /api/collections/{id} - Get collection with its entries
- PATCH /api/collections/{id} - Update collection
- DELETE /api/collections/{id} - Delete collection
- POST /api/collections/{id}/items - Add entries
- DELETE /api/collections/{id}/items - Remove entries
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from api.dependencies import get_collection_repository
from api.routers.prompts import prompt_to_info
from api.schemas.collections import (
    CollectionDetail,
    CollectionInfo,
    CollectionItemsRequest,
    CollectionItemsResponse,
    CreateCollectionRequest,
    UpdateCollectionRequest,
)
from api.schemas.common import MessageResponse
from core.exceptions import CollectionNotFoundError
from core.security import require_bearer_key
from database.models import Collection
from database.repositories import CollectionRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/collections", tags=["collections"])


# ============ Helpers ============


def collection_to_info(collection: Collection, item_count: int = 0) -> CollectionInfo:
    """Convert database collection to response model."""
    return CollectionInfo(
        id=collection.id,
        name=collection.name,
        description=collection.description,
        cover_image=collection.cover_image,
        item_count=item_count,
        created_at=collection.created_at,
        updated_at=collection.updated_at,
    )


async def get_collection_or_404(repo: CollectionRepository, collection_id: UUID) -> Collection:
    collection = await repo.get_by_id(collection_id)
    if collection is None:
        raise CollectionNotFoundError(details={"id": str(collection_id)})
    return collection


# ============ Endpoints ============


@router.get("", response_model=list[CollectionInfo])
async def list_collections(
    repo: CollectionRepository = Depends(get_collection_repository),
) -> list[CollectionInfo]:
    """List collections, newest first, with item counts."""
    rows = await repo.list_with_counts()
    return [collection_to_info(collection, count) for collection, count in rows]


@router.post("", response_model=CollectionInfo, dependencies=[Depends(require_bearer_key)])
async def create_collection(
    request: CreateCollectionRequest,
    repo: CollectionRepository = Depends(get_collection_repository),
) -> CollectionInfo:
    """Create a new, empty collection."""
    collection = await repo.create(name=request.name, description=request.description)
    logger.info(f"Created collection {collection.id}: {collection.name}")
    return collection_to_info(collection)


@router.get("/{collection_id}", response_model=CollectionDetail)
async def get_collection(
    collection_id: UUID,
    repo: CollectionRepository = Depends(get_collection_repository),
) -> CollectionDetail:
    """Get a collection and its entries, newest first."""
    collection = await repo.get_by_id_with_prompts(collection_id)
    if collection is None:
        raise CollectionNotFoundError(details={"id": str(collection_id)})

    info = collection_to_info(collection, len(collection.prompts))
    return CollectionDetail(
        **info.model_dump(),
        prompts=[prompt_to_info(p) for p in collection.prompts],
    )


@router.patch(
    "/{collection_id}",
    response_model=CollectionInfo,
    dependencies=[Depends(require_bearer_key)],
)
async def update_collection(
    collection_id: UUID,
    request: UpdateCollectionRequest,
    repo: CollectionRepository = Depends(get_collection_repository),
) -> CollectionInfo:
    """Rename, describe or set the cover of a collection."""
    collection = await get_collection_or_404(repo, collection_id)
    collection = await repo.update(
        collection,
        name=request.name,
        description=request.description,
        cover_image=request.cover_image,
    )
    return collection_to_info(collection, await repo.count_items(collection.id))


@router.delete(
    "/{collection_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_bearer_key)],
)
async def delete_collection(
    collection_id: UUID,
    repo: CollectionRepository = Depends(get_collection_repository),
) -> MessageResponse:
    """Delete a collection. Its entries stay in the gallery."""
    if not await repo.delete(collection_id):
        raise CollectionNotFoundError(details={"id": str(collection_id)})
    return MessageResponse(message="Collection deleted")


@router.post(
    "/{collection_id}/items",
    response_model=CollectionItemsResponse,
    dependencies=[Depends(require_bearer_key)],
)
async def add_collection_items(
    collection_id: UUID,
    request: CollectionItemsRequest,
    repo: CollectionRepository = Depends(get_collection_repository),
) -> CollectionItemsResponse:
    """Add entries; the first entry's image becomes the cover if none is set."""
    collection = await get_collection_or_404(repo, collection_id)
    added = await repo.add_items(collection, request.prompt_ids)

    return CollectionItemsResponse(
        changed=added,
        item_count=await repo.count_items(collection.id),
        cover_image=collection.cover_image,
    )


@router.delete(
    "/{collection_id}/items",
    response_model=CollectionItemsResponse,
    dependencies=[Depends(require_bearer_key)],
)
async def remove_collection_items(
    collection_id: UUID,
    request: CollectionItemsRequest,
    repo: CollectionRepository = Depends(get_collection_repository),
) -> CollectionItemsResponse:
    """Remove entries from a collection."""
    collection = await get_collection_or_404(repo, collection_id)
    removed = await repo.remove_items(collection, request.prompt_ids)

    return CollectionItemsResponse(
        changed=removed,
        item_count=await repo.count_items(collection.id),
        cover_image=collection.cover_image,
    )
