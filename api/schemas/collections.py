"""
Collection schemas.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from api.schemas.prompts import PromptInfo


class CollectionInfo(BaseModel):
    id: UUID
    name: str
    description: str | None = None
    cover_image: str | None = None
    item_count: int = 0
    created_at: datetime
    updated_at: datetime


class CollectionDetail(CollectionInfo):
    prompts: list[PromptInfo] = Field(default_factory=list)


class CreateCollectionRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None


class UpdateCollectionRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    cover_image: str | None = Field(default=None, description="Set the cover manually")


class CollectionItemsRequest(BaseModel):
    prompt_ids: list[UUID] = Field(..., min_length=1)


class CollectionItemsResponse(BaseModel):
    success: bool = True
    changed: int = Field(..., description="Links added or removed")
    item_count: int
    cover_image: str | None = None
