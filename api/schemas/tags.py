"""
Tag schemas.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class TagInfo(BaseModel):
    name: str
    count: int
    last_used_at: datetime


class TagListResponse(BaseModel):
    tags: list[TagInfo]


class AutoTagRequest(BaseModel):
    prompt_ids: list[UUID] = Field(..., min_length=1, max_length=50)


class AutoTagResult(BaseModel):
    id: UUID
    success: bool
    added_tags: list[str] = Field(default_factory=list)
    error: str | None = None


class AutoTagResponse(BaseModel):
    success: bool = True
    processed: int
    success_count: int
    results: list[AutoTagResult]
