"""
Backup export/import and batch image import schemas.
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field


class BackupItem(BaseModel):
    """One exported entry. Also accepted on import."""

    id: str | None = None
    prompt: str | None = None
    original_prompt: str | None = None
    prompt_zh: str | None = None
    negative_prompt: str | None = None
    image_url: str | None = Field(
        default=None,
        description="Data URL, /uploads path or remote http(s) URL",
    )
    width: int | None = None
    height: int | None = None
    tags: str | None = None
    is_favorite: bool = False
    seed: int | None = None
    cfg_scale: float | None = None
    steps: int | None = None
    sampler: str | None = None
    created_at: datetime | None = None


class BackupExport(BaseModel):
    export_date: datetime
    total_items: int
    items: list[BackupItem]


class ImportRequest(BaseModel):
    items: list[BackupItem]


class ImportResponse(BaseModel):
    success: bool = True
    imported: int
    skipped: int
    total: int


class BatchImportFile(BaseModel):
    """An image file to catalogue, as base64 or a data URL."""

    image: str = Field(..., min_length=1)
    filename: str = "image.png"


class BatchImportRequest(BaseModel):
    files: list[BatchImportFile] = Field(..., min_length=1, max_length=20)


class ImageAnalysis(BaseModel):
    style: str = ""
    mood: str = ""
    category: str = ""


class BatchImportResult(BaseModel):
    status: Literal["success", "error"]
    filename: str
    id: UUID | None = None
    analysis: ImageAnalysis | None = None
    error: str | None = None


class BatchImportSummary(BaseModel):
    total: int
    success: int
    failed: int


class BatchImportResponse(BaseModel):
    results: list[BatchImportResult]
    summary: BatchImportSummary
