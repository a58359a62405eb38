"""
Prompt templates router.

Endpoints:
- GET /api/templates - List templates, optionally by category
- GET /api/templates/categories - List categories
"""

import logging

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_template_repository
from api.schemas.templates import (
    TemplateCategoriesResponse,
    TemplateInfo,
    TemplateListResponse,
)
from database.repositories import TemplateRepository
from services.prompt_templates import TEMPLATE_CATEGORIES, get_builtin_templates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("", response_model=TemplateListResponse)
async def list_templates(
    category: str | None = Query(default=None),
    repo: TemplateRepository | None = Depends(get_template_repository),
) -> TemplateListResponse:
    """
    List templates.

    Stored templates win; when none are stored (or the database is off)
    the built-in set is returned.
    """
    if repo is not None and await repo.count() > 0:
        rows = await repo.list_templates(category=category)
        return TemplateListResponse(
            templates=[
                TemplateInfo(
                    category=t.category,
                    name=t.name,
                    prompt=t.prompt,
                    description=t.description,
                )
                for t in rows
            ],
            source="database",
        )

    return TemplateListResponse(
        templates=[TemplateInfo(**t.to_dict()) for t in get_builtin_templates(category)],
        source="builtin",
    )


@router.get("/categories", response_model=TemplateCategoriesResponse)
async def list_categories(
    repo: TemplateRepository | None = Depends(get_template_repository),
) -> TemplateCategoriesResponse:
    """List template categories."""
    if repo is not None and await repo.count() > 0:
        return TemplateCategoriesResponse(categories=await repo.list_categories())
    return TemplateCategoriesResponse(categories=[str(c) for c in TEMPLATE_CATEGORIES])
