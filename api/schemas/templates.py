"""
Prompt template schemas.
"""

from pydantic import BaseModel, Field


class TemplateInfo(BaseModel):
    category: str
    name: str
    prompt: str = Field(..., description='Contains a "[subject]" placeholder')
    description: str | None = None


class TemplateListResponse(BaseModel):
    templates: list[TemplateInfo]
    source: str = Field(..., description='"database" or "builtin"')


class TemplateCategoriesResponse(BaseModel):
    categories: list[str]
