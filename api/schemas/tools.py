"""
AI tool schemas: prompt enhancement, translation and image description.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field


class EnhanceRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=4000)


class EnhanceResponse(BaseModel):
    original: str
    enhanced: str
    enhanced_zh: str = ""
    additions: dict[str, Any] = Field(default_factory=dict)
    prompt_score: dict[str, Any] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)


class TranslateRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=4000)
    target_lang: Literal["en", "zh", "zh-TW"] = "en"


class TranslateResponse(BaseModel):
    original: str
    translated: str
    enhanced: str = ""
    keywords: list[str] = Field(default_factory=list)
    summary: str = ""


class DescribeRequest(BaseModel):
    image: str = Field(..., min_length=1, description="Base64 image or data URL")


class DescribeResponse(BaseModel):
    prompt: str
    prompt_zh: str = ""
    tags: list[str] = Field(default_factory=list)
    style: str = ""
    mood: str = ""
    category: str = ""
