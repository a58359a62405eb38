"""
Services module for Prompt Gallery.
"""
from .gemini_image import EngineType, GeminiImageService, ImageGenerationResult
from .gemini_text import GeminiTextService
from .image_storage import ImageStorage, StoredImage
from .prompt_filter import EngineMode, FilterResult, SceneCategory, analyze, compose

__all__ = [
    "EngineType",
    "GeminiImageService",
    "ImageGenerationResult",
    "GeminiTextService",
    "ImageStorage",
    "StoredImage",
    "EngineMode",
    "FilterResult",
    "SceneCategory",
    "analyze",
    "compose",
]
