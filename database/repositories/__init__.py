"""
Repository layer for database access.

Provides async CRUD operations for all models.
"""

from .collection_repo import CollectionRepository
from .prompt_repo import PromptRepository
from .tag_repo import TagRepository
from .template_repo import TemplateRepository

__all__ = [
    "PromptRepository",
    "TagRepository",
    "CollectionRepository",
    "TemplateRepository",
]
