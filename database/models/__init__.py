"""
SQLAlchemy models for Prompt Gallery.
"""

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from .collection import Collection, collection_prompts
from .prompt import PromptEntry
from .tag import Tag
from .template import PromptTemplate

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    # Models
    "PromptEntry",
    "Tag",
    "Collection",
    "collection_prompts",
    "PromptTemplate",
]
